"""Pydantic schemas."""

from token_vault.schemas.tokens import DetokenizeRequest, TokenizeRequest

__all__ = [
    "DetokenizeRequest",
    "TokenizeRequest",
]
