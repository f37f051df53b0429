from pydantic import BaseModel, Field

from token_vault.models.token_mapping import Category


class TokenizeRequest(BaseModel):
    plaintext: str = Field(min_length=1, max_length=255)
    category: Category


class DetokenizeRequest(BaseModel):
    token: str = Field(min_length=1, max_length=64)
    category: Category
