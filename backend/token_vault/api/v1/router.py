from fastapi import APIRouter

from token_vault.api.v1.tokens import router as tokens_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(tokens_router, tags=["tokens"])
