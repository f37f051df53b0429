from token_vault.models.token_mapping import Category, TokenMapping

__all__ = [
    "Category",
    "TokenMapping",
]
