from __future__ import annotations

from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from token_vault.models.token_mapping import Category, TokenMapping


class MappingConflictError(Exception):
    """An insert lost to an existing row on (plaintext, category) or (token, category)."""

    def __init__(self, category: Category):
        self.category = category
        super().__init__(f"Mapping already exists for category {category.value}")


class MappingStore(Protocol):
    def find_by_plaintext(self, plaintext: str, category: Category) -> list[TokenMapping]: ...

    def find_by_token(self, token: str, category: Category) -> list[TokenMapping]: ...

    def insert(self, mapping: TokenMapping) -> TokenMapping: ...


class SqlMappingStore:
    """MappingStore over a SQLAlchemy session.

    Uniqueness is left to the table constraints; a violated constraint
    surfaces as MappingConflictError with the session already rolled back.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_plaintext(self, plaintext: str, category: Category) -> list[TokenMapping]:
        return (
            self.db.query(TokenMapping)
            .filter(TokenMapping.plaintext == plaintext, TokenMapping.category == category)
            .order_by(TokenMapping.id.asc())
            .all()
        )

    def find_by_token(self, token: str, category: Category) -> list[TokenMapping]:
        return (
            self.db.query(TokenMapping)
            .filter(TokenMapping.token == token, TokenMapping.category == category)
            .order_by(TokenMapping.id.asc())
            .all()
        )

    def insert(self, mapping: TokenMapping) -> TokenMapping:
        self.db.add(mapping)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise MappingConflictError(mapping.category) from exc
        except BaseException:
            self.db.rollback()
            raise
        return mapping
