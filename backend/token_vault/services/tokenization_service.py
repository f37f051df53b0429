from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from token_vault.core.config import settings
from token_vault.core.hashing import generate_token
from token_vault.core.validators import is_valid_id_number, is_valid_phone
from token_vault.models.token_mapping import Category, TokenMapping
from token_vault.services.mapping_store import MappingConflictError, MappingStore, SqlMappingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_VALIDATORS: dict[Category, Callable[[object], bool]] = {
    Category.ID_NUMBER: is_valid_id_number,
    Category.PHONE: is_valid_phone,
}


class TokenizationError(Exception):
    status_code = 400

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class InvalidFormatError(TokenizationError):
    def __init__(self, category: Category):
        self.category = category
        code = 7001 if category is Category.ID_NUMBER else 7002
        super().__init__(code, f"Invalid {category.value} format")


class UnsupportedCategoryError(TokenizationError):
    def __init__(self, category: str):
        self.category = category
        super().__init__(7003, f"Category not supported for tokenization: {category}")


class MappingNotFoundError(TokenizationError):
    status_code = 404

    def __init__(self, token: str, category: Category):
        self.token = token
        self.category = category
        super().__init__(7004, f"No {category.value} mapping for token {token}")


class AmbiguousMappingError(TokenizationError):
    status_code = 500

    def __init__(self, category: Category, matches: int):
        self.category = category
        self.matches = matches
        super().__init__(7005, f"Ambiguous {category.value} mapping: {matches} rows match")


class StoreUnavailableError(TokenizationError):
    status_code = 503

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(7006, f"Mapping store unavailable during {operation}")


def _coerce_category(category: Category | str) -> Category:
    try:
        return Category(category)
    except ValueError as exc:
        raise UnsupportedCategoryError(str(category)) from exc


class TokenizationService:
    """Tokenize and detokenize values against a MappingStore.

    The service keeps no state between calls. Concurrent first-time inserts of
    the same value are settled by the store's unique constraints; the losing
    call re-reads the winning row once.
    """

    def __init__(self, store: MappingStore, system_name: str):
        self.store = store
        self.system_name = system_name

    def tokenize(
        self, plaintext: str, category: Category | str, created_by: str | None = None
    ) -> str:
        category = _coerce_category(category)
        validator = _VALIDATORS.get(category)
        if validator is None:
            raise UnsupportedCategoryError(category.value)
        if not validator(plaintext):
            raise InvalidFormatError(category)

        rows = self._store_call(
            "lookup", lambda: self.store.find_by_plaintext(plaintext, category)
        )
        if len(rows) == 1:
            logger.info("tokenize category=%s mapping_id=%s existing", category.value, rows[0].id)
            return rows[0].token
        if rows:
            raise self._ambiguous(category, len(rows))

        token = generate_token(plaintext)
        mapping = TokenMapping(
            plaintext=plaintext,
            token=token,
            category=category,
            created_at=datetime.now(timezone.utc),
            created_by=created_by or self.system_name,
        )
        try:
            self._store_call("insert", lambda: self.store.insert(mapping))
        except MappingConflictError:
            logger.warning("tokenize category=%s lost insert race, re-reading", category.value)
            return self._reconcile(plaintext, category)
        logger.info("tokenize category=%s mapping_id=%s created", category.value, mapping.id)
        return token

    def detokenize(self, token: str, category: Category | str) -> str:
        category = _coerce_category(category)
        rows = self._store_call("lookup", lambda: self.store.find_by_token(token, category))
        if not rows:
            raise MappingNotFoundError(token, category)
        if len(rows) > 1:
            raise self._ambiguous(category, len(rows))
        logger.info("detokenize category=%s mapping_id=%s", category.value, rows[0].id)
        return rows[0].plaintext

    def _reconcile(self, plaintext: str, category: Category) -> str:
        rows = self._store_call(
            "lookup", lambda: self.store.find_by_plaintext(plaintext, category)
        )
        if len(rows) != 1:
            # Zero rows means the conflicting row was on the token side or vanished.
            raise self._ambiguous(category, len(rows))
        return rows[0].token

    def _ambiguous(self, category: Category, matches: int) -> AmbiguousMappingError:
        logger.error(
            "uniqueness violated in mapping store: category=%s matches=%d",
            category.value,
            matches,
        )
        return AmbiguousMappingError(category, matches)

    def _store_call(self, operation: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except SQLAlchemyError as exc:
            logger.error("mapping store %s failed: %s", operation, exc.__class__.__name__)
            raise StoreUnavailableError(operation) from exc


def build_service(db: Session) -> TokenizationService:
    return TokenizationService(SqlMappingStore(db), settings.system_name)
