from datetime import datetime, timezone

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from token_vault.models.token_mapping import Category, TokenMapping
from token_vault.services.mapping_store import MappingConflictError, SqlMappingStore


def _mapping(plaintext: str, token: str, category: Category = Category.PHONE) -> TokenMapping:
    return TokenMapping(
        plaintext=plaintext,
        token=token,
        category=category,
        created_at=datetime.now(timezone.utc),
        created_by="tests",
    )


def test_insert_assigns_id_and_lookups_find_the_row(db):
    store = SqlMappingStore(db)
    row = store.insert(_mapping("13800138000", "tok-1"))
    assert row.id is not None

    by_plaintext = store.find_by_plaintext("13800138000", Category.PHONE)
    by_token = store.find_by_token("tok-1", Category.PHONE)
    assert [item.id for item in by_plaintext] == [row.id]
    assert [item.plaintext for item in by_token] == ["13800138000"]


def test_lookups_are_scoped_by_category(db):
    store = SqlMappingStore(db)
    store.insert(_mapping("13800138000", "tok-1", Category.PHONE))

    assert store.find_by_plaintext("13800138000", Category.ID_NUMBER) == []
    assert store.find_by_token("tok-1", Category.ID_NUMBER) == []


def test_same_value_may_exist_under_two_categories(db):
    store = SqlMappingStore(db)
    store.insert(_mapping("shared", "tok-a", Category.USER_NAME))
    store.insert(_mapping("shared", "tok-b", Category.PASSWORD))

    assert len(store.find_by_plaintext("shared", Category.USER_NAME)) == 1
    assert len(store.find_by_plaintext("shared", Category.PASSWORD)) == 1


def test_same_token_may_exist_under_two_categories(db):
    store = SqlMappingStore(db)
    store.insert(_mapping("alice", "tok-same", Category.USER_NAME))
    store.insert(_mapping("alice-pw", "tok-same", Category.PASSWORD))

    assert len(store.find_by_token("tok-same", Category.USER_NAME)) == 1


def test_duplicate_plaintext_in_category_is_a_conflict(db):
    store = SqlMappingStore(db)
    store.insert(_mapping("13800138000", "tok-1"))

    with pytest.raises(MappingConflictError) as exc_info:
        store.insert(_mapping("13800138000", "tok-2"))
    assert exc_info.value.category is Category.PHONE
    assert isinstance(exc_info.value.__cause__, IntegrityError)
    assert len(store.find_by_plaintext("13800138000", Category.PHONE)) == 1


def test_duplicate_token_in_category_is_a_conflict(db):
    store = SqlMappingStore(db)
    store.insert(_mapping("13800138000", "tok-1"))

    with pytest.raises(MappingConflictError):
        store.insert(_mapping("13900139000", "tok-1"))
    assert store.find_by_plaintext("13900139000", Category.PHONE) == []


def test_session_is_usable_after_a_conflict(db):
    store = SqlMappingStore(db)
    store.insert(_mapping("13800138000", "tok-1"))
    with pytest.raises(MappingConflictError):
        store.insert(_mapping("13800138000", "tok-1"))

    row = store.insert(_mapping("13900139000", "tok-2"))
    assert row.id is not None


def test_create_all_builds_the_complete_mapping_table(engine):
    inspector = inspect(engine)
    columns = {column["name"] for column in inspector.get_columns("token_mappings")}
    uniques = {
        tuple(item["column_names"]) for item in inspector.get_unique_constraints("token_mappings")
    }
    indexes = {item["name"] for item in inspector.get_indexes("token_mappings")}

    assert {"created_by", "updated_at", "updated_by"} <= columns
    assert uniques == {("plaintext", "category"), ("token", "category")}
    assert "ix_token_mappings_category" in indexes
