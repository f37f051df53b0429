import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from token_vault.core.database import Base


class Category(str, enum.Enum):
    PHONE = "PHONE"
    USER_NAME = "USER_NAME"
    ID_NUMBER = "ID_NUMBER"
    PASSWORD = "PASSWORD"


class TokenMapping(Base):
    __tablename__ = "token_mappings"
    __table_args__ = (
        UniqueConstraint("plaintext", "category", name="uq_token_mappings_plaintext_category"),
        UniqueConstraint("token", "category", name="uq_token_mappings_token_category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plaintext: Mapped[str] = mapped_column(String(255), nullable=False)
    token: Mapped[str] = mapped_column(String(64), nullable=False)
    category: Mapped[Category] = mapped_column(
        Enum(Category, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
