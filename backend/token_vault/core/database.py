from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from token_vault.core.config import settings


class Base(DeclarativeBase):
    pass


def connect_args_for(db_url: str) -> dict:
    """Driver arguments that put an upper bound on every lookup and insert."""
    timeout = settings.db_statement_timeout_seconds
    if db_url.startswith("sqlite"):
        # pysqlite waits this long for a competing writer's lock before failing.
        return {"check_same_thread": False, "timeout": settings.db_busy_timeout_seconds}
    if db_url.startswith("postgresql"):
        return {
            "connect_timeout": max(int(timeout), 1),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    if db_url.startswith(("mysql", "mariadb")):
        seconds = max(int(timeout), 1)
        return {"connect_timeout": seconds, "read_timeout": seconds, "write_timeout": seconds}
    return {}


def build_engine(db_url: str) -> Engine:
    if db_url.startswith("sqlite"):
        return create_engine(db_url, connect_args=connect_args_for(db_url), future=True)
    return create_engine(
        db_url,
        connect_args=connect_args_for(db_url),
        pool_pre_ping=True,
        pool_timeout=settings.db_pool_timeout_seconds,
        future=True,
    )


engine = build_engine(settings.db_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
