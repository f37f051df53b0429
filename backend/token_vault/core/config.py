from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_BACKEND_DIR = Path(__file__).resolve().parents[2]
_REPO_ROOT = _BACKEND_DIR.parent


class Settings(BaseSettings):
    app_name: str = "Token Vault"
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    db_url: str = "sqlite:///./token_vault.db"
    db_busy_timeout_seconds: float = 5.0
    db_pool_timeout_seconds: float = 30.0
    db_statement_timeout_seconds: float = 10.0
    system_name: str = "token-vault"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TV_",
        env_file=[_BACKEND_DIR / ".env", _REPO_ROOT / ".env"],
        extra="ignore",
    )


settings = Settings()
