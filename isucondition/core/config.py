from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "ISUCONDITION"
    environment: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./isucondition.db"
    session_secret_key: str = "isucondition"
    session_cookie: str = "isucondition_python"
    session_max_age: int = 60 * 60 * 24 * 30
    post_isucondition_target_base_url: str = "http://localhost:3000"
    default_jia_service_url: str = "http://localhost:5000"
    jia_request_timeout: float = 10.0
    default_icon_path: Path = PACKAGE_DIR / "static" / "NoImage.png"
    condition_limit: int = 20
    score_weight_info: int = 2
    score_weight_warning: int = 1
    score_weight_critical: int = 3
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="ISUCONDITION_", env_file=".env", extra="ignore")

    @field_validator("post_isucondition_target_base_url", "default_jia_service_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    return Settings()
