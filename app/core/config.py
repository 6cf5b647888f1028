# app/core/config.py
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ===== MongoDB =====
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "classroom"

    # ===== JWT (emesso dal servizio di identità esterno) =====
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60

    # ===== Paginazione =====
    default_page_limit: int = 10
    max_page_limit: int = 100

    # ===== Application =====
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
