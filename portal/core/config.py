"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.

JWT_SECRET_KEY has no default: the app refuses to start without one.
"""

from functools import lru_cache
from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Values that show up in sample .env files and tutorials
PLACEHOLDER_SECRETS = {
    "change-this-secret",
    "change-me",
    "changeme",
    "secret",
    "fallback-secret-key",
    "your-secret-key-change-in-production",
}


class Settings(BaseSettings):
    # App
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "internship_portal"

    # JWT Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 7 * 24 * 60

    # Session cookie
    cookie_name: str = "token"
    cookie_samesite: str = "strict"

    # Google sign-in
    google_client_id: str = ""
    google_verify_timeout_seconds: float = 10.0

    # Cloudinary media host
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    upload_timeout_seconds: float = 30.0

    @field_validator("jwt_secret_key")
    @classmethod
    def reject_weak_secret(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_SECRET_KEY must be set")
        if v.strip().lower() in PLACEHOLDER_SECRETS:
            raise ValueError("JWT_SECRET_KEY is a well-known placeholder; set a real secret")
        return v

    @field_validator("cookie_samesite")
    @classmethod
    def check_samesite(cls, v: str) -> str:
        v = v.lower()
        if v not in {"strict", "lax", "none"}:
            raise ValueError("COOKIE_SAMESITE must be one of strict, lax, none")
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def cookie_max_age(self) -> int:
        """Cookie lifetime in seconds, same window as the token."""
        return self.jwt_expire_minutes * 60

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
