"""
Configuration management for the auth service
"""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Auth service configuration loaded from environment variables"""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Database
    DATABASE_URL: str = "sqlite:///./auth.db"

    # Signing keys. The private key signs access tokens (RS256), the public
    # key verifies them and is published as a JWK for peer services.
    PRIVATE_KEY_PATH: str = "certs/privateKey.pem"
    PUBLIC_KEY_PATH: str = "certs/publicKey.pem"
    REFRESH_TOKEN_SECRET: str = "change-this-refresh-secret-in-prod-0123456789"
    TOKEN_ISSUER: str = "auth-service"

    ACCESS_TOKEN_EXPIRE_SECONDS: int = 60 * 60
    # Fixed 365 day offset, leap years are not accounted for
    REFRESH_TOKEN_EXPIRE_DAYS: int = 365
    ROTATE_REFRESH_TOKENS: bool = True

    # Cookies
    COOKIE_DOMAIN: str = "localhost"

    # pbkdf2 work factor (higher = slower hashing)
    PASSWORD_HASH_ROUNDS: int = 29000

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
