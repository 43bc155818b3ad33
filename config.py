"""
Application configuration
Environment variables and settings (.env supported)
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # ==================== APP ====================
    APP_NAME: str = "PKI 2FA Service"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # ==================== FILES ====================
    SEED_FILE_PATH: str = "/data/seed.txt"
    # First existing path wins: container, local app/ folder, repo root
    PRIVATE_KEY_PATHS: List[str] = [
        "/app/student_private.pem",
        "app/student_private.pem",
        "student_private.pem",
    ]
    PUBLIC_KEY_PATH: str = "student_public.pem"
    ENCRYPTED_SEED_PATH: str = "encrypted_seed.txt"

    # ==================== TOTP ====================
    TOTP_PERIOD: int = 30
    TOTP_DIGITS: int = 6
    TOTP_VALID_WINDOW: int = 1
    # label shown by authenticator apps, issuer is APP_NAME
    TOTP_ACCOUNT_NAME: str = "student"

    # ==================== SEED ISSUER ====================
    SEED_API_URL: Optional[str] = None
    STUDENT_ID: Optional[str] = None
    GITHUB_REPO_URL: Optional[str] = None
    REQUEST_TIMEOUT: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Global settings instance
settings = get_settings()
