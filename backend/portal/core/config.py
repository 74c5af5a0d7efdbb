# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Application settings loaded from environment variables and an optional .env file
"""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global configuration for the portal backend"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    PROJECT_NAME: str = "Community Portal"
    API_PREFIX: str = "/api"

    # Database
    DATABASE_URL: str = "sqlite:///./portal.db"
    DATABASE_ECHO: bool = False
    # Create tables and seed data on startup instead of running alembic
    DATABASE_AUTO_INIT: bool = False

    # JWT
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # One-time password login
    OTP_LENGTH: int = 4
    OTP_EXPIRE_MINUTES: int = 5
    OTP_MAX_ATTEMPTS: int = 3
    # Codes a single mobile number may request per window
    OTP_REQUEST_LIMIT: int = 10
    OTP_REQUEST_WINDOW_MINUTES: int = 15

    # Listing defaults
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Seeded by init_db when set and missing
    FIRST_ADMIN_NAME: str = "Administrator"
    FIRST_ADMIN_MOBILE: Optional[str] = None

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]


settings = Settings()
