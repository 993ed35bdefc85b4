import os
from typing import Dict, List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    APP_NAME: str = "Support Desk"

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = 60 * 24  # 24 hours default
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Full URL wins over the DB_* parts (used by tests with sqlite)
    DATABASE_URL: Optional[str] = None
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASS: str = os.getenv("DB_PASS", "postgres")
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_NAME: str = os.getenv("DB_NAME", "support_desk")
    DB_SSLMODE: Optional[str] = os.getenv("DB_SSLMODE", "require")
    DB_POOL_SIZE: int = 2
    DB_MAX_OVERFLOW: int = 2

    CORS_ORIGINS: List[str] = [
        "http://localhost:8080",
        "http://127.0.0.1:8001",
        "http://127.0.0.1:8002",
    ]

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = "logs"
    LOG_MAX_BYTES: int = 5 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # Attachments
    MAX_ATTACHMENT_SIZE_MB: float = 10
    ALLOWED_ATTACHMENT_TYPES: List[str] = [
        "application/pdf",
        "image/png",
        "image/jpeg",
        "image/gif",
        "text/plain",
        "text/csv",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]

    # Geolocation / markets
    DEFAULT_MARKET: str = "US"
    # Units of currency per 1 USD
    CURRENCY_RATES: Dict[str, float] = {
        "USD": 1.0,
        "BRL": 5.0,
        "EUR": 0.92,
        "GBP": 0.79,
        "INR": 83.0,
        "MXN": 17.0,
        "CAD": 1.36,
    }

    # Seed account created by shared/data/saas_admin_insert.py
    SAAS_ADMIN_EMAIL: str = "admin@supportdesk.io"
    SAAS_ADMIN_PASSWORD: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()


def build_database_url() -> str:
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    url = (
        f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}"
        f"@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
    )
    if settings.DB_SSLMODE:
        url += f"?sslmode={settings.DB_SSLMODE}"
    return url


DATABASE_URL = build_database_url()
