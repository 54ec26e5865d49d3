from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Homebase"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_URL: str = "http://localhost:3000"

    # Database
    # Default to a local sqlite file for development; override via .env in production.
    DATABASE_URL: str = "sqlite:///./homebase.db"
    DATABASE_CONNECT_TIMEOUT: int = 10  # seconds
    DATABASE_STATEMENT_TIMEOUT_MS: int = 15000
    DATABASE_CREATE_TABLES: bool = False

    # Session tokens issued by the identity provider
    AUTH_JWT_SECRET: str = ""
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_ISSUER: Optional[str] = None
    AUTH_JWT_AUDIENCE: Optional[str] = None
    AUTH_SESSION_COOKIE: str = "__session"

    # CSRF
    CSRF_SECRET: str = ""
    CSRF_TOKEN_TTL_SECONDS: int = 24 * 60 * 60

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # Billing provider
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    # Security event log; empty means stderr
    SECURITY_LOG_DIR: str = ""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), case_sensitive=True, extra="ignore"
    )


settings = Settings()
