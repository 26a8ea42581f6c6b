"""
Configuration management for LogiTrack
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "LogiTrack"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Logging (DEBUG=True forces debug level)
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Database
    DATABASE_URL: str = "sqlite:///./logitrack.db"

    # Security
    SECRET_KEY: str = "logitrack-secret-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours

    # Session cookie carrying the access token
    SESSION_COOKIE_NAME: str = "logitrack_session"
    SESSION_COOKIE_SECURE: bool = False

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Seed data
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@logitrack.com"
    DEFAULT_ADMIN_PASSWORD: str = "adminpassword"
    SEED_SAMPLE_DATA: bool = True

    # Dashboard
    DASHBOARD_LIST_LIMIT: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
