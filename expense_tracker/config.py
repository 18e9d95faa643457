from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./expenses.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_RECYCLE: int = 600

    # Security
    BCRYPT_ROUNDS: int = 12
    OWNERSHIP_ENFORCED: bool = True
    SEED_DEFAULT_USERS: bool = False

    # Logging
    LOG_FILE: str = "app.log"
    LOG_LEVEL: str = "DEBUG"
    LOG_ROTATION: str = "500 MB"

    # Server
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8080
    CORS_ORIGINS: List[str] = ["*"]

    # Housekeeping
    HOUSEKEEPING_ENABLED: bool = True
    KEEP_ALIVE_INTERVAL_SECONDS: int = 600
    MEMORY_CLEANUP_INTERVAL_SECONDS: int = 1800
    STATUS_REPORT_INTERVAL_SECONDS: int = 3600

    class Config:
        env_file = ".env"
        frozen = True


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
