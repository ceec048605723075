# account_service/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./accounts.db"

    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Registration policy. Set as JSON in the environment, e.g. '["acme.com", "acme.org"]'
    ALLOWED_EMAIL_DOMAINS: List[str] = ["acme.com"]
    PASSWORD_MIN_LENGTH: int = 12

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env" # Specifies the .env file to load variables from

@lru_cache() # Cache the settings object so .env is read only once
def get_settings():
    return Settings()

settings = get_settings()
