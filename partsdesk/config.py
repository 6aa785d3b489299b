# partsdesk/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./partsdesk.db"
    DB_ECHO: bool = False

    # Public portal used to build quote share links
    QUOTE_SHARE_BASE_URL: str = "https://portal.konipa.com"
    QUOTE_DEFAULT_EXPIRY_DAYS: int = 30

    # Reject orders that exceed a client's monthly stock limit
    ENFORCE_STOCK_LIMITS: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[Path] = None

    FRONTEND_URL: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=str(env_path),
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
