from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """Application configuration with environment variable support"""

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    RELOAD: bool = False

    # Scenario generation settings
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    ENABLE_GENERATION: bool = True
    GENERATION_TEMPERATURE: float = 0.7
    GENERATION_MAX_TOKENS: int = 500  # two short scenarios fit in ~300 tokens
    GENERATION_TIMEOUT_SECONDS: float = 30.0
    MAX_CONCURRENT_GENERATIONS: int = 60  # one slot per catalog question

    # Localization
    DEFAULT_LOCALE: str = "en"
    MESSAGES_DIR: str = str(PACKAGE_DIR / "data" / "messages")

    # Sessions
    SESSION_MAX_AGE_HOURS: int = 24

    # CORS settings
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "*"  # Allow all origins in development
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
