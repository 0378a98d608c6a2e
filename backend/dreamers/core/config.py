from typing import Optional

from pydantic_settings import BaseSettings

from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Digital Dreamers Story API"
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # For local dev the game db lives next to the server:
    # DATABASE_URL=sqlite:///./.data/game.db
    DATABASE_URL: str = "sqlite:///./.data/game.db"

    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    ANTHROPIC_MODEL: str = "claude-3-opus-20240229"
    ANTHROPIC_VERSION: str = "2023-06-01"
    ANTHROPIC_MAX_TOKENS: int = 1000
    TEXT_TIMEOUT_SECONDS: Optional[float] = None

    # Leave the key empty to skip comic panel generation entirely
    REPLICATE_API_KEY: str = ""
    REPLICATE_BASE_URL: str = "https://api.replicate.com"
    REPLICATE_MODEL_VERSION: str = (
        "39ed52f2a78e934b3ba6e2a89f5b1c712de7dfea535525255b1aa35c5565e08b"
    )
    IMAGE_POLL_INTERVAL_SECONDS: float = 2.0
    IMAGE_POLL_MAX_ATTEMPTS: int = 30

    TERMINAL_PAGE: int = 5

    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_DIRECTORY: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
