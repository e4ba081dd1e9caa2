"""Application configuration and environment settings"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (prefix FUNDRAISER_)"""
    APP_NAME: str = Field("FundRaise Pro", description="Name shown in the API docs and startup log")

    # Server
    HOST: str = Field("0.0.0.0", description="Interface uvicorn binds to")
    PORT: int = Field(3001, description="Port uvicorn listens on")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    # Data
    SEED_DEMO_DATA: bool = Field(True, description="Register the demo fundraisers on startup")
    REWARD_CATALOG_PATH: Optional[str] = Field(None, description="JSON file replacing the default reward tiers")

    # Query defaults
    LEADERBOARD_DEFAULT_LIMIT: int = Field(10, description="Entries returned by /leaderboard/top when the limit is unusable")
    RECENT_DONATIONS_LIMIT: int = Field(5, description="Donations listed in a user's stats")

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_prefix='FUNDRAISER_',
        extra='ignore',
    )


settings = Settings()
