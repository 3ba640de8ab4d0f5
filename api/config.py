"""API configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql+asyncpg://mealplan:mealplan@db:5432/mealplan"
    DB_ECHO: bool = False

    # Single reference frame for calendar-day comparisons
    TIMEZONE: str = "Asia/Kolkata"
    DEFAULT_TOTAL_DAYS: int = 7

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()
