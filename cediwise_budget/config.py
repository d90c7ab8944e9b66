"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "cediwise-budget"
    log_level: str = "INFO"

    # Budgeting
    default_payday_day: int = 25  # used when a cycle request omits the payday


settings = Settings()
