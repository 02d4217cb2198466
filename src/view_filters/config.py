"""Filter engine settings, read from the environment and an optional .env file."""

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Filter engine settings."""

    model_config = SettingsConfigDict(env_prefix="VIEW_FILTERS_", extra="ignore")

    # Relative dates
    timezone: str = "UTC"
    first_day_of_week: int = 6  # Python weekday numbering, 6 = Sunday

    # Text matching
    regex_options: str = "i"

    # Logging
    logging_level: str = "INFO"

    @field_validator("first_day_of_week")
    @classmethod
    def validate_first_day_of_week(cls, v: int) -> int:
        if not 0 <= v <= 6:
            raise ValueError("first_day_of_week must be between 0 (Monday) and 6 (Sunday)")
        return v


settings = Settings()
