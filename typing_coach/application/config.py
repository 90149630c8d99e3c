"""Application configuration using Pydantic Settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.entities.star_rating import StarRatingPolicy
from ..domain.entities.typing_session import TypingRules


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TYPING_COACH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "typing-coach"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Session history storage
    storage_backend: Literal["memory", "file", "dynamodb"] = "memory"
    storage_dir: str = ".typing-coach"
    storage_key: str = "typing-analytics-records"
    max_records: int = 250

    # AWS settings for the dynamodb backend
    aws_region: str = "us-east-1"
    records_table_name: str = "TypingCoachRecords"

    # Typing rules
    allow_backspace: bool = True
    block_on_error: bool = False
    advance_on_error: bool = False

    # Analytics
    recent_sessions_limit: int = 8
    analytics_window_days: int = 7

    # Keystroke analysis and scoring
    hesitation_threshold_ms: int = 800
    burst_window: int = 5
    default_target_wpm: int = 30

    def typing_rules(self) -> TypingRules:
        return TypingRules(
            allow_backspace=self.allow_backspace,
            block_on_error=self.block_on_error,
            advance_on_error=self.advance_on_error,
        )

    def star_policy(self) -> StarRatingPolicy:
        """Star policy used when a lesson does not define its own target speed."""
        return StarRatingPolicy(target_wpm=self.default_target_wpm)


# Create a singleton instance
settings = Settings()
