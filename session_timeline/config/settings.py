from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    tick_interval_seconds: float = Field(
        default=60.0,
        validation_alias="TIMELINE_TICK_INTERVAL_SECONDS",
        description="Seconds between clock ticks that reclassify visible sessions",
    )
    minimum_block_minutes: int = Field(
        default=50,
        validation_alias="TIMELINE_MINIMUM_BLOCK_MINUTES",
        description="Minimum rendered height of a day-view block (one grid row)",
    )
    row_unit_minutes: int = Field(
        default=60,
        validation_alias="TIMELINE_ROW_UNIT_MINUTES",
        description="Minutes covered by one day-grid row",
    )
    scroll_lead_rows: int = Field(
        default=2,
        validation_alias="TIMELINE_SCROLL_LEAD_ROWS",
        description="Rows kept visible above the earliest session when auto-scrolling",
    )
    availability_edit_lead_hours: int = Field(
        default=24,
        validation_alias="TIMELINE_AVAILABILITY_EDIT_LEAD_HOURS",
        description="Hours ahead a date must start before its availability can be edited",
    )
    timezone: str | None = Field(
        default=None,
        validation_alias="TIMELINE_TIMEZONE",
        description="IANA zone for session instants; unset means naive wall-clock time",
    )
    log_level: str = Field(default="INFO", validation_alias="TIMELINE_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TIMELINE_",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid TIMELINE_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        """Validate that the timezone names a known IANA zone."""
        if value is None or not value.strip():
            return None
        try:
            ZoneInfo(value.strip())
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value.strip()

    @field_validator("tick_interval_seconds")
    @classmethod
    def validate_tick_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("TIMELINE_TICK_INTERVAL_SECONDS must be positive")
        return value

    @field_validator("minimum_block_minutes", "row_unit_minutes")
    @classmethod
    def validate_positive_minutes(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Grid sizes must be positive minute counts")
        return value

    @property
    def tzinfo(self) -> ZoneInfo | None:
        """Timezone object for session instants, or None for naive wall-clock time."""
        if self.timezone is None:
            return None
        return ZoneInfo(self.timezone)


settings = Settings()
