"""Configuration settings using Pydantic with environment variables."""
import re
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import (
    DEFAULT_LISTINGS_URL,
    AppConfig,
    FetcherConfig,
    NotificationConfig,
    WatchConfig,
)

VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
VALID_SERVICES = {'ntfy', 'pushover'}


def split_list(value: str) -> Tuple[str, ...]:
    """Split a comma separated value, dropping blanks."""
    return tuple(item.strip() for item in value.split(',') if item.strip())


def parse_interval(value: str) -> Tuple[float, float]:
    """Parse a "min,max" interval in minutes."""
    try:
        min_val, max_val = map(float, value.split(','))
    except (ValueError, AttributeError) as e:
        raise ValueError('must be in format "min,max" (e.g., "1.0,2.0")') from e
    if min_val < 0 or max_val < min_val:
        raise ValueError('must satisfy 0 <= min <= max')
    return (min_val, max_val)


def check_patterns(patterns: Sequence[str]) -> Tuple[str, ...]:
    """Return the patterns as a tuple, raising ValueError if one does not compile."""
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f'invalid regex {pattern!r}: {e}') from e
    return tuple(patterns)


class Settings(BaseSettings):
    """Application settings with environment variable loading and validation."""

    model_config = SettingsConfigDict(case_sensitive=True, extra='ignore')

    # Required settings
    EVENT_ID: str = Field(
        ...,
        min_length=1,
        description="Event id, the last path segment of the Gametime event URL"
    )

    # Optional settings with defaults
    EVENT_NAME: str = Field("Event", description="Display name of the event")
    PLATFORM_NAME: str = Field("Gametime", description="Name of the resale platform")
    SEATS_TOGETHER: int = Field(2, ge=1, description="Number of seats that must be bought together")
    MAX_ALL_IN_PRICE_PER_SEAT: float = Field(
        350.0,
        gt=0,
        description="Highest acceptable price per seat, fees included, in dollars"
    )
    SECTION_PATTERNS: str = Field(
        "^PR,^1",
        description="Comma separated regexes matched against section codes"
    )
    SECTION_GROUP_PATTERNS: str = Field(
        "^Premier,^Loge,^Baseline",
        description="Comma separated regexes matched against section group names"
    )
    MAX_RETURN_LIST: int = Field(10, ge=1, description="Maximum number of listings to report")
    MIN_ERROR_COUNT: int = Field(
        4,
        ge=1,
        description="Consecutive failed checks before reporting ERROR"
    )
    NOTIFY_INTERVAL_MINUTES: float = Field(
        15.0,
        ge=0,
        description="Minimum minutes between notifications"
    )
    CHECK_INTERVAL_MIN: str = Field(
        "1.0,2.0",
        description="Random interval range in minutes between checks"
    )
    LISTINGS_URL: str = Field(
        DEFAULT_LISTINGS_URL,
        description="Listings endpoint, with an {event_id} placeholder"
    )
    REQUEST_TIMEOUT: float = Field(30.0, gt=0, description="HTTP timeout in seconds")
    NOTIFY_SERVICE: str = Field("ntfy", description="Notification service (ntfy or pushover)")
    NTFY_TOPIC: Optional[str] = Field(None, description="ntfy.sh topic for notifications")
    PUSHOVER_TOKEN: Optional[str] = Field(None, description="Pushover application token")
    PUSHOVER_USER: Optional[str] = Field(None, description="Pushover user key")
    MAX_RETRIES: int = Field(3, ge=1, description="Attempts per notification")
    RETRY_DELAY: int = Field(5, ge=0, description="Initial delay between retries in seconds")
    LOG_LEVEL: str = Field(
        "INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @field_validator('SECTION_PATTERNS', 'SECTION_GROUP_PATTERNS')
    @classmethod
    def validate_patterns(cls, v):
        """Check that every pattern compiles."""
        check_patterns(split_list(v))
        return v

    @field_validator('CHECK_INTERVAL_MIN')
    @classmethod
    def validate_check_interval(cls, v):
        parse_interval(v)
        return v

    @field_validator('LISTINGS_URL')
    @classmethod
    def validate_listings_url(cls, v):
        """Validate listings URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('LISTINGS_URL must start with http:// or https://')
        if '{event_id}' not in v:
            raise ValueError('LISTINGS_URL must contain an {event_id} placeholder')
        return v

    @field_validator('NOTIFY_SERVICE')
    @classmethod
    def validate_notify_service(cls, v):
        if v.lower() not in VALID_SERVICES:
            raise ValueError(f'NOTIFY_SERVICE must be one of {VALID_SERVICES}')
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Validate LOG_LEVEL is a valid logging level."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f'LOG_LEVEL must be one of {VALID_LOG_LEVELS}')
        return v.upper()

    def to_app_config(self) -> AppConfig:
        """Convert the flat settings into an AppConfig."""
        watch = WatchConfig(
            event_id=self.EVENT_ID,
            event_name=self.EVENT_NAME,
            platform_name=self.PLATFORM_NAME,
            seats_together=self.SEATS_TOGETHER,
            max_all_in_price_per_seat=self.MAX_ALL_IN_PRICE_PER_SEAT,
            section_patterns=split_list(self.SECTION_PATTERNS),
            section_group_patterns=split_list(self.SECTION_GROUP_PATTERNS),
            max_return_list=self.MAX_RETURN_LIST,
            min_error_count=self.MIN_ERROR_COUNT,
            notify_interval_minutes=self.NOTIFY_INTERVAL_MINUTES,
        )
        return AppConfig(
            watch=watch,
            check_interval=parse_interval(self.CHECK_INTERVAL_MIN),
            log_level=self.LOG_LEVEL,
            fetcher=FetcherConfig(
                listings_url=self.LISTINGS_URL,
                timeout=self.REQUEST_TIMEOUT,
            ),
            notification=NotificationConfig(
                enabled=True,
                service=self.NOTIFY_SERVICE,
                topic=self.NTFY_TOPIC,
                pushover_token=self.PUSHOVER_TOKEN,
                pushover_user=self.PUSHOVER_USER,
                retry_attempts=self.MAX_RETRIES,
                retry_delay=self.RETRY_DELAY,
            ),
        )


def create_default_config(event_id: str) -> AppConfig:
    """Create a default configuration for an event."""
    return AppConfig(watch=WatchConfig(event_id=event_id))


def load_config(
    env_file: Optional[Path] = None,
    *,
    section_patterns: Optional[Sequence[str]] = None,
    section_group_patterns: Optional[Sequence[str]] = None,
    **overrides: Any,
) -> AppConfig:
    """Load configuration from environment variables and an optional .env file.

    Args:
        env_file: Path of the .env file, ./.env by default.
        section_patterns: Section code regexes that replace SECTION_PATTERNS.
            Each item is used whole, so a pattern may contain commas.
        section_group_patterns: Section group regexes that replace
            SECTION_GROUP_PATTERNS, used the same way.
        **overrides: Setting values that take precedence over the environment,
            keyed by setting name (e.g. ``EVENT_ID``). ``None`` values are ignored.

    Raises:
        ConfigurationError: If a required value is missing or a value is invalid.
    """
    load_dotenv(dotenv_path=env_file or Path('.') / '.env')
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        settings = Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
    config = settings.to_app_config()

    watch_overrides = {}
    for name, patterns in (
        ('section_patterns', section_patterns),
        ('section_group_patterns', section_group_patterns),
    ):
        if patterns:
            try:
                watch_overrides[name] = check_patterns(patterns)
            except ValueError as e:
                raise ConfigurationError(f"Invalid configuration: {name}: {e}") from e
    if watch_overrides:
        config.watch = replace(config.watch, **watch_overrides)
    return config
