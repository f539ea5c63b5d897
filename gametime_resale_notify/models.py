"""Data models and types for the Gametime Resale Notifier."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, List, Dict

from .schema import Listing
from .tracker import PriceHistory, PriceTrend

NO_SEATS = "NO_SEATS"
ERROR = "ERROR"

DEFAULT_LISTINGS_URL = "https://mobile.gametime.co/v2/listings/{event_id}"


@dataclass(frozen=True)
class WatchConfig:
    """What to look for on the resale platform. Fixed for the lifetime of a run."""
    event_id: str
    event_name: str = "Event"
    platform_name: str = "Gametime"
    seats_together: int = 2
    max_all_in_price_per_seat: float = 350.0  # dollars
    section_patterns: Tuple[str, ...] = ("^PR", "^1")
    section_group_patterns: Tuple[str, ...] = ("^Premier", "^Loge", "^Baseline")
    max_return_list: int = 10
    min_error_count: int = 4
    notify_interval_minutes: float = 15.0


@dataclass
class Notification:
    """Represents a notification to be sent."""
    title: str
    message: str
    priority: int = 3  # 1=min, 3=default, 5=max
    tags: Optional[List[str]] = None


@dataclass
class FetcherConfig:
    """Configuration for the listings fetcher."""
    listings_url: str = DEFAULT_LISTINGS_URL
    timeout: float = 30.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/114.0.0.0 Safari/537.36"
    )
    params: Dict[str, str] = field(default_factory=lambda: {
        "sort_order": "low_to_high",
        "all_in_pricing": "false",
    })


@dataclass
class NotificationConfig:
    """Configuration for notifications."""
    enabled: bool = True
    service: str = "ntfy"  # 'ntfy' or 'pushover'
    topic: Optional[str] = None
    pushover_token: Optional[str] = None
    pushover_user: Optional[str] = None
    retry_attempts: int = 3
    retry_delay: int = 5  # seconds


@dataclass
class AppConfig:
    """Main application configuration."""
    watch: WatchConfig
    check_interval: Tuple[float, float] = (1.0, 2.0)  # min, max in minutes
    log_level: str = "INFO"
    fetcher: FetcherConfig = field(default_factory=FetcherConfig)
    notification: NotificationConfig = field(default_factory=NotificationConfig)


@dataclass
class RunState:
    """Mutable state carried between ticks by a single monitor."""
    qualifying_listings: List[Listing] = field(default_factory=list)
    price_history: PriceHistory = field(default_factory=PriceHistory)
    last_notification_at: Optional[datetime] = None
    consecutive_error_count: int = 0
    hard_error: bool = False
    status_message: str = NO_SEATS


@dataclass(frozen=True)
class StatusSnapshot:
    """The last fully completed tick, as seen by status readers."""
    message: str = NO_SEATS
    hard_error: bool = False

    @property
    def status(self) -> str:
        return ERROR if self.hard_error else self.message


@dataclass(frozen=True)
class TickResult:
    """Outcome of a single check."""
    ok: bool
    qualifying: int = 0
    lowest_price: Optional[float] = None
    trend: Optional[PriceTrend] = None
    notified: bool = False
