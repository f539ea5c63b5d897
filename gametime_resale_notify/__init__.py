"""Gametime Resale Notifier package.

This package watches the resale listings of a single event, tracks the
lowest qualifying price and sends a notification when it reaches a new low.
"""

__version__ = "0.1.0"

# Import key components to make them available at the package level
from .app import ResaleMonitor
from .exceptions import ListingValidationError, ResaleNotifyError, TransportError
from .filters import ListingFilter
from .models import AppConfig, FetcherConfig, NotificationConfig, WatchConfig
from .notifications import NotificationManager, NtfyNotificationService, PushoverNotificationService
from .schema import Listing, parse_listings
from .tracker import PriceHistory, PriceTrend, classify_price

__all__ = [
    'ResaleMonitor',
    'ResaleNotifyError',
    'TransportError',
    'ListingValidationError',
    'ListingFilter',
    'AppConfig',
    'FetcherConfig',
    'NotificationConfig',
    'WatchConfig',
    'NotificationManager',
    'NtfyNotificationService',
    'PushoverNotificationService',
    'Listing',
    'parse_listings',
    'PriceHistory',
    'PriceTrend',
    'classify_price',
]
