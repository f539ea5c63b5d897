"""
Main application module for Gametime Resale Notifier.
"""
import asyncio
import logging
import random
import signal
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .exceptions import ResaleNotifyError
from .fetcher import ListingsFetcher
from .filters import ListingFilter
from .messages import build_status_message, format_price, notification_title
from .models import NO_SEATS, AppConfig, RunState, StatusSnapshot, TickResult
from .notifications import NotificationManager, create_notification_manager, notification_due
from .schema import Listing, parse_listings
from .tracker import PriceTrend

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ResaleMonitor:
    """Polls one event's resale listings and notifies on new lowest prices."""

    def __init__(
        self,
        config: AppConfig,
        fetcher: Optional[ListingsFetcher] = None,
        notification_manager: Optional[NotificationManager] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize with application configuration.

        Args:
            config: Application configuration.
            fetcher: Listings fetcher; built from the config when omitted.
            notification_manager: Notification manager; built from the config when omitted.
            clock: Returns the current time, used for notification throttling.
        """
        self.config = config
        self.watch = config.watch
        self.fetcher = fetcher or ListingsFetcher(self.watch.event_id, config.fetcher)
        self.notification_manager = notification_manager or create_notification_manager(config.notification)
        self.listing_filter = ListingFilter(self.watch)
        self.clock = clock
        self.state = RunState()
        self.shutdown_event = asyncio.Event()
        self.check_count = 0
        self._tick_lock = asyncio.Lock()
        # replaced as a whole at the end of every tick
        self._snapshot = StatusSnapshot()

    def get_status(self) -> str:
        """Return "ERROR" while in the hard error state, else the latest status message."""
        return self._snapshot.status

    def is_error(self) -> bool:
        return self._snapshot.hard_error

    def _publish(self) -> None:
        self._snapshot = StatusSnapshot(
            message=self.state.status_message,
            hard_error=self.state.hard_error,
        )

    async def check(self) -> TickResult:
        """Run one fetch, validate, filter, classify and notify cycle.

        Never raises; failures are counted and surface through get_status().
        """
        async with self._tick_lock:
            self.check_count += 1
            logger.info(
                f"🔍 Check #{self.check_count}: {self.watch.platform_name} listings "
                f"for {self.watch.event_name}"
            )
            try:
                document = await self.fetcher.fetch()
                listings = parse_listings(document)
                qualifying = self.listing_filter.filter_and_rank(listings.values())
            except ResaleNotifyError as e:
                return self._record_failure(e)
            except Exception as e:
                logger.error(f"Unexpected error while checking listings: {e}", exc_info=True)
                return self._record_failure(e)

            return await self._evaluate(qualifying)

    def _record_failure(self, error: Exception) -> TickResult:
        state = self.state
        state.consecutive_error_count += 1
        state.hard_error = state.consecutive_error_count >= self.watch.min_error_count
        state.qualifying_listings = []

        if state.hard_error:
            logger.error(
                f"❌ {state.consecutive_error_count} consecutive failed checks, "
                f"reporting ERROR. Last error: {error}"
            )
        else:
            logger.warning(
                f"⚠️ Check failed ({state.consecutive_error_count}/"
                f"{self.watch.min_error_count}): {error}"
            )
        self._publish()
        return TickResult(ok=False)

    async def _evaluate(self, qualifying: List[Listing]) -> TickResult:
        state = self.state
        watch = self.watch

        state.consecutive_error_count = 0
        state.hard_error = False
        state.qualifying_listings = qualifying

        if not qualifying:
            logger.info("❌ No seats found")
            state.status_message = NO_SEATS
            self._publish()
            return TickResult(ok=True)

        lowest = qualifying[0].all_in_price
        trend = state.price_history.record(lowest)
        result = TickResult(ok=True, qualifying=len(qualifying), lowest_price=lowest, trend=trend)

        if trend is not PriceTrend.NEW_LOW:
            self._log_trend(trend, lowest)
            state.status_message = build_status_message(watch, qualifying)
            self._publish()
            return result

        logger.info(f"⭐ New lowest price on {watch.platform_name}: {format_price(lowest)}")
        message = build_status_message(watch, qualifying, new_low=lowest)
        state.status_message = message
        self._publish()

        now = self.clock()
        if not notification_due(state.last_notification_at, now, watch.notify_interval_minutes):
            logger.info(
                f"Notification already sent within the last {watch.notify_interval_minutes:g} minutes."
            )
            return result

        # committed before sending; a failed send does not reopen the window
        state.last_notification_at = now
        sent = await self.notification_manager.send_notification(
            title=notification_title(watch),
            message=message,
            priority=4,
            tags=["ticket", "moneybag"],
        )
        if not sent:
            logger.warning("Notification could not be delivered")
        return TickResult(
            ok=True,
            qualifying=len(qualifying),
            lowest_price=lowest,
            trend=trend,
            notified=sent,
        )

    def _log_trend(self, trend: PriceTrend, lowest: float) -> None:
        platform = self.watch.platform_name
        price = format_price(lowest)
        record = format_price(self.state.price_history.lowest)
        if trend is PriceTrend.DECREASED:
            logger.info(f"🔻 {platform} price decreased to {price} (lowest seen {record})")
        elif trend is PriceTrend.INCREASED:
            logger.info(f"🔺 {platform} price increased to {price} (lowest seen {record})")
        else:
            logger.info(f"🔄 {platform} price unchanged at {price} (lowest seen {record})")

    def _handle_shutdown(self, signum, frame) -> None:
        """Handle shutdown signals gracefully."""
        logger.warning(f"Received signal {signum}, initiating graceful shutdown...")
        self.shutdown_event.set()

    async def run(self) -> None:
        """Run the monitoring loop until shutdown is requested."""
        signal.signal(signal.SIGINT, self._handle_shutdown)
        signal.signal(signal.SIGTERM, self._handle_shutdown)

        logger.info("🚀 Starting Gametime Resale Notifier")
        logger.info(
            f"👀 Watching {self.watch.event_name} ({self.watch.event_id}) on {self.watch.platform_name}"
        )

        while not self.shutdown_event.is_set():
            try:
                await self.check()
                logger.info(f"📋 Status: {self.get_status().splitlines()[0]}")

                if not self.shutdown_event.is_set():
                    await self._wait_until_next_check()
            except asyncio.CancelledError:
                logger.info("Monitoring cancelled")
                break

        logger.info("✅ Monitoring stopped")

    async def _wait_until_next_check(self) -> None:
        """Wait until the next check time, or until shutdown is requested."""
        min_interval, max_interval = self.config.check_interval
        wait_minutes = random.uniform(min_interval, max_interval)
        wait_seconds = wait_minutes * 60

        next_check = datetime.now().timestamp() + wait_seconds
        next_check_str = datetime.fromtimestamp(next_check).strftime('%H:%M:%S')

        logger.info(f"⏳ Next check at ~{next_check_str} (in {wait_minutes:.1f} minutes)")

        # Split the wait into smaller chunks to be more responsive to shutdown
        chunk_size = 10  # seconds
        chunks = int(wait_seconds // chunk_size)
        remainder = wait_seconds % chunk_size

        try:
            for _ in range(chunks):
                if self.shutdown_event.is_set():
                    return
                await asyncio.sleep(chunk_size)

            if remainder > 0 and not self.shutdown_event.is_set():
                await asyncio.sleep(remainder)

        except asyncio.CancelledError:
            logger.debug("Wait for next check was cancelled")
            raise
