"""Command-line interface for Gametime Resale Notifier."""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from gametime_resale_notify import __version__
from gametime_resale_notify.app import ResaleMonitor
from gametime_resale_notify.config import load_config
from gametime_resale_notify.exceptions import ConfigurationError
from gametime_resale_notify.messages import format_price
from gametime_resale_notify.models import AppConfig


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Options left unset fall back to the environment (or .env) and then to
    the built-in defaults.

    Args:
        args: List of command line arguments. If None, uses sys.argv[1:].

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Watch Gametime resale listings for an event and get notified of new lowest prices.",
    )

    # Event configuration
    event_group = parser.add_argument_group('Event Configuration')
    event_group.add_argument(
        '--event-id',
        type=str,
        help='event id, the last path segment of the event URL (env: EVENT_ID)',
    )
    event_group.add_argument(
        '--event-name',
        type=str,
        help='display name used in messages (env: EVENT_NAME)',
    )
    event_group.add_argument(
        '--platform-name',
        type=str,
        help='name of the resale platform (env: PLATFORM_NAME)',
    )

    # Search criteria
    search_group = parser.add_argument_group('Search Criteria')
    search_group.add_argument(
        '--seats',
        type=int,
        help='number of seats that must be bought together (env: SEATS_TOGETHER)',
    )
    search_group.add_argument(
        '--max-price',
        type=float,
        help='highest all-in price per seat in dollars (env: MAX_ALL_IN_PRICE_PER_SEAT)',
    )
    search_group.add_argument(
        '--section',
        type=str,
        action='append',
        help='regex matched against section codes, repeatable (env: SECTION_PATTERNS)',
    )
    search_group.add_argument(
        '--section-group',
        type=str,
        action='append',
        help='regex matched against section group names, repeatable (env: SECTION_GROUP_PATTERNS)',
    )
    search_group.add_argument(
        '--max-results',
        type=int,
        help='maximum number of listings to report (env: MAX_RETURN_LIST)',
    )
    search_group.add_argument(
        '--min-error-count',
        type=int,
        help='consecutive failed checks before reporting ERROR (env: MIN_ERROR_COUNT)',
    )

    # Notification configuration
    notification_group = parser.add_argument_group('Notification Configuration')
    notification_group.add_argument(
        '--notify-service',
        type=str,
        choices=['ntfy', 'pushover'],
        help='notification service (env: NOTIFY_SERVICE)',
    )
    notification_group.add_argument(
        '--ntfy-topic',
        type=str,
        help='ntfy.sh topic for notifications (env: NTFY_TOPIC)',
    )
    notification_group.add_argument(
        '--notify-interval',
        type=float,
        help='minimum minutes between notifications (env: NOTIFY_INTERVAL_MINUTES)',
    )

    # Check interval configuration
    interval_group = parser.add_argument_group('Check Interval')
    interval_group.add_argument(
        '--min-interval',
        type=float,
        help='minimum interval between checks in minutes',
    )
    interval_group.add_argument(
        '--max-interval',
        type=float,
        help='maximum interval between checks in minutes',
    )
    interval_group.add_argument(
        '--once',
        action='store_true',
        help='run a single check, print the status and exit',
    )

    # Logging configuration
    log_group = parser.add_argument_group('Logging')
    log_group.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='logging level (env: LOG_LEVEL)',
    )
    log_group.add_argument(
        '--verbose', '-v',
        action='store_const',
        const='DEBUG',
        dest='log_level',
        help='enable verbose output (same as --log-level DEBUG)',
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
        help='show version and exit',
    )

    if args is None:
        args = sys.argv[1:]
    return parser.parse_args(args)


def config_overrides(args: argparse.Namespace) -> dict:
    """Map parsed arguments onto setting names; unset options map to None.

    Section patterns go to ``load_config`` as lists instead, one regex per item.
    """
    check_interval = None
    if args.min_interval is not None or args.max_interval is not None:
        min_interval = args.min_interval if args.min_interval is not None else args.max_interval
        max_interval = args.max_interval if args.max_interval is not None else args.min_interval
        check_interval = f"{min_interval},{max_interval}"

    return {
        'EVENT_ID': args.event_id,
        'EVENT_NAME': args.event_name,
        'PLATFORM_NAME': args.platform_name,
        'SEATS_TOGETHER': args.seats,
        'MAX_ALL_IN_PRICE_PER_SEAT': args.max_price,
        'MAX_RETURN_LIST': args.max_results,
        'MIN_ERROR_COUNT': args.min_error_count,
        'NOTIFY_SERVICE': args.notify_service,
        'NTFY_TOPIC': args.ntfy_topic,
        'NOTIFY_INTERVAL_MINUTES': args.notify_interval,
        'CHECK_INTERVAL_MIN': check_interval,
        'LOG_LEVEL': args.log_level,
    }


def configure_logging(level: str = 'INFO') -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as a string (e.g., 'INFO', 'DEBUG').
    """
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
        ]
    )

    # Request logging from httpx is too noisy at INFO
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)


def print_config(config: AppConfig) -> None:
    """Print the current configuration."""
    watch = config.watch
    print("\n=== Gametime Resale Notifier ===")
    print("\nEvent:")
    print(f"  {watch.event_name} ({watch.event_id}) on {watch.platform_name}")

    print("\nSearch Criteria:")
    print(f"  Seats together: {watch.seats_together}")
    print(f"  Max all-in price per seat: {format_price(watch.max_all_in_price_per_seat)}")
    print(f"  Sections: {', '.join(watch.section_patterns) or '-'}")
    print(f"  Section groups: {', '.join(watch.section_group_patterns) or '-'}")
    print(f"  Max results: {watch.max_return_list}")

    print("\nCheck Interval:")
    print(f"  {config.check_interval[0]:.1f}-{config.check_interval[1]:.1f} minutes")
    print(f"  ERROR after {watch.min_error_count} consecutive failures")

    print("\nNotification Configuration:")
    if config.notification.service == "pushover":
        print("  Service: Pushover")
    elif config.notification.topic:
        print(f"  ntfy.sh Topic: {config.notification.topic}")
    else:
        print("  Notifications: Disabled (no topic specified)")
    print(f"  At most one every {watch.notify_interval_minutes:g} minutes")

    print(f"\nLog Level: {config.log_level}")
    print("=" * 32 + "\n")


async def async_main(argv: Optional[List[str]] = None) -> int:
    """Async entry point for the CLI."""
    args = parse_args(argv)

    try:
        config = load_config(
            section_patterns=args.section,
            section_group_patterns=args.section_group,
            **config_overrides(args),
        )
    except ConfigurationError as e:
        configure_logging()
        logging.getLogger(__name__).error(f"❌ {e}")
        return 1

    configure_logging(level=config.log_level)
    logger = logging.getLogger(__name__)

    monitor = ResaleMonitor(config)

    if args.once:
        result = await monitor.check()
        print(monitor.get_status())
        return 0 if result.ok else 1

    try:
        print_config(config)
        await monitor.run()
    except KeyboardInterrupt:
        logger.info("\n👋 Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        return 1

    return 0


def main() -> int:
    """Main entry point for CLI."""
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        print("\n👋 Operation cancelled by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
