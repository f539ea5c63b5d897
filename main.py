"""Gametime Resale Notifier

Watches Gametime resale listings for an event and sends a notification
when the lowest qualifying price reaches a new low.
"""
import asyncio
import logging
import sys


def main() -> int:
    """Main entry point that runs the CLI with proper asyncio setup."""
    try:
        # Import here to avoid circular imports
        from gametime_resale_notify.cli import async_main

        return asyncio.run(async_main())

    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
