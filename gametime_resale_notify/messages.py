"""
Text of status reports and push notifications.
"""
from typing import List, Optional, Sequence

from .models import WatchConfig
from .schema import Listing


def format_price(amount: float) -> str:
    """Format a dollar amount without cents, e.g. ``$1,234``."""
    return f"${amount:,.0f}"


def format_listing_line(listing: Listing, seats_together: int) -> str:
    each = listing.all_in_price
    total = each * seats_together
    return (
        f"- Sec {listing.section} Row {listing.row}, "
        f"{format_price(each)} each ({format_price(total)} total)"
    )


def build_header(watch: WatchConfig) -> str:
    """Describe the event and what is being searched for."""
    return (
        f"🏀 Seats available for {watch.event_name}!\n"
        f"(checking {watch.platform_name} for {watch.seats_together} seats together "
        f"at {format_price(watch.max_all_in_price_per_seat)} each in sections similar to "
        f"{', '.join(watch.section_group_patterns)})"
    )


def build_status_message(
    watch: WatchConfig,
    listings: Sequence[Listing],
    new_low: Optional[float] = None,
) -> str:
    """Build the multi-line report for a tick with qualifying listings.

    Args:
        watch: The watch criteria.
        listings: Qualifying listings, cheapest first.
        new_low: The new all-time lowest price, if this tick set one.

    Returns:
        The header, an optional new-low callout and one line per listing.
    """
    parts: List[str] = [build_header(watch)]
    if new_low is not None:
        parts.append(
            f"\n\n⭐ New lowest price on {watch.platform_name}: {format_price(new_low)}\n"
        )
    for listing in listings:
        parts.append(f"\n{format_listing_line(listing, watch.seats_together)}")
    return "".join(parts)


def notification_title(watch: WatchConfig) -> str:
    return f"{watch.platform_name} seats for {watch.event_name}"
