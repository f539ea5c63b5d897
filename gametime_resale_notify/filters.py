"""
Selection and ranking of listings that match the watch criteria.
"""
import logging
import re
from typing import Iterable, List, Pattern, Sequence

from .models import WatchConfig
from .schema import Listing

logger = logging.getLogger(__name__)


def compile_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    """Compile regex sources, keeping their order."""
    return [re.compile(pattern) for pattern in patterns]


def matches_any(patterns: Sequence[Pattern[str]], value: str) -> bool:
    return any(pattern.search(value) for pattern in patterns)


class ListingFilter:
    """Applies the seat, section and price criteria of a WatchConfig."""

    def __init__(self, watch: WatchConfig):
        self.watch = watch
        self.section_patterns = compile_patterns(watch.section_patterns)
        self.section_group_patterns = compile_patterns(watch.section_group_patterns)

    def matches_section(self, listing: Listing) -> bool:
        """True if either the section code or the section group name matches."""
        return (
            matches_any(self.section_patterns, listing.section)
            or matches_any(self.section_group_patterns, listing.section_group)
        )

    def qualifies(self, listing: Listing) -> bool:
        """Check a single listing against every criterion."""
        seats_together = self.watch.seats_together

        if listing.seat_count < seats_together:
            return False

        # the requested number of seats has to be sold as one lot
        if seats_together not in listing.lots:
            return False

        if not self.matches_section(listing):
            return False

        return listing.all_in_price <= self.watch.max_all_in_price_per_seat

    def filter_and_rank(self, listings: Iterable[Listing]) -> List[Listing]:
        """Return qualifying listings, cheapest first, capped at max_return_list.

        The sort is stable, so listings with the same price keep their
        original order.
        """
        qualifying = [listing for listing in listings if self.qualifies(listing)]
        qualifying.sort(key=lambda listing: listing.all_in_price)
        logger.debug(
            f"{len(qualifying)} listing(s) qualify, keeping at most {self.watch.max_return_list}"
        )
        return qualifying[:self.watch.max_return_list]
