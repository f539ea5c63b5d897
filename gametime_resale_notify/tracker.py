"""
Lowest-price history and trend classification.
"""
from enum import Enum
from typing import List, Optional, Sequence, Tuple


class PriceTrend(str, Enum):
    """How the lowest qualifying price moved relative to earlier ticks."""
    NEW_LOW = "new_low"
    DECREASED = "decreased"
    INCREASED = "increased"
    UNCHANGED = "unchanged"


def classify_price(history: Sequence[float], current: float) -> PriceTrend:
    """Classify ``current`` against previously recorded lowest prices.

    Args:
        history: Lowest prices recorded on earlier ticks, oldest first.
        current: Lowest qualifying price on this tick.

    Returns:
        NEW_LOW when there is no history or ``current`` beats every recorded
        price, otherwise the movement relative to the most recent entry.
    """
    if not history:
        return PriceTrend.NEW_LOW
    if current < min(history):
        return PriceTrend.NEW_LOW
    last = history[-1]
    if current < last:
        return PriceTrend.DECREASED
    if current > last:
        return PriceTrend.INCREASED
    return PriceTrend.UNCHANGED


class PriceHistory:
    """Append-only record of the lowest qualifying price seen on each tick."""

    def __init__(self) -> None:
        self._prices: List[float] = []

    def record(self, price: float) -> PriceTrend:
        """Classify ``price`` against the history so far, then append it."""
        trend = classify_price(self._prices, price)
        self._prices.append(price)
        return trend

    @property
    def prices(self) -> Tuple[float, ...]:
        return tuple(self._prices)

    @property
    def lowest(self) -> Optional[float]:
        return min(self._prices) if self._prices else None

    def __len__(self) -> int:
        return len(self._prices)
