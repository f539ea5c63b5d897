"""
Validation of the raw listings document returned by the resale platform.
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictFloat,
    StrictStr,
    ValidationError,
)

from .exceptions import ListingValidationError

logger = logging.getLogger(__name__)


class ListingPrice(BaseModel):
    """Price breakdown of a listing, in cents."""
    model_config = ConfigDict(frozen=True)

    face_value: Optional[StrictFloat]
    prefee: StrictFloat
    total: StrictFloat
    sales_tax: StrictFloat


class Listing(BaseModel):
    """A single resale offer."""
    model_config = ConfigDict(frozen=True)

    id: StrictStr
    price: ListingPrice
    lots: List[StrictFloat]  # group sizes that can be bought together
    seats: List[StrictStr]
    row: StrictStr
    section: StrictStr
    section_group: StrictStr  # e.g. "Premier"

    @property
    def all_in_price(self) -> float:
        """Price per seat in dollars, fees and tax included."""
        price = self.price
        return (price.prefee + price.total + price.sales_tax) / 100

    @property
    def seat_count(self) -> int:
        return len(self.seats)


class ListingsDocument(BaseModel):
    """Top level of the listings response."""
    model_config = ConfigDict(frozen=True)

    display_groups: List[Any]  # not used
    listings: Dict[StrictStr, Listing]


def parse_listings(document: Any) -> Dict[str, Listing]:
    """Validate a decoded listings response.

    Args:
        document: The decoded JSON body.

    Returns:
        Listings keyed by listing id, in document order.

    Raises:
        ListingValidationError: If the document does not match the expected shape.
    """
    try:
        parsed = ListingsDocument.model_validate(document)
    except ValidationError as e:
        logger.debug(f"Listings document failed validation: {e}")
        raise ListingValidationError(
            f"Unexpected listings document ({e.error_count()} error(s)): {e}"
        ) from e
    return dict(parsed.listings)
