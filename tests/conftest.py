"""Shared fixtures for the test-suite."""
from typing import Any, Dict, List, Optional

import pytest


def raw_listing(
    listing_id: str,
    section: str = "PR1",
    section_group: str = "Premier",
    prefee: float = 10000,
    total: float = 0,
    sales_tax: float = 0,
    lots: Optional[List[float]] = None,
    seats: Optional[List[str]] = None,
    row: str = "A",
    face_value: Optional[float] = None,
) -> Dict[str, Any]:
    """Build one listing as it appears in the listings response."""
    return {
        "id": listing_id,
        "price": {
            "face_value": face_value,
            "prefee": prefee,
            "total": total,
            "sales_tax": sales_tax,
        },
        "lots": [2] if lots is None else lots,
        "seats": ["*", "*"] if seats is None else seats,
        "row": row,
        "section": section,
        "section_group": section_group,
    }


def raw_document(*listings: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap listings into a listings response document.

    Listings are keyed by their id, or by position when the id is missing.
    """
    return {
        "display_groups": [],
        "listings": {
            listing.get("id", f"listing-{index}"): listing
            for index, listing in enumerate(listings)
        },
    }


@pytest.fixture
def make_listing():
    return raw_listing


@pytest.fixture
def make_document():
    return raw_document
