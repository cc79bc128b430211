"""Helpers deriving area-code, location, and business hints from phone data."""
from __future__ import annotations

import logging
import re
from typing import Optional

from .models import BusinessHint, OwnerType, PhoneMetadata

LOGGER = logging.getLogger(__name__)


def normalise_phone(phone: str) -> str:
    return re.sub(r"[^0-9]", "", phone)


def extract_area_code(phone: Optional[str]) -> Optional[str]:
    """Return the three digit US/Canada area code of ``phone`` if it has one."""

    if not phone:
        return None
    digits = normalise_phone(phone)
    if len(digits) == 10:
        return digits[:3]
    if len(digits) == 11 and digits.startswith("1"):
        return digits[1:4]
    return None


def extract_location_hint(metadata: Optional[PhoneMetadata]) -> Optional[str]:
    """Describe the first current address as ``"City, ST"``, or whichever part is known."""

    if metadata is None or not metadata.current_addresses:
        return None
    address = metadata.current_addresses[0]
    if address.city and address.state:
        return f"{address.city}, {address.state}"
    return address.city or address.state


def classify_business(metadata: Optional[PhoneMetadata]) -> BusinessHint:
    """Decide whether ``metadata`` describes a business and collect the research hints.

    A typed business owner is authoritative for name and industry. Failing that,
    a commercial line with a named owner of any type counts as a business with
    no industry. Anything else is not a business. The location hint is derived
    regardless of the outcome.
    """

    location_hint = extract_location_hint(metadata)
    if location_hint:
        LOGGER.info("Extracted location hint: %s", location_hint)

    owner = metadata.belongs_to if metadata is not None else None
    owner_type = owner.type if owner is not None else None

    business_name: Optional[str] = None
    industry_hint: Optional[str] = None
    if owner_type is OwnerType.BUSINESS:
        business_name = owner.name
        industry_hint = owner.industry
    elif owner_type is OwnerType.PERSON or owner_type is None:
        if metadata is not None and metadata.is_commercial is True and owner is not None and owner.name:
            business_name = owner.name

    return BusinessHint(
        business_name=business_name or None,
        industry_hint=industry_hint,
        location_hint=location_hint,
    )


__all__ = [
    "classify_business",
    "extract_area_code",
    "extract_location_hint",
    "normalise_phone",
]
