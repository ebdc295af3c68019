"""
Field staff rate cards (hourly rates by client rate card and role).

Static configuration data; the costing engine only looks rates up.
"""
import logging
from typing import Dict, Mapping, Optional

from quotehub.config import DEFAULT_RATE_CARD

logger = logging.getLogger("quotehub-costing")


_STANDARD_FIELD_RATES: Dict[str, float] = {
    "Brand Ambassador - no certification":          49.25,
    "Brand Ambassador - w/ certification":          53.30,
    "Team Lead":                                    60.75,
    "Festival Brand Ambassador - no certification": 54.25,
    "Festival Brand Ambassador - w/ certification": 58.30,
    "Festival Team Lead":                           65.75,
    "BRIKA Retail Sales Associate":                 28.60,
    "Brika Store manager":                          34.13,
    "Field Representative":                         60.00,
    "Other (mascot etc.)":                          87.75,
}

# rate card id -> role -> hourly rate
FIELD_STAFF_RATES: Dict[str, Dict[str, float]] = {
    "Labatt":  dict(_STANDARD_FIELD_RATES),
    "RBC":     {**_STANDARD_FIELD_RATES, "Field Representative": 35.00},
    "Blended": dict(_STANDARD_FIELD_RATES),
}

FIELD_STAFF_ROLES = tuple(FIELD_STAFF_RATES[DEFAULT_RATE_CARD])


def lookup_hourly_rate(
    rate_card_id: Optional[str],
    role: str,
    rate_table: Optional[Mapping[str, Mapping[str, float]]] = None,
) -> float:
    """
    Resolve the hourly rate for ``role`` on ``rate_card_id``.

    Falls back to the default rate card when the requested card has no entry
    for the role; an unknown role on both cards resolves to 0.0.
    """
    table = FIELD_STAFF_RATES if rate_table is None else rate_table
    card = table.get(rate_card_id or DEFAULT_RATE_CARD) or {}
    if role in card:
        return float(card[role])

    fallback = table.get(DEFAULT_RATE_CARD) or {}
    if role in fallback:
        logger.debug(
            f"Role {role!r} missing from rate card {rate_card_id!r}; "
            f"using {DEFAULT_RATE_CARD} rate"
        )
        return float(fallback[role])
    return 0.0
