"""
QuoteHub configuration — single source of truth for costing constants,
resourcing defaults, storage keys and environment-driven settings.

Import from here in services and routes rather than hardcoding values.
"""
from __future__ import annotations

import os

# ── Production cost categories ────────────────────────────────────────────────
# Fixed label set for PhaseCostSheet keys. "Field Staff" is the category whose
# items are normally FieldStaffItem rows; "Media Billings" normally holds media.
PRODUCTION_CATEGORIES: tuple[str, ...] = (
    "Field Staff",
    "Studio",
    "Decor",
    "Equipment",
    "Technology",
    "Printing & Signage",
    "Training and Recruitment",
    "Giveaways and Premiums",
    "Travel and Expenses",
    "Storage",
    "Vehicle Rental",
    "Media Billings",
    "Creator Fees",
    "Platforms and Licensing",
    "Measurement",
    "Contingency",
)


# ── Fees ──────────────────────────────────────────────────────────────────────

# Resourcing surcharge applied to the fee subtotal of each surcharged department
RESOURCING_SURCHARGE_RATE: float = 0.015

# Departments carrying the surcharge, each rounded independently
SURCHARGED_DEPARTMENTS: tuple[str, ...] = ("Creative", "Design")


# ── Quote defaults ────────────────────────────────────────────────────────────
DEFAULT_PHASES: tuple[str, ...] = (
    "Planning",
    "Production/Execution",
    "Post Production/Wrap",
)
DEFAULT_CURRENCY: str = "CAD"
DEFAULT_RATE_CARD: str = "Labatt"
DEFAULT_BUDGET_LABEL: str = "General"
QUOTE_STATUSES: tuple[str, ...] = ("draft", "pending", "approved", "completed")


# ── Field staff item defaults (new row in the authoring surface) ──────────────
FIELD_STAFF_DEFAULT_REPS: int = 1
FIELD_STAFF_DEFAULT_SHIFTS: int = 1
FIELD_STAFF_DEFAULT_SHIFT_LENGTH: float = 8.0


# ── Utilization ───────────────────────────────────────────────────────────────
UTILIZATION_WINDOWS: tuple[str, ...] = ("week", "month", "quarter")

# Allocation outlook is a readability figure; summed allocation is capped here
OUTLOOK_ALLOCATION_CAP: int = 100


# ── Storage keys ──────────────────────────────────────────────────────────────
QUOTES_STORAGE_KEY: str = "all-quotes"
ROSTER_STORAGE_KEY: str = "team-structure"
WORKSHEET_KEY_PREFIX: str = "resourcing:"
DEFAULT_STORE_OWNER: str = "shared"


# ── Environment ───────────────────────────────────────────────────────────────
DATABASE_URL: str = os.getenv("DATABASE_URL", "")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON: bool = os.getenv("LOG_FORMAT", "json").lower() != "text"
DB_RESET_ON_STARTUP: bool = os.getenv("DB_RESET_ON_STARTUP", "").lower() in ("1", "true", "yes")

_cors_default = "http://localhost:3000,http://localhost:8000"
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _cors_default).split(",") if o.strip()
]

APP_VERSION: str = "1.0.0"
