"""
Cost item models — the three kinds of production (hard) cost line items.

  - FlatItem        quantity × rate
  - MediaItem       impressions / 1000 × CPM, or a fixed fee (one mode active)
  - FieldStaffItem  reps × (training hours + shifts × shift length) × hourly rate

Every ``total`` is a derived, non-negative integer amount recomputed from the
item's inputs on access; it is never stored independently of them.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Union

from quotehub.config import (
    DEFAULT_RATE_CARD,
    FIELD_STAFF_DEFAULT_REPS,
    FIELD_STAFF_DEFAULT_SHIFT_LENGTH,
    FIELD_STAFF_DEFAULT_SHIFTS,
    PRODUCTION_CATEGORIES,
)
from quotehub.services.numeric import round_half_up, to_amount, to_text
from quotehub.services.rate_cards import lookup_hourly_rate

logger = logging.getLogger("quotehub-costing")


@dataclass(frozen=True)
class FlatItem:
    quantity: float = 0.0
    rate: float = 0.0
    item: str = ""
    description: str = ""
    id: str = ""
    kind = "flat"

    @property
    def total(self) -> int:
        return round_half_up(self.quantity * self.rate)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "FlatItem":
        return cls(
            quantity=to_amount(doc.get("quantity")),
            rate=to_amount(doc.get("rate")),
            item=to_text(doc.get("item")),
            description=to_text(doc.get("description")),
            id=to_text(doc.get("id")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "item": self.item,
            "description": self.description,
            "quantity": self.quantity,
            "rate": self.rate,
            "totalCost": self.total,
        }


@dataclass(frozen=True)
class MediaItem:
    """
    Media buy priced either by CPM or by a fixed fee.

    CPM pricing governs only while both impressions and CPM are positive and
    the item is not forced into fixed mode; otherwise the fixed fee governs.
    """
    impressions: float = 0.0
    cpm: float = 0.0
    fixed_fee: float = 0.0
    use_fixed: bool = False
    item: str = ""
    id: str = ""
    kind = "media"

    @property
    def uses_cpm(self) -> bool:
        return not self.use_fixed and self.impressions > 0 and self.cpm > 0

    @property
    def total(self) -> int:
        if self.uses_cpm:
            return round_half_up(self.impressions / 1000.0 * self.cpm)
        return round_half_up(self.fixed_fee)

    def with_fixed_fee(self, fixed_fee: float) -> "MediaItem":
        """Entering a fixed fee switches the item into fixed mode."""
        return replace(self, fixed_fee=to_amount(fixed_fee), use_fixed=True)

    def with_cpm(self, impressions: float, cpm: float) -> "MediaItem":
        """
        Entering impressions/CPM switches back to CPM mode once both are
        positive; a zero on either side leaves the current mode untouched.
        """
        impressions = to_amount(impressions)
        cpm = to_amount(cpm)
        use_fixed = self.use_fixed
        if impressions > 0 and cpm > 0:
            use_fixed = False
        return replace(self, impressions=impressions, cpm=cpm, use_fixed=use_fixed)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "MediaItem":
        return cls(
            impressions=to_amount(doc.get("impressions")),
            cpm=to_amount(doc.get("cpm")),
            fixed_fee=to_amount(doc.get("fixed", doc.get("fixedFee"))),
            use_fixed=bool(doc.get("useFixed", False)),
            item=to_text(doc.get("item")),
            id=to_text(doc.get("id")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "item": self.item,
            "impressions": self.impressions,
            "cpm": self.cpm,
            "fixed": self.fixed_fee,
            "useFixed": self.use_fixed,
            "totalCost": self.total,
        }


@dataclass(frozen=True)
class FieldStaffItem:
    role: str = ""
    reps: int = FIELD_STAFF_DEFAULT_REPS
    training_hours: float = 0.0
    shifts: int = FIELD_STAFF_DEFAULT_SHIFTS
    shift_length: float = FIELD_STAFF_DEFAULT_SHIFT_LENGTH
    rate_card_id: str = DEFAULT_RATE_CARD
    id: str = ""
    kind = "field_staff"

    @property
    def hourly_rate(self) -> float:
        return lookup_hourly_rate(self.rate_card_id, self.role)

    @property
    def total_hours(self) -> float:
        return (self.training_hours + self.shifts * self.shift_length) * self.reps

    @property
    def total(self) -> int:
        return round_half_up(self.total_hours * self.hourly_rate)

    @classmethod
    def from_document(
        cls, doc: Mapping[str, Any], rate_card_id: str = DEFAULT_RATE_CARD
    ) -> "FieldStaffItem":
        # Stored rows use numReps/numShifts; accept the short names as well
        return cls(
            role=to_text(doc.get("role")),
            reps=int(to_amount(doc.get("numReps", doc.get("reps")))),
            training_hours=to_amount(doc.get("trainingHours")),
            shifts=int(to_amount(doc.get("numShifts", doc.get("shifts")))),
            shift_length=to_amount(doc.get("shiftLength")),
            rate_card_id=rate_card_id or DEFAULT_RATE_CARD,
            id=to_text(doc.get("id")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "numReps": self.reps,
            "trainingHours": self.training_hours,
            "numShifts": self.shifts,
            "shiftLength": self.shift_length,
            "totalHours": self.total_hours,
            "hourlyRate": self.hourly_rate,
            "totalCost": self.total,
        }


CostItem = Union[FlatItem, MediaItem, FieldStaffItem]


@dataclass
class CostCategory:
    """
    One production category inside a phase. Only one list is normally
    populated, but mixing is allowed; a category with no items is unused.
    """
    label: str
    flat_items: List[FlatItem] = field(default_factory=list)
    media_items: List[MediaItem] = field(default_factory=list)
    field_staff_items: List[FieldStaffItem] = field(default_factory=list)

    @property
    def is_used(self) -> bool:
        return bool(self.flat_items or self.media_items or self.field_staff_items)

    def items(self) -> List[CostItem]:
        return [*self.flat_items, *self.media_items, *self.field_staff_items]

    @classmethod
    def from_document(
        cls,
        label: str,
        doc: Optional[Mapping[str, Any]],
        rate_card_id: str = DEFAULT_RATE_CARD,
    ) -> "CostCategory":
        if label not in PRODUCTION_CATEGORIES:
            logger.warning(f"Unknown production category {label!r}; keeping it as-is")
        doc = doc or {}
        return cls(
            label=label,
            flat_items=[FlatItem.from_document(d) for d in doc.get("standardItems") or []],
            media_items=[MediaItem.from_document(d) for d in doc.get("mediaItems") or []],
            field_staff_items=[
                FieldStaffItem.from_document(d, rate_card_id)
                for d in doc.get("fieldStaffItems") or []
            ],
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "standardItems": [i.to_document() for i in self.flat_items],
            "mediaItems": [i.to_document() for i in self.media_items],
            "fieldStaffItems": [i.to_document() for i in self.field_staff_items],
        }


# category label -> CostCategory, scoped to one phase
PhaseCostSheet = Dict[str, CostCategory]


def empty_cost_sheet() -> PhaseCostSheet:
    """A sheet with every production category present and unused."""
    return {label: CostCategory(label=label) for label in PRODUCTION_CATEGORIES}


def parse_cost_sheets(
    doc: Optional[Mapping[str, Any]], rate_card_id: str = DEFAULT_RATE_CARD
) -> Dict[str, PhaseCostSheet]:
    """Parse ``{phase: {category: {standardItems, mediaItems, fieldStaffItems}}}``."""
    sheets: Dict[str, PhaseCostSheet] = {}
    for phase, categories in (doc or {}).items():
        if not isinstance(categories, Mapping):
            continue
        sheets[phase] = {
            label: CostCategory.from_document(label, cat_doc, rate_card_id)
            for label, cat_doc in categories.items()
            if cat_doc is None or isinstance(cat_doc, Mapping)
        }
    return sheets


def dump_cost_sheets(sheets: Mapping[str, PhaseCostSheet]) -> Dict[str, Any]:
    return {
        phase: {label: category.to_document() for label, category in sheet.items()}
        for phase, sheet in sheets.items()
    }
