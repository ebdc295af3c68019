"""
CostAggregator — folds production cost sheets into category, phase and grand
totals.

All amounts are integer currency units: item totals are already rounded, and
no further rounding happens at aggregation. Unused categories (no items)
contribute nothing and never appear in the cross-phase rollup.
"""
import logging
from typing import Any, Dict, Mapping

from quotehub.config import DEFAULT_CURRENCY
from quotehub.services.cost_items import CostCategory, PhaseCostSheet

logger = logging.getLogger("quotehub-costing")


class CostAggregator:
    """
    Read-only view over one quote's cost sheets (phase -> category -> items).

    The aggregator holds no state beyond the sheets it was given; build a new
    one after any edit.
    """

    def __init__(self, cost_sheets: Mapping[str, PhaseCostSheet]) -> None:
        self.cost_sheets = cost_sheets

    @staticmethod
    def category_total(category: CostCategory) -> int:
        """Sum of ``total`` across all three item lists of one category."""
        if not category.is_used:
            return 0
        return sum(item.total for item in category.items())

    def phase_total(self, phase: str) -> int:
        sheet = self.cost_sheets.get(phase) or {}
        return sum(self.category_total(category) for category in sheet.values())

    def grand_total(self) -> int:
        return sum(self.phase_total(phase) for phase in self.cost_sheets)

    def phase_totals(self) -> Dict[str, int]:
        return {phase: self.phase_total(phase) for phase in self.cost_sheets}

    def cross_phase_category_totals(self) -> Dict[str, int]:
        """
        Category label -> total across every phase, sorted by label.

        Categories whose summed total is exactly 0 are omitted entirely.
        """
        totals: Dict[str, int] = {}
        for sheet in self.cost_sheets.values():
            for label, category in sheet.items():
                amount = self.category_total(category)
                if amount > 0:
                    totals[label] = totals.get(label, 0) + amount
        return {label: totals[label] for label in sorted(totals)}

    def summary(self, currency: str = DEFAULT_CURRENCY) -> Dict[str, Any]:
        """Overview block for the production cost screen and quote preview."""
        category_totals = self.cross_phase_category_totals()
        grand_total = self.grand_total()
        logger.debug(
            f"Cost summary: {len(self.cost_sheets)} phases, "
            f"{len(category_totals)} active categories, total {grand_total} {currency}"
        )
        return {
            "phase_totals": self.phase_totals(),
            "category_totals": category_totals,
            "active_category_count": len(category_totals),
            "grand_total": grand_total,
            "currency": currency,
        }
