"""
Fee / revenue calculator.

    fee subtotal        = Σ role.totalDollars over every phase/stage/department
    resourcing surcharge = round(Creative × 1.5 %) + round(Design × 1.5 %)
    total fees          = fee subtotal + resourcing surcharge
    total revenue       = total fees + production cost grand total

Pure functions; callers persist the result (see QuoteRepository.save_quote).
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, Mapping, Tuple

from quotehub.config import (
    DEFAULT_CURRENCY,
    RESOURCING_SURCHARGE_RATE,
    SURCHARGED_DEPARTMENTS,
)
from quotehub.services.cost_aggregator import CostAggregator
from quotehub.services.cost_items import PhaseCostSheet
from quotehub.services.effort_models import EffortDepartment, EffortStructure, Quote
from quotehub.services.numeric import round_half_up
from quotehub.services.perf_monitor import timed

logger = logging.getLogger("quotehub-fees")


@dataclass(frozen=True)
class QuoteTotals:
    fee_subtotal: float
    resourcing_surcharge: int
    total_fees: float
    production_total: int
    total_revenue: float
    surcharge_by_department: Dict[str, int] = field(default_factory=dict)
    currency: str = DEFAULT_CURRENCY

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _departments(effort: EffortStructure) -> Iterator[Tuple[str, EffortDepartment]]:
    for phase, stages in effort.items():
        for stage in stages:
            for department in stage.departments:
                yield phase, department


def fee_subtotal(effort: EffortStructure) -> float:
    return sum(department.fee_subtotal for _, department in _departments(effort))


def department_subtotal(effort: EffortStructure, department_name: str) -> float:
    """Fee subtotal restricted to departments named exactly ``department_name``."""
    return sum(
        department.fee_subtotal
        for _, department in _departments(effort)
        if department.name == department_name
    )


def resourcing_surcharges(effort: EffortStructure) -> Dict[str, int]:
    """Per-department surcharge, each rounded on its own before any summing."""
    return {
        name: round_half_up(department_subtotal(effort, name) * RESOURCING_SURCHARGE_RATE)
        for name in SURCHARGED_DEPARTMENTS
    }


def department_breakdown(effort: EffortStructure) -> Dict[str, float]:
    """Department name -> fee subtotal across all phases and stages."""
    breakdown: Dict[str, float] = {}
    for _, department in _departments(effort):
        breakdown[department.name] = breakdown.get(department.name, 0.0) + department.fee_subtotal
    return breakdown


def compute_totals(
    effort: EffortStructure,
    cost_sheets: Mapping[str, PhaseCostSheet],
    currency: str = DEFAULT_CURRENCY,
) -> QuoteTotals:
    fees = fee_subtotal(effort)
    surcharges = resourcing_surcharges(effort)
    surcharge = sum(surcharges.values())
    total_fees = fees + surcharge
    production_total = CostAggregator(cost_sheets).grand_total()

    return QuoteTotals(
        fee_subtotal=fees,
        resourcing_surcharge=surcharge,
        total_fees=total_fees,
        production_total=production_total,
        total_revenue=total_fees + production_total,
        surcharge_by_department=surcharges,
        currency=currency,
    )


@timed
def recompute(quote: Quote) -> QuoteTotals:
    """Totals for ``quote`` from its current effort and cost data."""
    totals = compute_totals(quote.effort, quote.cost_sheets, quote.currency)
    logger.debug(
        f"Recomputed quote {quote.id}: fees={totals.total_fees} "
        f"production={totals.production_total} revenue={totals.total_revenue}",
        extra={"quote_id": quote.id},
    )
    return totals
