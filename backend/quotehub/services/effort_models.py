"""Effort (staffing) structure and the Quote record that owns it."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from quotehub.config import (
    DEFAULT_BUDGET_LABEL,
    DEFAULT_CURRENCY,
    DEFAULT_RATE_CARD,
    QUOTE_STATUSES,
)
from quotehub.services.cost_items import PhaseCostSheet, dump_cost_sheets, parse_cost_sheets
from quotehub.services.numeric import to_amount, to_text


@dataclass
class EffortRole:
    name: str
    allocation_percent: float = 0.0
    weeks: float = 0.0
    hours: float = 0.0
    rate: float = 0.0
    # effort x rate, computed by the authoring surface and taken as given here
    total_dollars: float = 0.0
    id: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "EffortRole":
        return cls(
            name=to_text(doc.get("name")),
            allocation_percent=to_amount(doc.get("allocation")),
            weeks=to_amount(doc.get("weeks")),
            hours=to_amount(doc.get("hours")),
            rate=to_amount(doc.get("rate")),
            total_dollars=to_amount(doc.get("totalDollars")),
            id=to_text(doc.get("id")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "allocation": self.allocation_percent,
            "weeks": self.weeks,
            "hours": self.hours,
            "rate": self.rate,
            "totalDollars": self.total_dollars,
        }


@dataclass
class EffortDepartment:
    name: str
    roles: List[EffortRole] = field(default_factory=list)
    output: str = ""
    id: str = ""

    @property
    def fee_subtotal(self) -> float:
        return sum(role.total_dollars for role in self.roles)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "EffortDepartment":
        return cls(
            name=to_text(doc.get("name")),
            roles=[
                EffortRole.from_document(r)
                for r in doc.get("roles") or []
                if isinstance(r, Mapping)
            ],
            output=to_text(doc.get("output")),
            id=to_text(doc.get("id")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "output": self.output,
            "roles": [r.to_document() for r in self.roles],
        }


@dataclass
class EffortStage:
    departments: List[EffortDepartment] = field(default_factory=list)
    name: str = ""
    duration: float = 0.0
    id: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "EffortStage":
        return cls(
            departments=[
                EffortDepartment.from_document(d)
                for d in doc.get("departments") or []
                if isinstance(d, Mapping)
            ],
            name=to_text(doc.get("name")),
            duration=to_amount(doc.get("duration")),
            id=to_text(doc.get("id")),
        )

    def to_document(self, phase: str) -> Dict[str, Any]:
        return {
            "id": self.id,
            "phase": phase,
            "name": self.name,
            "duration": self.duration,
            "departments": [d.to_document() for d in self.departments],
        }


# phase name -> ordered stages
EffortStructure = Dict[str, List[EffortStage]]


def parse_effort(doc: Optional[Mapping[str, Any]]) -> EffortStructure:
    effort: EffortStructure = {}
    for phase, stages in (doc or {}).items():
        if not isinstance(stages, list):
            continue
        effort[phase] = [EffortStage.from_document(s) for s in stages if isinstance(s, Mapping)]
    return effort


def dump_effort(effort: EffortStructure) -> Dict[str, Any]:
    return {
        phase: [stage.to_document(phase) for stage in stages]
        for phase, stages in effort.items()
    }


@dataclass
class Quote:
    """
    A budget for one project: staffing effort (fees) plus production costs.

    Totals are derived state. ``stored_totals`` only mirrors what was persisted
    last time and is replaced on every save.
    """
    id: str
    project_number: str = ""
    budget_label: str = DEFAULT_BUDGET_LABEL
    currency: str = DEFAULT_CURRENCY
    rate_card: str = DEFAULT_RATE_CARD
    client_name: str = ""
    project_name: str = ""
    status: str = "draft"
    effort: EffortStructure = field(default_factory=dict)
    cost_sheets: Dict[str, PhaseCostSheet] = field(default_factory=dict)
    created_date: str = ""
    last_modified: str = ""
    created_by: str = ""
    stored_totals: Dict[str, Any] = field(default_factory=dict)
    # Passthrough for document fields this service does not interpret
    # (review text, invoice schedule, workback, ...)
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = (
        "id", "projectNumber", "budgetLabel", "currency", "clientName",
        "projectName", "status", "phaseData", "productionCostData",
        "createdDate", "lastModified", "createdBy", "totalRevenue",
        "totalFees", "productionTotal", "departmentBreakdown",
        "totalsComputedAt", "project",
    )

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Quote":
        project = doc.get("project") if isinstance(doc.get("project"), Mapping) else {}
        rate_card = to_text(project.get("rateCard")) or DEFAULT_RATE_CARD
        status = to_text(doc.get("status")) or "draft"
        if status not in QUOTE_STATUSES:
            status = "draft"
        return cls(
            id=to_text(doc.get("id")),
            project_number=to_text(doc.get("projectNumber") or project.get("projectNumber")),
            budget_label=to_text(doc.get("budgetLabel")) or DEFAULT_BUDGET_LABEL,
            currency=to_text(doc.get("currency") or project.get("currency")) or DEFAULT_CURRENCY,
            rate_card=rate_card,
            client_name=to_text(doc.get("clientName") or project.get("clientName")),
            project_name=to_text(doc.get("projectName") or project.get("projectName")),
            status=status,
            effort=parse_effort(doc.get("phaseData")),
            cost_sheets=parse_cost_sheets(doc.get("productionCostData"), rate_card),
            created_date=to_text(doc.get("createdDate")),
            last_modified=to_text(doc.get("lastModified")),
            created_by=to_text(doc.get("createdBy")),
            stored_totals={
                "totalRevenue": doc.get("totalRevenue"),
                "totalFees": doc.get("totalFees"),
                "productionTotal": doc.get("productionTotal"),
                "departmentBreakdown": doc.get("departmentBreakdown"),
                "totalsComputedAt": doc.get("totalsComputedAt"),
            },
            extra={
                "project": dict(project),
                **{k: v for k, v in doc.items() if k not in cls._KNOWN_KEYS},
            },
        )

    def to_document(self) -> Dict[str, Any]:
        project = dict(self.extra.get("project") or {})
        project.update({
            "projectNumber": self.project_number,
            "clientName": self.client_name,
            "projectName": self.project_name,
            "currency": self.currency,
            "rateCard": self.rate_card,
        })
        doc = {k: v for k, v in self.extra.items() if k != "project"}
        doc.update({
            "id": self.id,
            "projectNumber": self.project_number,
            "budgetLabel": self.budget_label,
            "currency": self.currency,
            "clientName": self.client_name,
            "projectName": self.project_name,
            "status": self.status,
            "createdDate": self.created_date,
            "lastModified": self.last_modified,
            "createdBy": self.created_by,
            "project": project,
            "phaseData": dump_effort(self.effort),
            "productionCostData": dump_cost_sheets(self.cost_sheets),
        })
        doc.update({k: v for k, v in self.stored_totals.items() if v is not None})
        return doc
