"""
Pydantic request/response schemas for the QuoteHub HTTP surface.

Quote bodies keep the authoring surface's camelCase document shape; the
services parse and default them at the boundary.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class QuoteDocument(BaseModel):
    """A quote as the authoring surface stores it. Unknown fields pass through."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    projectNumber: str = ""
    budgetLabel: Optional[str] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    project: Dict[str, Any] = Field(default_factory=dict)
    phaseData: Dict[str, Any] = Field(default_factory=dict)
    productionCostData: Dict[str, Any] = Field(default_factory=dict)


class QuoteTotalsResponse(BaseModel):
    quote_id: Optional[str] = None
    fee_subtotal: float
    resourcing_surcharge: int
    surcharge_by_department: Dict[str, int]
    total_fees: float
    production_total: int
    total_revenue: float
    department_breakdown: Dict[str, float]
    currency: str
    computed_at: Optional[str] = None


class QuoteSummary(BaseModel):
    id: str
    project_number: str
    budget_label: str
    client_name: str
    project_name: str
    status: str
    currency: str
    total_revenue: Optional[float] = None
    last_modified: str = ""


class QuoteStatusUpdate(BaseModel):
    status: str = Field(..., description="draft | pending | approved | completed")


class CostSummaryResponse(BaseModel):
    quote_id: str
    phase_totals: Dict[str, int]
    category_totals: Dict[str, int]
    active_category_count: int
    grand_total: int
    currency: str


class AssignmentPayload(BaseModel):
    roleName: str
    assignee: str = ""
    startDate: str = ""
    endDate: str = ""
    # Requirement fields are re-derived from quotes; accepted but not trusted
    allocation: Optional[float] = None
    weeks: Optional[float] = None
    hours: Optional[float] = None


class WorksheetUpdateRequest(BaseModel):
    resourceAssignments: Dict[str, Dict[str, List[AssignmentPayload]]]


class WorksheetResponse(BaseModel):
    project_number: str
    quote_count: int
    role_count: int
    resourced_people: List[str]
    resourceAssignments: Dict[str, Dict[str, List[Dict[str, Any]]]]


class CoverageRecordModel(BaseModel):
    hours: int
    avg_allocation_percent: int
    assignment_count: int


class PersonCoverageModel(BaseModel):
    id: str
    name: str
    role: str = ""
    team_id: str = ""
    week: CoverageRecordModel
    month: CoverageRecordModel
    quarter: CoverageRecordModel


class TeamCoverageModel(BaseModel):
    id: str
    name: str
    members: List[PersonCoverageModel]


class CoverageResponse(BaseModel):
    as_of: str
    windows: Dict[str, List[str]]
    people: List[PersonCoverageModel]
    teams: List[TeamCoverageModel]


class OutlookEntry(BaseModel):
    label: str
    start: str
    end: str
    allocation: int


class OutlookResponse(BaseModel):
    person: str
    as_of: str
    outlook: List[OutlookEntry]


class RosterEntry(BaseModel):
    """A team (``type="team"``) or a person; ``parentId`` links a person to a team."""
    model_config = ConfigDict(extra="allow")

    id: str = ""
    name: str = ""
    type: str = "person"
    role: str = ""
    parentId: Optional[str] = None


class RosterResponse(BaseModel):
    people: int
    teams: int
    entries: List[RosterEntry]
