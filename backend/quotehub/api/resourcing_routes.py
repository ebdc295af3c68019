"""
Resourcing routes — project worksheets and team coverage.

GET /api/resourcing/coverage                 — per-person week/month/quarter coverage
GET /api/resourcing/people/{name}/outlook    — this/next week and month allocation
GET /api/resourcing/roster                   — stored team structure
PUT /api/resourcing/roster                   — replace the team structure
GET /api/resourcing/{project}                — merged worksheet for a project
PUT /api/resourcing/{project}                — save assignee/dates for a project
"""
import logging
from dataclasses import asdict
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from quotehub.api.deps import get_now, get_repository
from quotehub.models.api_models import (
    CoverageResponse,
    OutlookResponse,
    PersonCoverageModel,
    RosterEntry,
    RosterResponse,
    TeamCoverageModel,
    WorksheetResponse,
    WorksheetUpdateRequest,
)
from quotehub.services.quote_repository import QuoteRepository
from quotehub.services.resourcing_engine import (
    ResourcingWorksheet,
    merge_roles,
    resourced_people,
)
from quotehub.services.utilization_engine import (
    PersonCoverage,
    allocation_outlook,
    compute_coverage,
    team_coverage,
    window_bounds,
)
from quotehub.config import UTILIZATION_WINDOWS

router = APIRouter(prefix="/api/resourcing", tags=["Resourcing"])
logger = logging.getLogger("quotehub-api")


def _person_model(c: PersonCoverage) -> PersonCoverageModel:
    return PersonCoverageModel(
        id=c.person.id,
        name=c.person.name,
        role=c.person.role,
        team_id=c.person.team_id,
        week=asdict(c.week),
        month=asdict(c.month),
        quarter=asdict(c.quarter),
    )


def _worksheet_response(
    project_number: str, quote_count: int, worksheet: ResourcingWorksheet
) -> WorksheetResponse:
    return WorksheetResponse(
        project_number=project_number,
        quote_count=quote_count,
        role_count=len(worksheet),
        resourced_people=resourced_people(worksheet),
        resourceAssignments=worksheet.to_document(),
    )


@router.get("/coverage", response_model=CoverageResponse)
async def get_coverage(
    repo: QuoteRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    people, teams = await repo.load_roster()
    assignments = await repo.all_assignments()
    coverage = compute_coverage(people, assignments, now)
    return CoverageResponse(
        as_of=now.date().isoformat(),
        windows={
            name: [d.isoformat() for d in window_bounds(name, now)]
            for name in UTILIZATION_WINDOWS
        },
        people=[_person_model(c) for c in coverage.values()],
        teams=[
            TeamCoverageModel(
                id=t["id"],
                name=t["name"],
                members=[_person_model(c) for c in t["members"]],
            )
            for t in team_coverage(teams, coverage)
        ],
    )


@router.get("/people/{person_name}/outlook", response_model=OutlookResponse)
async def get_person_outlook(
    person_name: str,
    repo: QuoteRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    assignments = await repo.all_assignments()
    return OutlookResponse(
        person=person_name,
        as_of=now.date().isoformat(),
        outlook=allocation_outlook(person_name, assignments, now),
    )


def _roster_response(entries) -> RosterResponse:
    teams = sum(1 for e in entries if e.get("type") == "team")
    return RosterResponse(people=len(entries) - teams, teams=teams, entries=entries)


@router.get("/roster", response_model=RosterResponse)
async def get_roster(repo: QuoteRepository = Depends(get_repository)):
    return _roster_response(await repo.load_roster_entries())


@router.put("/roster", response_model=RosterResponse)
async def save_roster(entries: List[RosterEntry], repo: QuoteRepository = Depends(get_repository)):
    documents = [e.model_dump(exclude_none=True) for e in entries]
    await repo.save_roster(documents)
    logger.info(f"Saved team structure ({len(documents)} entries)")
    return _roster_response(documents)


@router.get("/{project_number}", response_model=WorksheetResponse)
async def get_worksheet(project_number: str, repo: QuoteRepository = Depends(get_repository)):
    quotes = await repo.list_quotes(project_number)
    if not quotes:
        raise HTTPException(status_code=404, detail=f"No quotes found for project {project_number}")
    prior = await repo.load_worksheet(project_number)
    worksheet = merge_roles(quotes, prior)
    return _worksheet_response(project_number, len(quotes), worksheet)


@router.put("/{project_number}", response_model=WorksheetResponse)
async def save_worksheet(
    project_number: str,
    req: WorksheetUpdateRequest,
    repo: QuoteRepository = Depends(get_repository),
):
    """
    Persist the edited scheduling fields, then answer with the worksheet as it
    will look on next load (requirements re-derived, stale roles dropped).
    """
    quotes = await repo.list_quotes(project_number)
    if not quotes:
        raise HTTPException(status_code=404, detail=f"No quotes found for project {project_number}")
    edited = ResourcingWorksheet.from_document(
        {
            phase: {dept: [a.model_dump() for a in roles] for dept, roles in departments.items()}
            for phase, departments in req.resourceAssignments.items()
        }
    )
    worksheet = merge_roles(quotes, edited)
    await repo.save_worksheet(project_number, worksheet)
    return _worksheet_response(project_number, len(quotes), worksheet)
