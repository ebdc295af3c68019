"""
Utilization engine — per-person coverage over anchored time windows.

Windows are anchored to an injected ``now``:
  - week     Sunday..Saturday containing now
  - month    calendar month containing now
  - quarter  3-month calendar block containing now

An assignment counts toward a window when it names the person exactly, has
both dates, and ``start <= window_end and end >= window_start`` (inclusive).
Per window the engine reports summed hours (rounded), the unweighted mean
allocation percent (rounded) and the number of overlapping assignments.
"""
import calendar
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from quotehub.config import OUTLOOK_ALLOCATION_CAP, UTILIZATION_WINDOWS
from quotehub.services.numeric import round_half_up, to_text
from quotehub.services.resourcing_engine import ResourceAssignment

logger = logging.getLogger("quotehub-utilization")

Window = Tuple[date, date]


@dataclass(frozen=True)
class Person:
    id: str
    name: str
    role: str = ""
    team_id: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Person":
        return cls(
            id=to_text(doc.get("id")) or to_text(doc.get("name")),
            name=to_text(doc.get("name")),
            role=to_text(doc.get("role")),
            team_id=to_text(doc.get("parentId")),
        )


@dataclass(frozen=True)
class Team:
    id: str
    name: str


@dataclass(frozen=True)
class CoverageRecord:
    hours: int = 0
    avg_allocation_percent: int = 0
    assignment_count: int = 0


@dataclass(frozen=True)
class PersonCoverage:
    person: Person
    week: CoverageRecord = field(default_factory=CoverageRecord)
    month: CoverageRecord = field(default_factory=CoverageRecord)
    quarter: CoverageRecord = field(default_factory=CoverageRecord)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_roster(doc: Optional[Iterable[Mapping[str, Any]]]) -> Tuple[List[Person], List[Team]]:
    """Split a stored team structure into people and teams."""
    people: List[Person] = []
    teams: List[Team] = []
    for entry in doc or []:
        if not isinstance(entry, Mapping):
            continue
        if entry.get("type") == "team":
            teams.append(Team(id=to_text(entry.get("id")), name=to_text(entry.get("name"))))
        else:
            people.append(Person.from_document(entry))
    return people, teams


def _as_date(now: Union[date, datetime]) -> date:
    return now.date() if isinstance(now, datetime) else now


def week_window(now: Union[date, datetime]) -> Window:
    today = _as_date(now)
    # date.weekday(): Monday=0 .. Sunday=6; weeks here start on Sunday
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def month_window(now: Union[date, datetime]) -> Window:
    today = _as_date(now)
    last_day = calendar.monthrange(today.year, today.month)[1]
    return date(today.year, today.month, 1), date(today.year, today.month, last_day)


def quarter_window(now: Union[date, datetime]) -> Window:
    today = _as_date(now)
    first_month = (today.month - 1) // 3 * 3 + 1
    last_month = first_month + 2
    last_day = calendar.monthrange(today.year, last_month)[1]
    return date(today.year, first_month, 1), date(today.year, last_month, last_day)


WINDOW_BUILDERS = {
    "week": week_window,
    "month": month_window,
    "quarter": quarter_window,
}


def window_bounds(window: str, now: Union[date, datetime]) -> Window:
    if window not in WINDOW_BUILDERS:
        raise ValueError(f"Unknown utilization window {window!r}; expected one of {UTILIZATION_WINDOWS}")
    return WINDOW_BUILDERS[window](now)


def overlaps(assignment: ResourceAssignment, window: Window) -> bool:
    """Inclusive overlap; unscheduled assignments never overlap anything."""
    if not assignment.is_scheduled:
        return False
    window_start, window_end = window
    return assignment.start_date <= window_end and assignment.end_date >= window_start


def coverage_record(assignments: Iterable[ResourceAssignment]) -> CoverageRecord:
    matched = list(assignments)
    count = len(matched)
    if count == 0:
        return CoverageRecord()
    hours = sum(a.hours for a in matched)
    allocation = sum(a.allocation_percent for a in matched)
    return CoverageRecord(
        hours=round_half_up(hours),
        avg_allocation_percent=round_half_up(allocation / count),
        assignment_count=count,
    )


def compute_coverage(
    roster: Iterable[Person],
    assignments: Iterable[ResourceAssignment],
    now: Union[date, datetime],
) -> Dict[str, PersonCoverage]:
    """
    Person id -> week/month/quarter coverage.

    Every roster entry gets a record, all zeros when nothing matches.
    """
    assignments = list(assignments)
    windows = {name: window_bounds(name, now) for name in UTILIZATION_WINDOWS}

    coverage: Dict[str, PersonCoverage] = {}
    for person in roster:
        mine = [a for a in assignments if person.name and a.assignee == person.name]
        records = {
            name: coverage_record(a for a in mine if overlaps(a, bounds))
            for name, bounds in windows.items()
        }
        coverage[person.id] = PersonCoverage(person=person, **records)

    logger.info(
        f"Computed coverage for {len(coverage)} people from {len(assignments)} assignments"
    )
    return coverage


def team_coverage(
    teams: Iterable[Team], coverage: Mapping[str, PersonCoverage]
) -> List[Dict[str, Any]]:
    """Group person coverage under each team (``person.team_id == team.id``)."""
    return [
        {
            "id": team.id,
            "name": team.name,
            "members": [c for c in coverage.values() if c.person.team_id == team.id],
        }
        for team in teams
    ]


def allocation_outlook(
    person_name: str,
    assignments: Iterable[ResourceAssignment],
    now: Union[date, datetime],
) -> List[Dict[str, Any]]:
    """
    Summed allocation for this/next week and this/next month, capped for
    display. Uses the same inclusive overlap rule as :func:`compute_coverage`.
    """
    name = person_name.strip()
    mine = [a for a in assignments if name and a.assignee.strip() == name]

    this_week = week_window(now)
    next_week_start = this_week[0] + timedelta(days=7)
    this_month = month_window(now)
    next_month = month_window(this_month[1] + timedelta(days=1))

    ranges = [
        ("This Week", this_week),
        ("Next Week", (next_week_start, next_week_start + timedelta(days=6))),
        ("This Month", this_month),
        ("Next Month", next_month),
    ]
    outlook = []
    for label, bounds in ranges:
        total = sum(a.allocation_percent for a in mine if overlaps(a, bounds))
        outlook.append({
            "label": label,
            "start": bounds[0].isoformat(),
            "end": bounds[1].isoformat(),
            "allocation": min(OUTLOOK_ALLOCATION_CAP, round_half_up(total)),
        })
    return outlook
