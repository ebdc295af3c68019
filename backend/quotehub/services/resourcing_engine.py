"""
Role extraction & merge engine — builds a project's resourcing worksheet.

Role requirements (weeks, hours) are always re-derived from the project's
quotes. The only fields a person edits (assignee, start/end date) are overlaid
from the previously saved worksheet by identity key::

    (phase, department, role name)

Roles sharing a key are merged and their weeks/hours summed, across quotes and
across stages. Two same-named roles inside one department cannot be told
apart and are merged as well; this is the accepted identity rule.
"""
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from quotehub.services.effort_models import Quote
from quotehub.services.numeric import to_amount, to_date, to_text
from quotehub.services.perf_monitor import timed

logger = logging.getLogger("quotehub-resourcing")

AssignmentKey = Tuple[str, str, str]


@dataclass(frozen=True)
class ResourceAssignment:
    phase: str
    department: str
    role_name: str
    allocation_percent: float = 0.0
    weeks: float = 0.0
    hours: float = 0.0
    assignee: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def key(self) -> AssignmentKey:
        return (self.phase, self.department, self.role_name)

    @property
    def is_scheduled(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    @classmethod
    def from_document(
        cls, doc: Mapping[str, Any], phase: str = "", department: str = ""
    ) -> "ResourceAssignment":
        return cls(
            phase=to_text(doc.get("phase")) or phase,
            department=to_text(doc.get("department")) or department,
            role_name=to_text(doc.get("roleName", doc.get("role"))),
            allocation_percent=to_amount(doc.get("allocation")),
            weeks=to_amount(doc.get("weeks", doc.get("totalWeeks"))),
            hours=to_amount(doc.get("hours")),
            assignee=to_text(doc.get("assignee")),
            start_date=to_date(doc.get("startDate")),
            end_date=to_date(doc.get("endDate")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "roleName": self.role_name,
            "allocation": self.allocation_percent,
            "weeks": self.weeks,
            "hours": self.hours,
            "assignee": self.assignee,
            "startDate": self.start_date.isoformat() if self.start_date else "",
            "endDate": self.end_date.isoformat() if self.end_date else "",
        }


class ResourcingWorksheet:
    """
    Assignments grouped phase -> department -> role list, in first-seen order.

    Iterating a worksheet yields its assignments flat, so a worksheet can be
    passed straight back to :func:`merge_roles` as the prior assignments.
    """

    def __init__(self, assignments: Iterable[ResourceAssignment] = ()) -> None:
        self.phases: Dict[str, Dict[str, List[ResourceAssignment]]] = {}
        for assignment in assignments:
            self.phases.setdefault(assignment.phase, {}) \
                .setdefault(assignment.department, []) \
                .append(assignment)

    def __iter__(self) -> Iterator[ResourceAssignment]:
        for departments in self.phases.values():
            for roles in departments.values():
                yield from roles

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def get(self, phase: str, department: str, role_name: str) -> Optional[ResourceAssignment]:
        for assignment in self.phases.get(phase, {}).get(department, []):
            if assignment.role_name == role_name:
                return assignment
        return None

    @classmethod
    def from_document(cls, doc: Optional[Mapping[str, Any]]) -> "ResourcingWorksheet":
        """Parse the persisted ``{phase: {department: [assignment, ...]}}`` shape."""
        assignments: List[ResourceAssignment] = []
        for phase, departments in (doc or {}).items():
            if not isinstance(departments, Mapping):
                continue
            for department, roles in departments.items():
                for role in roles or []:
                    if isinstance(role, Mapping):
                        assignments.append(
                            ResourceAssignment.from_document(role, phase, department)
                        )
        return cls(assignments)

    def to_document(self) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
        return {
            phase: {
                department: [a.to_document() for a in roles]
                for department, roles in departments.items()
            }
            for phase, departments in self.phases.items()
        }


def extract_roles(quotes: Iterable[Quote]) -> Dict[AssignmentKey, ResourceAssignment]:
    """
    Fold every role of every quote into one record per identity key.

    The first occurrence fixes allocation percent; later occurrences only add
    their weeks and hours.
    """
    merged: Dict[AssignmentKey, ResourceAssignment] = {}
    for quote in quotes:
        for phase, stages in quote.effort.items():
            for stage in stages:
                for department in stage.departments:
                    for role in department.roles:
                        key = (phase, department.name, role.name)
                        existing = merged.get(key)
                        if existing is None:
                            merged[key] = ResourceAssignment(
                                phase=phase,
                                department=department.name,
                                role_name=role.name,
                                allocation_percent=role.allocation_percent,
                                weeks=role.weeks,
                                hours=role.hours,
                            )
                        else:
                            merged[key] = replace(
                                existing,
                                weeks=existing.weeks + role.weeks,
                                hours=existing.hours + role.hours,
                            )
    return merged


@timed
def merge_roles(
    quotes: Iterable[Quote],
    prior_assignments: Union[ResourcingWorksheet, Iterable[ResourceAssignment]] = (),
) -> ResourcingWorksheet:
    """
    Build the worksheet for one project's quotes and overlay saved scheduling.

    ``quotes`` must already be filtered to a single project. Prior records
    whose key no longer exists are dropped.
    """
    merged = extract_roles(quotes)

    overlaid = 0
    stale = 0
    for prior in prior_assignments:
        current = merged.get(prior.key)
        if current is None:
            stale += 1
            continue
        merged[prior.key] = replace(
            current,
            assignee=prior.assignee,
            start_date=prior.start_date,
            end_date=prior.end_date,
        )
        overlaid += 1

    logger.info(
        f"Merged {len(merged)} roles; overlaid {overlaid} saved assignments, "
        f"discarded {stale} stale"
    )
    return ResourcingWorksheet(merged.values())


def resourced_people(assignments: Iterable[ResourceAssignment]) -> List[str]:
    """Sorted unique non-empty assignee names."""
    return sorted({a.assignee.strip() for a in assignments if a.assignee.strip()})
