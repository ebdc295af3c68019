"""
test_resourcing_engine.py — Unit tests for role extraction and merge.

Tests cover:
  - Cross-quote / cross-stage summation of weeks and hours
  - Allocation percent fixed by the first occurrence
  - Overlay of saved assignee and dates by (phase, department, role) key
  - Stale saved roles are discarded
  - Idempotence when the merge output is fed back as the prior worksheet
  - Worksheet document round trip and resourced people list
"""

from dataclasses import replace
from datetime import date

import pytest

from factories import department_doc, quote_doc, role_doc, stage_doc
from quotehub.services.effort_models import Quote
from quotehub.services.resourcing_engine import (
    ResourceAssignment,
    ResourcingWorksheet,
    extract_roles,
    merge_roles,
    resourced_people,
)


def _quote(quote_id, phase_data):
    return Quote.from_document(quote_doc(quote_id, phase_data=phase_data))


@pytest.fixture
def designer_quotes():
    """Two quotes on one project, both staffing Planning / Creative / Designer."""
    return [
        _quote("q1", {"Planning": [stage_doc([
            department_doc("Creative", [role_doc("Designer", weeks=2, hours=40, allocation=50)]),
        ])]}),
        _quote("q2", {"Planning": [stage_doc([
            department_doc("Creative", [role_doc("Designer", weeks=1, hours=10, allocation=80)]),
            department_doc("Accounts", [role_doc("Account Manager", weeks=4, hours=20, allocation=25)]),
        ])]}),
    ]


class TestExtractRoles:

    def test_same_key_is_summed(self, designer_quotes):
        """weeks 2 + 1 = 3, hours 40 + 10 = 50."""
        merged = extract_roles(designer_quotes)
        designer = merged[("Planning", "Creative", "Designer")]
        assert designer.weeks == 3
        assert designer.hours == 50

    def test_allocation_from_first_occurrence(self, designer_quotes):
        merged = extract_roles(designer_quotes)
        assert merged[("Planning", "Creative", "Designer")].allocation_percent == 50

    def test_different_phase_is_a_different_role(self):
        quote = _quote("q1", {
            "Planning": [stage_doc([department_doc("Creative", [role_doc("Designer", weeks=1)])])],
            "Production/Execution": [stage_doc([department_doc("Creative", [role_doc("Designer", weeks=2)])])],
        })
        assert len(extract_roles([quote])) == 2

    def test_same_name_within_department_merges(self):
        quote = _quote("q1", {"Planning": [stage_doc([
            department_doc("Creative", [role_doc("Designer", hours=5), role_doc("Designer", hours=7)]),
        ])]})
        merged = extract_roles([quote])
        assert len(merged) == 1
        assert merged[("Planning", "Creative", "Designer")].hours == 12

    def test_missing_allocation_defaults_to_zero(self):
        quote = _quote("q1", {"Planning": [stage_doc([
            department_doc("Creative", [{"name": "Designer", "weeks": 1}]),
        ])]})
        assert extract_roles([quote])[("Planning", "Creative", "Designer")].allocation_percent == 0


class TestMergeRoles:

    def test_fresh_merge_has_no_scheduling(self, designer_quotes):
        worksheet = merge_roles(designer_quotes)
        assert len(worksheet) == 2
        assert all(a.assignee == "" and not a.is_scheduled for a in worksheet)

    def test_overlay_copies_assignee_and_dates(self, designer_quotes):
        prior = [ResourceAssignment(
            phase="Planning", department="Creative", role_name="Designer",
            weeks=99, hours=999, allocation_percent=5,
            assignee="Dana", start_date=date(2024, 5, 1), end_date=date(2024, 5, 31),
        )]
        designer = merge_roles(designer_quotes, prior).get("Planning", "Creative", "Designer")
        assert designer.assignee == "Dana"
        assert designer.start_date == date(2024, 5, 1)
        assert designer.end_date == date(2024, 5, 31)
        # requirements always come from the quotes
        assert designer.weeks == 3
        assert designer.hours == 50
        assert designer.allocation_percent == 50

    def test_stale_prior_roles_are_dropped(self, designer_quotes):
        prior = [ResourceAssignment(
            phase="Planning", department="Creative", role_name="Illustrator", assignee="Sam",
        )]
        worksheet = merge_roles(designer_quotes, prior)
        assert worksheet.get("Planning", "Creative", "Illustrator") is None
        assert "Sam" not in resourced_people(worksheet)

    def test_idempotent_when_fed_back(self, designer_quotes):
        first = merge_roles(designer_quotes)
        edited = ResourcingWorksheet(
            replace(a, assignee="Dana", start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))
            if a.role_name == "Designer" else a
            for a in first
        )
        second = merge_roles(designer_quotes, edited)
        third = merge_roles(designer_quotes, second)
        assert [a.to_document() for a in third] == [a.to_document() for a in second]
        designer = third.get("Planning", "Creative", "Designer")
        assert designer.assignee == "Dana"
        assert designer.weeks == 3

    def test_grouped_by_phase_and_department(self, designer_quotes):
        worksheet = merge_roles(designer_quotes)
        assert list(worksheet.phases) == ["Planning"]
        assert list(worksheet.phases["Planning"]) == ["Creative", "Accounts"]


class TestWorksheetDocument:

    def test_round_trip(self):
        doc = {
            "Planning": {
                "Creative": [{
                    "roleName": "Designer", "allocation": 50, "weeks": 3, "hours": 50,
                    "assignee": " Dana ", "startDate": "2024-05-01", "endDate": "",
                }],
            },
        }
        worksheet = ResourcingWorksheet.from_document(doc)
        designer = worksheet.get("Planning", "Creative", "Designer")
        assert designer.assignee == "Dana"
        assert designer.start_date == date(2024, 5, 1)
        assert designer.end_date is None
        assert not designer.is_scheduled
        out = worksheet.to_document()["Planning"]["Creative"][0]
        assert out["startDate"] == "2024-05-01"
        assert out["endDate"] == ""

    def test_empty_document(self):
        assert len(ResourcingWorksheet.from_document(None)) == 0

    def test_resourced_people_sorted_unique(self):
        assignments = [
            ResourceAssignment("Planning", "Creative", "Designer", assignee="Sam"),
            ResourceAssignment("Planning", "Creative", "Writer", assignee="Alex"),
            ResourceAssignment("Planning", "Design", "Art Director", assignee="Sam"),
            ResourceAssignment("Planning", "Design", "Producer", assignee=""),
        ]
        assert resourced_people(assignments) == ["Alex", "Sam"]
