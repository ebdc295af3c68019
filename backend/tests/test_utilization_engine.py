"""
test_utilization_engine.py — Unit tests for per-person coverage.

All windows are anchored to FIXED_NOW (Wednesday 15 May 2024):
    week     Sun 12 May .. Sat 18 May
    month    1 May .. 31 May
    quarter  1 Apr .. 30 Jun

Tests cover:
  - Window bounds, including year and leap-year edges
  - Inclusive overlap and exclusion of unscheduled assignments
  - Hours / average allocation / count per window
  - Roster handling (zero records, exact name match, team grouping)
  - This/next week and month allocation outlook
"""

from datetime import date, datetime

import pytest

from quotehub.services.resourcing_engine import ResourceAssignment
from quotehub.services.utilization_engine import (
    Person,
    Team,
    allocation_outlook,
    compute_coverage,
    coverage_record,
    month_window,
    overlaps,
    parse_roster,
    quarter_window,
    team_coverage,
    week_window,
    window_bounds,
)


def _assignment(assignee, start, end, allocation=100.0, hours=0.0, role="Designer"):
    return ResourceAssignment(
        phase="Planning", department="Creative", role_name=role,
        allocation_percent=allocation, hours=hours, assignee=assignee,
        start_date=start, end_date=end,
    )


# ===========================================================================
# Class 1: Window bounds
# ===========================================================================

class TestWindows:

    def test_week_runs_sunday_to_saturday(self, fixed_now):
        assert week_window(fixed_now) == (date(2024, 5, 12), date(2024, 5, 18))

    def test_week_on_a_sunday_starts_that_day(self):
        assert week_window(date(2024, 5, 12)) == (date(2024, 5, 12), date(2024, 5, 18))

    def test_week_on_a_saturday(self):
        assert week_window(date(2024, 5, 18)) == (date(2024, 5, 12), date(2024, 5, 18))

    def test_week_across_year_end(self):
        assert week_window(date(2025, 1, 1)) == (date(2024, 12, 29), date(2025, 1, 4))

    def test_month(self, fixed_now):
        assert month_window(fixed_now) == (date(2024, 5, 1), date(2024, 5, 31))

    def test_leap_february(self):
        assert month_window(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    @pytest.mark.parametrize("day, expected", [
        (date(2024, 1, 1), (date(2024, 1, 1), date(2024, 3, 31))),
        (date(2024, 5, 15), (date(2024, 4, 1), date(2024, 6, 30))),
        (date(2024, 9, 30), (date(2024, 7, 1), date(2024, 9, 30))),
        (date(2024, 12, 31), (date(2024, 10, 1), date(2024, 12, 31))),
    ])
    def test_quarter(self, day, expected):
        assert quarter_window(day) == expected

    def test_unknown_window_name(self, fixed_now):
        with pytest.raises(ValueError):
            window_bounds("fortnight", fixed_now)


# ===========================================================================
# Class 2: Overlap
# ===========================================================================

class TestOverlap:

    WEEK = (date(2024, 5, 12), date(2024, 5, 18))

    def test_exact_window_span_is_included(self):
        assert overlaps(_assignment("Dana", *self.WEEK), self.WEEK)

    def test_touching_either_end_is_included(self):
        assert overlaps(_assignment("Dana", date(2024, 5, 1), date(2024, 5, 12)), self.WEEK)
        assert overlaps(_assignment("Dana", date(2024, 5, 18), date(2024, 6, 1)), self.WEEK)

    def test_day_after_window_end_is_excluded(self):
        assert not overlaps(_assignment("Dana", date(2024, 5, 19), date(2024, 5, 25)), self.WEEK)

    def test_day_before_window_start_is_excluded(self):
        assert not overlaps(_assignment("Dana", date(2024, 5, 1), date(2024, 5, 11)), self.WEEK)

    def test_missing_dates_never_overlap(self):
        assert not overlaps(_assignment("Dana", None, date(2024, 5, 15)), self.WEEK)
        assert not overlaps(_assignment("Dana", date(2024, 5, 15), None), self.WEEK)
        assert not overlaps(_assignment("Dana", None, None), self.WEEK)


# ===========================================================================
# Class 3: Coverage
# ===========================================================================

class TestCoverage:

    def test_unweighted_average_allocation(self):
        """(50 + 100 + 0) / 3 = 50, count 3."""
        record = coverage_record([
            _assignment("Dana", date(2024, 5, 13), date(2024, 5, 14), allocation=50),
            _assignment("Dana", date(2024, 5, 1), date(2024, 5, 31), allocation=100),
            _assignment("Dana", date(2024, 5, 15), date(2024, 5, 15), allocation=0),
        ])
        assert record.avg_allocation_percent == 50
        assert record.assignment_count == 3

    def test_hours_are_rounded_sum(self):
        """10.25 + 5.25 = 15.5 -> 16."""
        record = coverage_record([
            _assignment("Dana", None, None, hours=10.25),
            _assignment("Dana", None, None, hours=5.25),
        ])
        assert record.hours == 16

    def test_per_window_counts(self, fixed_now):
        roster = [Person(id="p1", name="Dana")]
        assignments = [
            _assignment("Dana", date(2024, 5, 14), date(2024, 5, 16), hours=20, role="A"),
            _assignment("Dana", date(2024, 5, 25), date(2024, 5, 28), hours=10, role="B"),
            _assignment("Dana", date(2024, 6, 10), date(2024, 6, 20), hours=5, role="C"),
            _assignment("Dana", date(2024, 8, 1), date(2024, 8, 5), hours=99, role="D"),
            _assignment("Dana", None, None, hours=1000, role="E"),
        ]
        coverage = compute_coverage(roster, assignments, fixed_now)["p1"]
        assert (coverage.week.assignment_count, coverage.week.hours) == (1, 20)
        assert (coverage.month.assignment_count, coverage.month.hours) == (2, 30)
        assert (coverage.quarter.assignment_count, coverage.quarter.hours) == (3, 35)

    def test_roster_person_without_assignments_gets_zeros(self, fixed_now):
        coverage = compute_coverage([Person(id="p2", name="Sam")], [], fixed_now)
        record = coverage["p2"]
        for window in (record.week, record.month, record.quarter):
            assert window.hours == 0
            assert window.avg_allocation_percent == 0
            assert window.assignment_count == 0

    def test_name_match_is_exact(self, fixed_now):
        assignments = [_assignment("dana", date(2024, 5, 15), date(2024, 5, 15))]
        coverage = compute_coverage([Person(id="p1", name="Dana")], assignments, fixed_now)
        assert coverage["p1"].week.assignment_count == 0

    def test_empty_name_never_matches_empty_assignee(self, fixed_now):
        assignments = [_assignment("", date(2024, 5, 15), date(2024, 5, 15))]
        coverage = compute_coverage([Person(id="ghost", name="")], assignments, fixed_now)
        assert coverage["ghost"].week.assignment_count == 0

    def test_datetime_and_date_anchor_agree(self, fixed_now):
        roster = [Person(id="p1", name="Dana")]
        assignments = [_assignment("Dana", date(2024, 5, 18), date(2024, 5, 18))]
        by_datetime = compute_coverage(roster, assignments, fixed_now)
        by_date = compute_coverage(roster, assignments, fixed_now.date())
        assert by_datetime == by_date


# ===========================================================================
# Class 4: Roster and teams
# ===========================================================================

class TestRoster:

    ROSTER = [
        {"id": "t1", "name": "Studio", "type": "team"},
        {"id": "p1", "name": "Dana", "role": "Designer", "parentId": "t1"},
        {"name": "Sam", "role": "Writer", "parentId": "t1"},
        {"id": "p3", "name": "Alex"},
        "not-an-entry",
    ]

    def test_parse_roster(self):
        people, teams = parse_roster(self.ROSTER)
        assert teams == [Team(id="t1", name="Studio")]
        assert [p.id for p in people] == ["p1", "Sam", "p3"]
        assert people[0].team_id == "t1"

    def test_team_grouping(self, fixed_now):
        people, teams = parse_roster(self.ROSTER)
        coverage = compute_coverage(people, [], fixed_now)
        grouped = team_coverage(teams, coverage)
        assert len(grouped) == 1
        assert [c.person.name for c in grouped[0]["members"]] == ["Dana", "Sam"]


# ===========================================================================
# Class 5: Allocation outlook
# ===========================================================================

class TestAllocationOutlook:

    def test_labels_and_ranges(self, fixed_now):
        outlook = allocation_outlook("Dana", [], fixed_now)
        assert [o["label"] for o in outlook] == ["This Week", "Next Week", "This Month", "Next Month"]
        assert (outlook[1]["start"], outlook[1]["end"]) == ("2024-05-19", "2024-05-25")
        assert (outlook[3]["start"], outlook[3]["end"]) == ("2024-06-01", "2024-06-30")

    def test_allocation_summed_and_capped(self, fixed_now):
        assignments = [
            _assignment("Dana", date(2024, 5, 13), date(2024, 5, 17), allocation=60, role="A"),
            _assignment("Dana", date(2024, 5, 15), date(2024, 5, 24), allocation=70, role="B"),
            _assignment("Dana", date(2024, 6, 3), date(2024, 6, 7), allocation=30, role="C"),
        ]
        by_label = {o["label"]: o["allocation"] for o in allocation_outlook("Dana", assignments, fixed_now)}
        assert by_label == {
            "This Week": 100,
            "Next Week": 70,
            "This Month": 100,
            "Next Month": 30,
        }

    def test_next_month_rolls_over_the_year(self):
        outlook = allocation_outlook("Dana", [], datetime(2024, 12, 20))
        assert (outlook[3]["start"], outlook[3]["end"]) == ("2025-01-01", "2025-01-31")
