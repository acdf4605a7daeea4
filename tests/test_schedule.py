from datetime import date
from types import SimpleNamespace

import pytest

from services.schedule_service import compute_schedule_updates, man_days_between

MONDAY = date(2024, 1, 1)


def make_project(**overrides):
    fields = dict(
        stage="BRS_Discussion",
        start_date=MONDAY,
        planned_end_date=date(2024, 3, 29),
        sprint_start_date=None,
        sprint_end_date=None,
        uat_release_date=None,
        go_live_date=None,
        on_track_status="On Track",
        man_days=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def apply(project, updates):
    for field, value in updates.items():
        setattr(project, field, value)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (MONDAY, date(2024, 1, 5), 5),
        (MONDAY, date(2024, 1, 8), 6),
        (date(2024, 1, 6), date(2024, 1, 7), 0),
        (MONDAY, MONDAY, 1),
        (date(2024, 1, 5), MONDAY, 0),
        (MONDAY, date(2024, 3, 29), 65),
    ],
)
def test_man_days_counts_weekdays_inclusive(start, end, expected):
    assert man_days_between(start, end) == expected


def test_man_days_needs_both_dates():
    assert man_days_between(None, MONDAY) is None


def test_sprint_dates_follow_development_stage():
    project = make_project(stage="Under_Development", man_days=65)
    day_one = date(2024, 2, 1)

    updates = compute_schedule_updates(project, day_one)
    assert updates == {"sprint_start_date": day_one}
    apply(project, updates)

    project.stage = "Under_QA"
    day_two = date(2024, 2, 15)
    updates = compute_schedule_updates(project, day_two)
    assert updates == {"sprint_end_date": day_two}
    apply(project, updates)

    project.stage = "BRS_Discussion"
    updates = compute_schedule_updates(project, date(2024, 2, 20))
    assert updates == {"sprint_start_date": None, "sprint_end_date": None}


def test_updates_are_idempotent():
    project = make_project(stage="Live")
    today = date(2024, 2, 1)

    apply(project, compute_schedule_updates(project, today))

    assert compute_schedule_updates(project, today) == {}


def test_milestones_are_forward_safe():
    project = make_project(stage="UAT_Signoff", sprint_start_date=MONDAY, sprint_end_date=MONDAY, man_days=65)
    uat_day = date(2024, 2, 1)
    apply(project, compute_schedule_updates(project, uat_day))
    assert project.uat_release_date == uat_day

    project.stage = "Live"
    live_day = date(2024, 2, 20)
    apply(project, compute_schedule_updates(project, live_day))
    assert project.uat_release_date == uat_day
    assert project.go_live_date == live_day

    project.stage = "Under_UAT"
    apply(project, compute_schedule_updates(project, date(2024, 2, 21)))
    assert project.uat_release_date is None
    assert project.go_live_date is None
    assert project.sprint_start_date == MONDAY


def test_delayed_when_no_working_days_remain():
    project = make_project(planned_end_date=date(2024, 1, 31))

    assert compute_schedule_updates(project, date(2024, 2, 1))["on_track_status"] == "Delayed"


def test_on_track_without_planned_end():
    project = make_project(planned_end_date=None, on_track_status="Delayed")

    updates = compute_schedule_updates(project, date(2024, 2, 1))

    assert updates["on_track_status"] == "On Track"
    assert "man_days" not in updates


def test_hold_leaves_stage_dates_untouched():
    project = make_project(
        stage="Hold",
        sprint_start_date=MONDAY,
        uat_release_date=date(2024, 1, 20),
        man_days=65,
    )

    assert compute_schedule_updates(project, date(2024, 2, 1)) == {}
