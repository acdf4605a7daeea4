from datetime import datetime, timezone

import pytest

from app.exceptions import ValidationError
from services.status_rollup import (
    ComponentState,
    rollup,
    status_from_logged_hours,
    validate_component_status,
)


def states(*statuses):
    return [ComponentState(s) for s in statuses]


def test_no_components_is_pending():
    assert rollup([]).status == "Pending"


def test_all_completed_takes_latest_completion():
    early = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    late = datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)

    result = rollup([ComponentState("Live", early), ComponentState("Preprod_Signoff", late)])

    assert result.status == "Completed"
    assert result.completed_at == late


def test_naive_and_aware_completion_times_compare():
    naive = datetime(2024, 1, 3, 10, 0)
    aware = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    result = rollup([ComponentState("Completed", naive), ComponentState("Live", aware)])

    assert result.completed_at == naive


@pytest.mark.parametrize(
    "statuses,expected",
    [
        (("Live", "Under_QA"), "WIP"),
        (("Hold", "Under_Development"), "WIP"),
        (("Hold", "Pending"), "Hold"),
        (("Dropped", "Dropped"), "Dropped"),
        (("Dropped", "Live"), "Pending"),
        (("Pending", "BRS_Discussion"), "Pending"),
    ],
)
def test_rollup_precedence(statuses, expected):
    result = rollup(states(*statuses))

    assert result.status == expected
    assert result.completed_at is None


def test_rollup_is_idempotent():
    components = states("Under_UAT", "Hold", "Live")

    assert rollup(components) == rollup(components)


def test_unknown_component_status_rejected():
    with pytest.raises(ValidationError):
        validate_component_status("Shipped")
    assert validate_component_status("UAT_Signoff") == "UAT_Signoff"


@pytest.mark.parametrize(
    "logged,current,expected",
    [
        (0, "Under_QA", "Pending"),
        (4, "Under_QA", "Under_QA"),
        (4, "Live", "Under_Development"),
        (4, "Pending", "Under_Development"),
        (9.996, "Under_QA", "Under_QA"),
        (10, "Under_QA", "Completed"),
    ],
)
def test_status_from_logged_hours(logged, current, expected):
    assert status_from_logged_hours(logged, 10, current) == expected
