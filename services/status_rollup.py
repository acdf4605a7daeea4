"""Component status families and the work item rollup rule.

Everything here is a pure function of its inputs; persistence and worklog
reconciliation live in ``services.work_item_service``.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from app.exceptions import ValidationError
from models.enums import WorkItemStatus
from services.clock import wall_clock

PENDING_STATUSES = frozenset(
    {"Pending", "BRS_Discussion", "Approach_Preparation", "Approach_Finalization"}
)
WIP_STATUSES = frozenset(
    {"Under_Development", "Under_QA", "Under_UAT", "UAT_Signoff", "Under_Preprod", "WIP"}
)
COMPLETED_STATUSES = frozenset({"Live", "Preprod_Signoff", "Completed"})
HOLD = "Hold"
DROPPED = "Dropped"

COMPONENT_STATUSES = PENDING_STATUSES | WIP_STATUSES | COMPLETED_STATUSES | {HOLD, DROPPED}

# Status set when hours are logged on a component that is not yet in progress.
WIP_MARKER = "Under_Development"
PENDING = "Pending"
COMPLETED = "Completed"

# Slack for float sums of logged hours; anything larger is a real overrun.
HOURS_TOLERANCE = 1e-9


def is_completed(status: str | None) -> bool:
    return status in COMPLETED_STATUSES


def is_wip(status: str | None) -> bool:
    return status in WIP_STATUSES


def validate_component_status(status: str) -> str:
    """Return ``status`` unchanged, or raise ValidationError for unknown values."""
    if status not in COMPONENT_STATUSES:
        raise ValidationError(
            f"Unknown component status {status!r}. Allowed: {', '.join(sorted(COMPONENT_STATUSES))}"
        )
    return status


@dataclass(frozen=True)
class ComponentState:
    """The slice of a component the rollup depends on."""

    status: str
    completed_at: datetime | None = None


@dataclass(frozen=True)
class RollupResult:
    status: str
    completed_at: datetime | None


def rollup(components: Iterable[ComponentState]) -> RollupResult:
    """Derive a work item's status from its components' statuses.

    1. All components completed -> Completed, stamped with the latest child
       completion time.
    2. Any component in progress -> WIP.
    3. Any component on hold -> Hold.
    4. All components dropped -> Dropped.
    5. Otherwise -> Pending.

    A work item without components is Pending.
    """
    states = list(components)
    if not states:
        return RollupResult(WorkItemStatus.PENDING.value, None)

    statuses = [state.status for state in states]

    if all(is_completed(s) for s in statuses):
        stamps = [state.completed_at for state in states if state.completed_at is not None]
        return RollupResult(
            WorkItemStatus.COMPLETED.value,
            max(stamps, key=wall_clock) if stamps else None,
        )
    if any(is_wip(s) for s in statuses):
        return RollupResult(WorkItemStatus.WIP.value, None)
    if any(s == HOLD for s in statuses):
        return RollupResult(WorkItemStatus.HOLD.value, None)
    if all(s == DROPPED for s in statuses):
        return RollupResult(WorkItemStatus.DROPPED.value, None)
    return RollupResult(WorkItemStatus.PENDING.value, None)


def status_from_logged_hours(logged: float, total: float, current: str) -> str:
    """Re-derive a component status from its logged hours alone.

    Zero hours -> Pending; partial -> the current in-progress stage, or the
    generic WIP marker when the component was not in progress; full ->
    Completed.
    """
    if logged <= HOURS_TOLERANCE:
        return PENDING
    if fills_capacity(logged, total):
        return COMPLETED
    return current if is_wip(current) else WIP_MARKER


def exceeds_capacity(logged: float, total: float) -> bool:
    """True when ``logged`` is above ``total`` by more than float noise."""
    return logged - total > HOURS_TOLERANCE


def fills_capacity(logged: float, total: float) -> bool:
    return total - logged <= HOURS_TOLERANCE


def round_hours(hours: float) -> float:
    """Hours rounded to two decimals for messages and automatic logs."""
    return round(float(hours or 0), 2)
