"""Stage-driven schedule automaton for projects.

``compute_schedule_updates`` is a pure function of a project snapshot and the
current date. It returns only the fields whose value would change, so
applying its result twice is a no-op.
"""

from datetime import date, timedelta
from typing import Any

from models.enums import OnTrackStatus, ProjectStage

STAGES: list[str] = [
    ProjectStage.BRS_DISCUSSION.value,
    ProjectStage.APPROACH_PREPARATION.value,
    ProjectStage.APPROACH_FINALIZATION.value,
    ProjectStage.UNDER_DEVELOPMENT.value,
    ProjectStage.UNDER_QA.value,
    ProjectStage.UNDER_UAT.value,
    ProjectStage.UAT_SIGNOFF.value,
    ProjectStage.UNDER_PREPROD.value,
    ProjectStage.PREPROD_SIGNOFF.value,
    ProjectStage.LIVE.value,
]
SIDE_STAGES = frozenset({ProjectStage.HOLD.value, ProjectStage.DROPPED.value})
ALL_STAGES = frozenset(STAGES) | SIDE_STAGES

DEVELOPMENT_INDEX = STAGES.index(ProjectStage.UNDER_DEVELOPMENT.value)
UAT_SIGNOFF_INDEX = STAGES.index(ProjectStage.UAT_SIGNOFF.value)
LIVE_INDEX = STAGES.index(ProjectStage.LIVE.value)


def man_days_between(start: date | None, end: date | None) -> int | None:
    """Count weekdays from ``start`` to ``end``, both inclusive.

    Returns None when either date is missing and 0 when ``end`` precedes
    ``start``.
    """
    if start is None or end is None:
        return None
    if end < start:
        return 0

    total_days = (end - start).days + 1
    full_weeks, extra = divmod(total_days, 7)
    count = full_weeks * 5
    day = start + timedelta(days=full_weeks * 7)
    for _ in range(extra):
        if day.weekday() < 5:
            count += 1
        day += timedelta(days=1)
    return count


def _milestone(current: date | None, stage_index: int, milestone_index: int, today: date) -> date | None:
    """Set on first reaching the milestone stage, kept past it, cleared before it."""
    if stage_index < milestone_index:
        return None
    if stage_index == milestone_index and current is None:
        return today
    return current


def compute_schedule_updates(project: Any, today: date) -> dict[str, Any]:
    """Derive tracking fields for ``project`` as of ``today``.

    Args:
        project: Object exposing the project's stage and date attributes.
        today: Current business date.

    Returns:
        Mapping of field name to new value, containing only changed fields.
    """
    target: dict[str, Any] = {}

    if project.planned_end_date is not None:
        remaining = man_days_between(today, project.planned_end_date)
        target["on_track_status"] = (
            OnTrackStatus.DELAYED.value if remaining <= 0 else OnTrackStatus.ON_TRACK.value
        )
    else:
        target["on_track_status"] = OnTrackStatus.ON_TRACK.value

    stage = project.stage
    if stage in STAGES:
        index = STAGES.index(stage)

        if index < DEVELOPMENT_INDEX:
            target["sprint_start_date"] = None
            target["sprint_end_date"] = None
        elif index == DEVELOPMENT_INDEX:
            if project.sprint_start_date is None:
                target["sprint_start_date"] = today
                target["sprint_end_date"] = None
        elif project.sprint_start_date is not None and project.sprint_end_date is None:
            target["sprint_end_date"] = today

        target["uat_release_date"] = _milestone(project.uat_release_date, index, UAT_SIGNOFF_INDEX, today)
        target["go_live_date"] = _milestone(project.go_live_date, index, LIVE_INDEX, today)

    if project.start_date is not None and project.planned_end_date is not None:
        target["man_days"] = man_days_between(project.start_date, project.planned_end_date)

    return {field: value for field, value in target.items() if getattr(project, field) != value}
