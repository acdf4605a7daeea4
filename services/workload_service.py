"""Monthly workload per visible employee.

A work item counts towards a month when it is due in that month or has
hours logged in it. Its planned hours go to the assignee; completed hours
are the hours logged so far, capped at the plan; overdue hours are the
planned hours of unfinished items whose due date has passed.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from app.exceptions import AuthorizationError, ValidationError
from models.enums import Role, WorkItemStatus
from models.work_item import WORK_ITEM_KINDS
from repositories.work_item_repository import WorkItemRepository
from repositories.worklog_repository import WorklogRepository
from schemas.employee import CallerContext, VisibilityScope
from schemas.workload import EmployeeWorkload, WorkloadPercentages, WorkloadSummary
from services import clock
from services.status_rollup import round_hours
from services.visibility_service import VisibilityService

logger = logging.getLogger(__name__)

FINISHED_STATUSES = frozenset({WorkItemStatus.COMPLETED.value, WorkItemStatus.DROPPED.value})


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def is_overdue(item, today: date) -> bool:
    return (
        item.due_date is not None
        and item.due_date < today
        and item.status not in FINISHED_STATUSES
    )


def _percent(part: float, whole: float) -> int:
    return round(part / whole * 100) if whole > 0 else 0


@dataclass
class WorkloadTally:
    """Running totals for one employee."""

    items: int = 0
    planned: float = 0.0
    completed: float = 0.0
    overdue: float = 0.0
    month_logged: float = 0.0

    def add(self, planned: float, logged_total: float, logged_in_month: float, overdue: bool) -> None:
        self.items += 1
        self.planned += planned
        self.completed += min(logged_total, planned)
        self.month_logged += logged_in_month
        if overdue:
            self.overdue += planned

    def summary(self) -> WorkloadSummary:
        pending = max(self.planned - self.completed, 0.0)
        return WorkloadSummary(
            planned_hours=round_hours(self.planned),
            completed_hours=round_hours(self.completed),
            pending_hours=round_hours(pending),
            overdue_hours=round_hours(self.overdue),
            month_logged_hours=round_hours(self.month_logged),
            percentages=WorkloadPercentages(
                completed=_percent(self.completed, self.planned),
                pending=_percent(pending, self.planned),
                overdue=_percent(self.overdue, self.planned),
            ),
        )


class WorkloadService:
    """Aggregates tasks and live issues into a per-employee monthly report."""

    def __init__(self, db: Session):
        self.db = db
        self.visibility = VisibilityService(db)

    def monthly_workload(
        self,
        caller: CallerContext,
        year: int,
        month: int,
        scope: VisibilityScope | None = None,
    ) -> list[EmployeeWorkload]:
        """Workload of every employee visible to the caller, ordered by name.

        Raises:
            AuthorizationError: Caller has the employee role.
            ValidationError: Month outside 1-12.
        """
        if caller.role == Role.EMPLOYEE.value:
            raise AuthorizationError("Only supervisors can view team workload.")
        start, end = month_bounds(year, month)

        employees = self.visibility.list_visible_employees(caller, scope)
        tallies = {employee.id: WorkloadTally() for employee in employees}
        today = clock.today()

        for kind in WORK_ITEM_KINDS:
            items = WorkItemRepository(self.db, kind).list_active_in_period(list(tallies), start, end)
            hours = WorklogRepository(self.db, kind).hours_by_item([item.id for item in items], start, end)
            for item in items:
                in_month, overall = hours.get(item.id, (0.0, 0.0))
                tallies[item.assigned_employee_id].add(
                    item.workload_hours or 0.0,
                    overall,
                    in_month,
                    is_overdue(item, today),
                )

        logger.info(
            "Workload %04d-%02d for caller id=%s covers %d employees",
            year,
            month,
            caller.id,
            len(employees),
        )
        return [
            EmployeeWorkload(
                employee_id=employee.id,
                employee_name=employee.name,
                application_name=employee.application_name,
                item_count=tallies[employee.id].items,
                summary=tallies[employee.id].summary(),
            )
            for employee in employees
        ]
