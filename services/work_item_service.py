"""Work item lifecycle, component status transitions and worklog reconciliation.

Every public mutation leaves the session in a consistent state: the worklog
change, the component status it implies and the parent's rolled-up status
are flushed together. Committing (or rolling back) is the caller's job, see
``services.transaction.transaction``.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from app.exceptions import (
    CapacityExceeded,
    ComponentLocked,
    MustUseStatusTransition,
    NotFoundError,
    ValidationError,
)
from models.enums import Role
from models.work_item import WorkItemKind
from repositories.employee_repository import EmployeeRepository
from repositories.work_item_repository import WorkItemRepository
from repositories.worklog_repository import WorklogRepository
from schemas.employee import CallerContext, VisibilityScope
from schemas.work_item import ComponentSpec, WorkItemCreate, WorkItemUpdate
from services import clock
from services.effort_service import EffortService, workload_hours
from services.status_rollup import (
    HOURS_TOLERANCE,
    WIP_MARKER,
    ComponentState,
    exceeds_capacity,
    fills_capacity,
    is_completed,
    is_wip,
    rollup,
    round_hours,
    status_from_logged_hours,
    validate_component_status,
)
from services.visibility_service import VisibilityService

logger = logging.getLogger(__name__)

AUTO_LOG_NOTE = "Auto-logged remaining hours on completion"
COMPLETION_STATUS = "Live"


class WorkItemService:
    """Operations on one kind of work item (tasks or live issues)."""

    def __init__(self, db: Session, kind: WorkItemKind):
        self.db = db
        self.kind = kind
        self.items = WorkItemRepository(db, kind)
        self.worklogs = WorklogRepository(db, kind)
        self.employees = EmployeeRepository(db)
        self.effort = EffortService(db)
        self.visibility = VisibilityService(db)

    # ------------------------------------------------------------------
    # Lookups and access checks
    # ------------------------------------------------------------------

    def get_item_or_404(self, item_id: int):
        item = self.items.get_item(item_id)
        if item is None:
            raise NotFoundError(f"{self.kind.label} {item_id} not found")
        return item

    def get_component_or_404(self, component_id: int):
        component = self.items.get_component(component_id)
        if component is None:
            raise NotFoundError(f"Component {component_id} not found")
        return component

    def get_worklog_or_404(self, log_id: int):
        worklog = self.worklogs.get_by_id(log_id)
        if worklog is None:
            raise NotFoundError(f"Worklog {log_id} not found")
        return worklog

    def authorize_item(self, caller: CallerContext, item_id: int):
        """Return the item if its assignee is the caller or visible to the caller."""
        item = self.get_item_or_404(item_id)
        self.visibility.ensure_can_act(caller, item.assigned_employee_id)
        return item

    def authorize_component(self, caller: CallerContext, component_id: int):
        component = self.get_component_or_404(component_id)
        self.visibility.ensure_can_act(caller, component.work_item.assigned_employee_id)
        return component

    def authorize_worklog(self, caller: CallerContext, log_id: int):
        worklog = self.get_worklog_or_404(log_id)
        self.visibility.ensure_can_act(caller, worklog.component.work_item.assigned_employee_id)
        return worklog

    # ------------------------------------------------------------------
    # Work item lifecycle
    # ------------------------------------------------------------------

    def create_item(self, caller: CallerContext, payload: WorkItemCreate):
        """Create a work item with priced components for a visible assignee.

        Raises:
            AuthorizationError: Assignee outside the caller's visible set.
            NotFoundError: Unknown assignee.
        """
        self.visibility.ensure_can_act(caller, payload.assigned_employee_id, payload.scope)
        if self.employees.get_by_id(payload.assigned_employee_id) is None:
            raise NotFoundError(f"Employee {payload.assigned_employee_id} not found")

        manager_id = caller.manager_id if caller.role == Role.ADMIN.value else caller.id
        item = self.items.create_item(
            assigned_employee_id=payload.assigned_employee_id,
            title=payload.title,
            manager_id=manager_id,
            description=payload.description,
            priority=payload.priority,
            due_date=payload.due_date,
            created_by=caller.id,
        )

        priced = self.effort.price(payload.components)
        for component in priced:
            self.items.add_component(item, component, created_by=caller.id)
        item.workload_hours = workload_hours(priced)

        return self.recompute_rollup(item)

    def update_item(self, caller: CallerContext, item_id: int, payload: WorkItemUpdate):
        """Apply a partial update; a supplied component list replaces the current set."""
        item = self.authorize_item(caller, item_id)
        data = payload.model_dump(exclude_unset=True, exclude={"components"})
        for required in ("assigned_employee_id", "title"):
            if required in data and data[required] is None:
                del data[required]

        new_assignee = data.get("assigned_employee_id")
        if new_assignee is not None and new_assignee != item.assigned_employee_id:
            if self.employees.get_by_id(new_assignee) is None:
                raise NotFoundError(f"Employee {new_assignee} not found")
            self.visibility.ensure_can_act(caller, new_assignee)

        if "title" in data:
            data["title"] = data["title"].strip()
            if not data["title"]:
                raise ValidationError("title must not be blank")

        for key, value in data.items():
            setattr(item, key, value)
        item.updated_by = caller.id

        if payload.components is not None:
            self._sync_components(item, payload.components, caller)

        self.db.flush()
        return self.recompute_rollup(item)

    def _sync_components(self, item, specs: list[ComponentSpec], caller: CallerContext) -> None:
        priced = self.effort.price(specs)
        existing = {component.id: component for component in item.components}
        kept: set[int] = set()

        for entry in priced:
            component = existing.get(entry.id) if entry.id is not None else None
            if component is None:
                self.items.add_component(item, entry, created_by=caller.id)
                continue

            kept.add(component.id)
            logged = self.worklogs.sum_hours(component.id)
            if exceeds_capacity(logged, entry.total_hours):
                raise CapacityExceeded(
                    f"Component {component.id} already has {logged} hours logged; "
                    f"it cannot be repriced to {entry.total_hours} hours."
                )
            self.items.update_component(component, entry, updated_by=caller.id)
            if is_completed(component.status):
                self._top_up_completed(component, logged, item.assigned_employee_id)

        for component_id, component in existing.items():
            if component_id not in kept:
                self.items.delete_component(item, component)

        item.workload_hours = sum(component.total_hours for component in item.components)

    def delete_item(self, caller: CallerContext, item_id: int) -> None:
        item = self.authorize_item(caller, item_id)
        self.items.delete_item(item)

    def list_items(
        self,
        caller: CallerContext,
        scope: VisibilityScope | None = None,
        status: str | None = None,
    ) -> list:
        visible = self.visibility.resolve_visible_set(caller, scope) | {caller.id}
        return self.items.list_for_employees(visible, status=status)

    def list_overdue(self, caller: CallerContext, scope: VisibilityScope | None = None) -> list:
        visible = self.visibility.resolve_visible_set(caller, scope) | {caller.id}
        return self.items.list_overdue(visible, clock.today())

    # ------------------------------------------------------------------
    # Status rollup
    # ------------------------------------------------------------------

    def recompute_rollup(self, item):
        """Re-derive and persist the parent status from its components."""
        result = rollup(
            ComponentState(component.status, component.completed_at)
            for component in item.components
        )
        if item.status != result.status or item.completed_at != result.completed_at:
            logger.info(
                "%s id=%s status %s -> %s",
                self.kind.label,
                item.id,
                item.status,
                result.status,
            )
            item.status = result.status
            item.completed_at = result.completed_at
        self.db.flush()
        return item

    def apply_component_status(self, component_id: int, new_status: str, actor_id: int | None = None):
        """Move a component to ``new_status`` and reconcile its worklogs.

        Completing tops up logged hours to the component's capacity with one
        automatic worklog. Reopening a completed component deletes all of its
        worklogs.

        Returns:
            Tuple of (component, parent work item).
        """
        validate_component_status(new_status)
        component = self.get_component_or_404(component_id)
        item = component.work_item

        was_completed = is_completed(component.status)
        previous = component.status
        component.status = new_status
        if actor_id:
            component.updated_by = actor_id

        if is_completed(new_status):
            if not was_completed or component.completed_at is None:
                component.completed_at = clock.now()
            self.db.flush()
            logged = self.worklogs.sum_hours(component.id)
            self._top_up_completed(component, logged, item.assigned_employee_id)
        else:
            component.completed_at = None
            self.db.flush()
            if was_completed:
                removed = self.worklogs.delete_for_component(component.id)
                logger.info(
                    "Reopened component id=%s (%s -> %s); removed %d worklogs",
                    component.id,
                    previous,
                    new_status,
                    removed,
                )

        self.recompute_rollup(item)
        return component, item

    def _top_up_completed(self, component, logged: float, employee_id: int) -> None:
        remaining = component.total_hours - logged
        if remaining > HOURS_TOLERANCE:
            self.worklogs.create(
                component_id=component.id,
                employee_id=employee_id,
                hours_logged=remaining,
                log_date=clock.today(),
                notes=AUTO_LOG_NOTE,
                is_auto=True,
            )
            logger.info(
                "Auto-logged %s remaining hours on component id=%s",
                remaining,
                component.id,
            )

    # ------------------------------------------------------------------
    # Worklog ledger
    # ------------------------------------------------------------------

    def list_worklogs(self, component_id: int) -> list:
        self.get_component_or_404(component_id)
        return self.worklogs.list_for_component(component_id)

    def record_worklog(
        self,
        component_id: int,
        employee_id: int,
        hours: float,
        log_date: date,
        notes: str | None = None,
    ):
        """Log hours against a component within its remaining capacity.

        Reaching full capacity completes the component.

        Raises:
            ValidationError: Non-positive hours.
            ComponentLocked: Component already completed.
            CapacityExceeded: Hours exceed the remaining capacity.
        """
        if hours is None or hours <= 0:
            raise ValidationError("Hours logged must be greater than zero.")
        component = self.get_component_or_404(component_id)
        if is_completed(component.status):
            raise ComponentLocked("This component is already completed. Logs cannot be added.")

        logged = self.worklogs.sum_hours(component.id)
        if exceeds_capacity(logged + hours, component.total_hours):
            remaining = round_hours(component.total_hours - logged)
            raise CapacityExceeded(f"Cannot log more than remaining {remaining} hours.")

        worklog = self.worklogs.create(
            component_id=component.id,
            employee_id=employee_id,
            hours_logged=hours,
            log_date=log_date,
            notes=notes,
            created_by=employee_id,
        )

        if fills_capacity(logged + hours, component.total_hours):
            component.status = COMPLETION_STATUS
            component.completed_at = clock.now()
        elif not is_wip(component.status):
            component.status = WIP_MARKER
            component.completed_at = None
        self.db.flush()
        self.recompute_rollup(component.work_item)
        return worklog

    def edit_worklog(
        self,
        log_id: int,
        hours: float,
        log_date: date,
        notes: str | None = None,
        actor_id: int | None = None,
    ):
        """Edit a worklog while keeping the component strictly below capacity.

        Raises:
            ComponentLocked: Component already completed.
            ValidationError: Non-positive hours.
            CapacityExceeded: Edited hours exceed the remaining capacity.
            MustUseStatusTransition: Edited hours would exactly fill the capacity.
        """
        worklog = self.get_worklog_or_404(log_id)
        component = worklog.component
        if is_completed(component.status):
            raise ComponentLocked("This component is already completed. Logs cannot be edited.")
        if hours is None or hours <= 0:
            raise ValidationError("Hours logged must be greater than zero.")

        others = self.worklogs.sum_hours(component.id, exclude_log_id=worklog.id)
        remaining = round_hours(component.total_hours - others)
        if exceeds_capacity(others + hours, component.total_hours):
            raise CapacityExceeded(
                f"Only {remaining} hours remaining. Mark component as Completed to finish."
            )
        if fills_capacity(others + hours, component.total_hours):
            raise MustUseStatusTransition(
                "You cannot complete a component via log edit. "
                "Use a status transition to mark it Completed."
            )

        self.worklogs.update(worklog, hours, log_date, notes, updated_by=actor_id)
        component.status = status_from_logged_hours(others + hours, component.total_hours, component.status)
        component.completed_at = None
        self.db.flush()
        self.recompute_rollup(component.work_item)
        return worklog

    def delete_worklog(self, log_id: int):
        """Delete a worklog and re-derive the component status from the hours left.

        Returns:
            Tuple of (component, parent work item).
        """
        worklog = self.get_worklog_or_404(log_id)
        component = worklog.component
        self.worklogs.delete(worklog)

        logged = self.worklogs.sum_hours(component.id)
        new_status = status_from_logged_hours(logged, component.total_hours, component.status)
        if is_completed(new_status):
            if component.completed_at is None:
                component.completed_at = clock.now()
        else:
            component.completed_at = None
        component.status = new_status
        self.db.flush()

        item = component.work_item
        self.recompute_rollup(item)
        return component, item
