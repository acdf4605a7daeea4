"""Repository for work items (tasks / live issues) and their components."""

import logging
from collections.abc import Iterable
from datetime import date

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from models.work_item import WorkItemKind
from schemas.work_item import PricedComponent

logger = logging.getLogger(__name__)


class WorkItemRepository:
    """Data access layer for one work item kind.

    Args:
        db: SQLAlchemy database session.
        kind: Which tables (tasks or live issues) this repository addresses.
    """

    def __init__(self, db: Session, kind: WorkItemKind):
        self.db = db
        self.kind = kind
        self.item_model = kind.item_model
        self.component_model = kind.component_model

    def get_item(self, item_id: int):
        return self.db.get(self.item_model, item_id)

    def get_component(self, component_id: int):
        return self.db.get(self.component_model, component_id)

    def list_components(self, item_id: int) -> list:
        return (
            self.db.query(self.component_model)
            .filter(self.component_model.work_item_id == item_id)
            .order_by(self.component_model.id.asc())
            .all()
        )

    def list_for_employees(
        self,
        employee_ids: Iterable[int],
        status: str | None = None,
    ) -> list:
        """Work items assigned to any of ``employee_ids``, newest first."""
        ids = list(employee_ids)
        if not ids:
            return []
        query = (
            self.db.query(self.item_model)
            .options(selectinload(self.item_model.components))
            .filter(self.item_model.assigned_employee_id.in_(ids))
        )
        if status:
            query = query.filter(self.item_model.status == status)
        return query.order_by(self.item_model.id.desc()).all()

    def list_overdue(self, employee_ids: Iterable[int], today: date) -> list:
        """Unfinished work items whose due date is before ``today``."""
        ids = list(employee_ids)
        if not ids:
            return []
        return (
            self.db.query(self.item_model)
            .filter(self.item_model.assigned_employee_id.in_(ids))
            .filter(self.item_model.due_date.is_not(None))
            .filter(self.item_model.due_date < today)
            .filter(self.item_model.status != "Completed")
            .order_by(self.item_model.due_date.asc(), self.item_model.id.asc())
            .all()
        )

    def list_active_in_period(self, employee_ids: Iterable[int], start: date, end: date) -> list:
        """Work items due within ``[start, end]`` or with hours logged in that range."""
        ids = list(employee_ids)
        if not ids:
            return []
        worklog_model = self.kind.worklog_model
        logged_in_period = self.item_model.components.any(
            self.component_model.worklogs.any(worklog_model.log_date.between(start, end))
        )
        return (
            self.db.query(self.item_model)
            .filter(self.item_model.assigned_employee_id.in_(ids))
            .filter(or_(self.item_model.due_date.between(start, end), logged_in_period))
            .order_by(self.item_model.id.asc())
            .all()
        )

    def create_item(
        self,
        assigned_employee_id: int,
        title: str,
        manager_id: int | None,
        description: str | None = None,
        priority: str | None = None,
        due_date: date | None = None,
        created_by: int | None = None,
    ):
        item = self.item_model(
            assigned_employee_id=assigned_employee_id,
            manager_id=manager_id,
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            status="Pending",
            workload_hours=0.0,
            created_by=created_by,
            updated_by=created_by,
        )
        self.db.add(item)
        self.db.flush()
        logger.info(
            "Created %s id=%s for employee_id=%s",
            self.kind.label.lower(),
            item.id,
            assigned_employee_id,
        )
        return item

    def add_component(self, item, priced: PricedComponent, created_by: int | None = None):
        component = self.component_model(
            work_item_id=item.id,
            type=priced.type,
            complexity=priced.complexity,
            count=priced.count,
            hours_per_item=priced.hours_per_item,
            total_hours=priced.total_hours,
            status="Pending",
            file_required=priced.file_required,
            file_type=priced.file_type,
            created_by=created_by,
            updated_by=created_by,
        )
        self.db.add(component)
        item.components.append(component)
        self.db.flush()
        logger.info(
            "Added component id=%s to %s id=%s: %s/%s x%s = %sh",
            component.id,
            self.kind.label.lower(),
            item.id,
            priced.type,
            priced.complexity,
            priced.count,
            priced.total_hours,
        )
        return component

    def update_component(self, component, priced: PricedComponent, updated_by: int | None = None):
        component.type = priced.type
        component.complexity = priced.complexity
        component.count = priced.count
        component.hours_per_item = priced.hours_per_item
        component.total_hours = priced.total_hours
        component.file_required = priced.file_required
        component.file_type = priced.file_type
        if updated_by:
            component.updated_by = updated_by
        self.db.flush()
        return component

    def delete_component(self, item, component) -> None:
        component_id = component.id
        item.components.remove(component)
        self.db.delete(component)
        self.db.flush()
        logger.info("Deleted component id=%s", component_id)

    def delete_item(self, item) -> None:
        item_id = item.id
        self.db.delete(item)
        self.db.flush()
        logger.info("Deleted %s id=%s with its components and worklogs", self.kind.label.lower(), item_id)
