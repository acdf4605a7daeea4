"""Repository for component worklogs (the worklog ledger)."""

import logging
from collections.abc import Iterable
from datetime import date

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from models.work_item import WorkItemKind

logger = logging.getLogger(__name__)


class WorklogRepository:
    """Data access layer for the worklogs of one work item kind."""

    def __init__(self, db: Session, kind: WorkItemKind):
        self.db = db
        self.kind = kind
        self.model = kind.worklog_model

    def get_by_id(self, log_id: int):
        return self.db.get(self.model, log_id)

    def list_for_component(self, component_id: int) -> list:
        return (
            self.db.query(self.model)
            .filter(self.model.component_id == component_id)
            .order_by(self.model.log_date.asc(), self.model.id.asc())
            .all()
        )

    def sum_hours(self, component_id: int, exclude_log_id: int | None = None) -> float:
        """Hours logged against a component, optionally ignoring one log."""
        query = self.db.query(func.coalesce(func.sum(self.model.hours_logged), 0.0)).filter(
            self.model.component_id == component_id
        )
        if exclude_log_id is not None:
            query = query.filter(self.model.id != exclude_log_id)
        return float(query.scalar() or 0.0)

    def hours_by_item(self, item_ids: Iterable[int], start: date, end: date) -> dict[int, tuple[float, float]]:
        """Map each work item id to (hours logged in ``[start, end]``, hours logged overall)."""
        ids = list(item_ids)
        if not ids:
            return {}
        component_model = self.kind.component_model
        in_period = case(
            (self.model.log_date.between(start, end), self.model.hours_logged),
            else_=0.0,
        )
        rows = (
            self.db.query(
                component_model.work_item_id,
                func.coalesce(func.sum(in_period), 0.0),
                func.coalesce(func.sum(self.model.hours_logged), 0.0),
            )
            .join(component_model, self.model.component_id == component_model.id)
            .filter(component_model.work_item_id.in_(ids))
            .group_by(component_model.work_item_id)
            .all()
        )
        return {item_id: (float(period), float(total)) for item_id, period, total in rows}

    def create(
        self,
        component_id: int,
        employee_id: int,
        hours_logged: float,
        log_date: date,
        notes: str | None = None,
        is_auto: bool = False,
        created_by: int | None = None,
    ):
        worklog = self.model(
            component_id=component_id,
            employee_id=employee_id,
            hours_logged=hours_logged,
            log_date=log_date,
            notes=notes,
            is_auto=is_auto,
            created_by=created_by,
            updated_by=created_by,
        )
        self.db.add(worklog)
        self.db.flush()
        logger.info(
            "Created %s worklog id=%s: component_id=%s hours=%s auto=%s",
            self.kind.label.lower(),
            worklog.id,
            component_id,
            hours_logged,
            is_auto,
        )
        return worklog

    def update(
        self,
        worklog,
        hours_logged: float,
        log_date: date,
        notes: str | None,
        updated_by: int | None = None,
    ):
        worklog.hours_logged = hours_logged
        worklog.log_date = log_date
        worklog.notes = notes
        if updated_by:
            worklog.updated_by = updated_by
        self.db.flush()
        logger.info("Updated worklog id=%s: hours=%s", worklog.id, hours_logged)
        return worklog

    def delete(self, worklog) -> None:
        log_id = worklog.id
        self.db.delete(worklog)
        self.db.flush()
        logger.info("Deleted worklog id=%s", log_id)

    def delete_for_component(self, component_id: int) -> int:
        """Remove every worklog of a component; returns how many were removed."""
        worklogs = self.list_for_component(component_id)
        for worklog in worklogs:
            self.db.delete(worklog)
        self.db.flush()
        if worklogs:
            logger.info(
                "Deleted %d worklogs of component_id=%s",
                len(worklogs),
                component_id,
            )
        return len(worklogs)
