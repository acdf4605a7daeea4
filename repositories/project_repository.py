"""Repository for projects and the project change ledger."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from models.project import Project, ProjectChangeLog
from schemas.project import ProjectFilters

logger = logging.getLogger(__name__)


class ProjectRepository:
    """Data access layer for projects.

    Args:
        db: SQLAlchemy database session.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_for_manager(self, project_id: int, manager_id: int) -> Project | None:
        """Get a project only if it belongs to ``manager_id``."""
        return (
            self.db.query(Project)
            .filter(Project.id == project_id, Project.manager_id == manager_id)
            .first()
        )

    def list_for_manager(self, manager_id: int, filters: ProjectFilters | None = None) -> list[Project]:
        query = self.db.query(Project).filter(Project.manager_id == manager_id)
        if filters is not None:
            if filters.priority:
                query = query.filter(Project.priority == filters.priority)
            if filters.stage:
                query = query.filter(Project.stage == filters.stage)
            if filters.on_track_status:
                query = query.filter(Project.on_track_status == filters.on_track_status)
            if filters.start_date_from:
                query = query.filter(Project.start_date >= filters.start_date_from)
            if filters.start_date_to:
                query = query.filter(Project.start_date <= filters.start_date_to)
        return query.order_by(Project.id.desc()).all()

    def create(self, values: dict[str, Any], manager_id: int, created_by: int | None = None) -> Project:
        project = Project(
            **values,
            manager_id=manager_id,
            created_by=created_by,
            updated_by=created_by,
        )
        self.db.add(project)
        self.db.flush()
        logger.info("Created project id=%s for manager_id=%s", project.id, manager_id)
        return project

    def apply(self, project: Project, values: dict[str, Any]) -> None:
        for field, value in values.items():
            setattr(project, field, value)
        self.db.flush()

    def delete(self, project: Project) -> None:
        project_id = project.id
        self.db.delete(project)
        self.db.flush()
        logger.info("Deleted project id=%s", project_id)

    def add_change_logs(self, project: Project, actor_id: int | None, changes: dict[str, tuple[Any, Any]]) -> list[ProjectChangeLog]:
        """Append one ledger row per changed field."""
        rows = [
            ProjectChangeLog(
                project_id=project.id,
                actor_id=actor_id,
                field=field,
                old_value=_stringify(old),
                new_value=_stringify(new),
            )
            for field, (old, new) in changes.items()
        ]
        self.db.add_all(rows)
        self.db.flush()
        if rows:
            logger.info(
                "Recorded %d change log rows for project id=%s",
                len(rows),
                project.id,
            )
        return rows

    def list_change_logs(self, project_id: int) -> list[ProjectChangeLog]:
        return (
            self.db.query(ProjectChangeLog)
            .filter(ProjectChangeLog.project_id == project_id)
            .order_by(ProjectChangeLog.id.asc())
            .all()
        )


def _stringify(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
