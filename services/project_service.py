"""Project lifecycle built around the schedule automaton."""

import logging
from collections import Counter
from datetime import date

from sqlalchemy.orm import Session

from app.exceptions import AuthorizationError, NotFoundError, ValidationError
from models.enums import OnTrackStatus, ProjectStage, Role
from models.project import Project
from repositories.project_repository import ProjectRepository
from schemas.employee import CallerContext
from schemas.project import (
    ProjectAnalytics,
    ProjectCreate,
    ProjectFilters,
    ProjectUpdate,
    Recommendation,
)
from services import clock
from services.schedule_service import compute_schedule_updates

logger = logging.getLogger(__name__)

PROJECT_EDITOR_ROLES = frozenset({Role.MANAGER.value, Role.ADMIN.value})
LARGE_PROJECT_MAN_DAYS = 100


def owning_manager_id(caller: CallerContext) -> int:
    """Projects belong to the caller's manager, or to the caller when it has none."""
    return caller.manager_id or caller.id


class ProjectService:
    """Create, read and edit projects scoped to the caller's owning manager."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProjectRepository(db)

    @staticmethod
    def ensure_editor(caller: CallerContext) -> None:
        if caller.role not in PROJECT_EDITOR_ROLES:
            raise AuthorizationError("Only managers and admins can modify projects.")

    def get_or_404(self, caller: CallerContext, project_id: int) -> Project:
        project = self.repo.get_for_manager(project_id, owning_manager_id(caller))
        if project is None:
            raise NotFoundError("Project not found or access denied")
        return project

    def refresh_schedule(self, project: Project, today: date | None = None) -> dict:
        """Apply and persist the automaton's changes; returns what changed."""
        updates = compute_schedule_updates(project, today or clock.today())
        if updates:
            self.repo.apply(project, updates)
            logger.info("Schedule refresh for project id=%s changed %s", project.id, sorted(updates))
        return updates

    def create(self, caller: CallerContext, payload: ProjectCreate) -> Project:
        self.ensure_editor(caller)
        values = payload.model_dump()
        if values["start_date"] is None:
            values["start_date"] = clock.today()
        _check_dates(values["start_date"], values["planned_end_date"])

        project = self.repo.create(values, owning_manager_id(caller), created_by=caller.id)
        self.refresh_schedule(project)
        return project

    def get(self, caller: CallerContext, project_id: int) -> tuple[Project, dict, list[Recommendation]]:
        project = self.get_or_404(caller, project_id)
        updates = self.refresh_schedule(project)
        return project, updates, recommendations_for(project)

    def list_projects(self, caller: CallerContext, filters: ProjectFilters | None = None) -> list[Project]:
        projects = self.repo.list_for_manager(owning_manager_id(caller), filters)
        today = clock.today()
        for project in projects:
            self.refresh_schedule(project, today)
        return projects

    def update(self, caller: CallerContext, project_id: int, payload: ProjectUpdate) -> Project:
        """Apply a partial update and record every changed field in the ledger.

        Fields changed by the automaton as a consequence of the edit are
        recorded too.
        """
        self.ensure_editor(caller)
        project = self.get_or_404(caller, project_id)
        data = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field not in ("name", "stage")
        }
        if "name" in data and not data["name"].strip():
            raise ValidationError("name must not be blank")

        start = data.get("start_date", project.start_date)
        end = data.get("planned_end_date", project.planned_end_date)
        _check_dates(start, end)

        changes = {
            field: (getattr(project, field), value)
            for field, value in data.items()
            if getattr(project, field) != value
        }
        for field, (_, new) in changes.items():
            setattr(project, field, new)

        for field, value in compute_schedule_updates(project, clock.today()).items():
            old = changes[field][0] if field in changes else getattr(project, field)
            changes[field] = (old, value)
            setattr(project, field, value)

        project.updated_by = caller.id
        self.db.flush()
        self.repo.add_change_logs(project, caller.id, changes)
        return project

    def delete(self, caller: CallerContext, project_id: int) -> None:
        self.ensure_editor(caller)
        project = self.get_or_404(caller, project_id)
        self.repo.delete(project)

    def change_log(self, caller: CallerContext, project_id: int) -> list:
        self.get_or_404(caller, project_id)
        return self.repo.list_change_logs(project_id)

    def analytics(self, caller: CallerContext) -> ProjectAnalytics:
        self.ensure_editor(caller)
        projects = self.list_projects(caller)
        return build_analytics(projects)


def build_analytics(projects: list[Project]) -> ProjectAnalytics:
    stages = Counter(p.stage for p in projects)
    on_track = Counter(p.on_track_status for p in projects)
    priorities = Counter(p.priority for p in projects if p.priority)
    return ProjectAnalytics(
        total=len(projects),
        live=stages.get(ProjectStage.LIVE.value, 0),
        by_stage=dict(stages),
        by_on_track_status={status.value: on_track.get(status.value, 0) for status in OnTrackStatus},
        by_priority=dict(priorities),
    )


def recommendations_for(project: Project) -> list[Recommendation]:
    notes = []
    if project.on_track_status == OnTrackStatus.DELAYED.value:
        notes.append(Recommendation(
            type="warning",
            message="Project is delayed. Consider reviewing timeline and resources.",
        ))
    if project.man_days and project.man_days > LARGE_PROJECT_MAN_DAYS:
        notes.append(Recommendation(
            type="suggestion",
            message="Large project detected. Consider breaking into smaller modules or phases.",
        ))
    return notes


def _check_dates(start: date | None, end: date | None) -> None:
    if start is not None and end is not None and end < start:
        raise ValidationError("planned_end_date must not be before start_date")
