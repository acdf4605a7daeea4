"""Project endpoints.

Reads apply the schedule automaton and persist whatever it changes, so they
run inside a transaction like the mutations do.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.auth.auth import CurrentCaller
from routers.v1.dependencies import DbSession
from schemas.common import MessageResponse
from schemas.project import (
    ProjectAnalytics,
    ProjectChangeLogResponse,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectFilters,
    ProjectName,
    ProjectResponse,
    ProjectUpdate,
)
from services.project_service import ProjectService
from services.transaction import transaction

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {404: {"description": "Project not found or access denied"}}
EDITORS_ONLY = {403: {"description": "Only managers and admins can modify projects"}}


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses=EDITORS_ONLY,
)
def create_project(payload: ProjectCreate, caller: CurrentCaller, db: DbSession) -> ProjectResponse:
    with transaction(db):
        project = ProjectService(db).create(caller, payload)
    return ProjectResponse.model_validate(project)


@router.get("", response_model=list[ProjectResponse], summary="List projects")
def list_projects(
    caller: CurrentCaller,
    db: DbSession,
    filters: Annotated[ProjectFilters, Depends()],
) -> list[ProjectResponse]:
    with transaction(db):
        projects = ProjectService(db).list_projects(caller, filters)
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/names", response_model=list[ProjectName], summary="Project ids and names")
def list_project_names(caller: CurrentCaller, db: DbSession) -> list[ProjectName]:
    with transaction(db):
        projects = ProjectService(db).list_projects(caller)
    return [ProjectName.model_validate(p) for p in projects]


@router.get(
    "/analytics/overview",
    response_model=ProjectAnalytics,
    responses=EDITORS_ONLY,
)
def project_analytics(caller: CurrentCaller, db: DbSession) -> ProjectAnalytics:
    """Counts by stage, on-track status and priority."""
    with transaction(db):
        return ProjectService(db).analytics(caller)


@router.get("/{project_id}", response_model=ProjectDetailResponse, responses=NOT_FOUND)
def get_project(project_id: int, caller: CurrentCaller, db: DbSession) -> ProjectDetailResponse:
    with transaction(db):
        project, updates, recommendations = ProjectService(db).get(caller, project_id)
    return ProjectDetailResponse(
        project=ProjectResponse.model_validate(project),
        recommendations=recommendations,
        auto_updated=sorted(updates),
    )


@router.put("/{project_id}", response_model=ProjectResponse, responses={**NOT_FOUND, **EDITORS_ONLY})
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    caller: CurrentCaller,
    db: DbSession,
) -> ProjectResponse:
    with transaction(db):
        project = ProjectService(db).update(caller, project_id, payload)
    logger.info("Project id=%s updated by employee_id=%s", project_id, caller.id)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", response_model=MessageResponse, responses={**NOT_FOUND, **EDITORS_ONLY})
def delete_project(project_id: int, caller: CurrentCaller, db: DbSession) -> MessageResponse:
    with transaction(db):
        ProjectService(db).delete(caller, project_id)
    return MessageResponse(message="Project deleted successfully")


@router.get(
    "/{project_id}/change-log",
    response_model=list[ProjectChangeLogResponse],
    responses=NOT_FOUND,
)
def get_change_log(project_id: int, caller: CurrentCaller, db: DbSession) -> list[ProjectChangeLogResponse]:
    logs = ProjectService(db).change_log(caller, project_id)
    return [ProjectChangeLogResponse.model_validate(row) for row in logs]
