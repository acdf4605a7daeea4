"""Task and live issue endpoints.

Both kinds expose the same surface, so the router is built per kind.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from app.auth.auth import CurrentCaller
from models.work_item import LIVE_ISSUE_KIND, TASK_KIND, WorkItemKind
from routers.v1.dependencies import DbSession, Scope
from schemas.common import MessageResponse
from schemas.work_item import (
    ComponentResponse,
    ComponentStatusUpdate,
    StatusTransitionResponse,
    WorkItemCreate,
    WorkItemResponse,
    WorkItemUpdate,
    WorkLogCreate,
    WorkLogResponse,
    WorkLogUpdate,
)
from services.transaction import transaction
from services.work_item_service import WorkItemService

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    403: {"description": "Assignee outside the caller's visibility"},
    404: {"description": "Unknown work item, component or worklog"},
}


def _transition(component, item) -> StatusTransitionResponse:
    return StatusTransitionResponse(
        component=ComponentResponse.model_validate(component),
        work_item=WorkItemResponse.model_validate(item),
    )


def build_work_item_router(kind: WorkItemKind) -> APIRouter:
    """Create the CRUD, status and worklog routes for one work item kind."""
    router = APIRouter()
    label = kind.label

    @router.get("", response_model=list[WorkItemResponse], summary=f"List {label.lower()}s")
    def list_items(
        caller: CurrentCaller,
        db: DbSession,
        scope: Scope,
        status_filter: Annotated[str | None, Query(alias="status")] = None,
    ) -> list[WorkItemResponse]:
        items = WorkItemService(db, kind).list_items(caller, scope, status_filter)
        return [WorkItemResponse.model_validate(i) for i in items]

    @router.get("/overdue", response_model=list[WorkItemResponse], summary=f"Overdue {label.lower()}s")
    def list_overdue(caller: CurrentCaller, db: DbSession, scope: Scope) -> list[WorkItemResponse]:
        """Unfinished items whose due date has passed."""
        items = WorkItemService(db, kind).list_overdue(caller, scope)
        return [WorkItemResponse.model_validate(i) for i in items]

    @router.post(
        "",
        response_model=WorkItemResponse,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {label.lower()}",
        responses=ERROR_RESPONSES,
    )
    def create_item(payload: WorkItemCreate, caller: CurrentCaller, db: DbSession) -> WorkItemResponse:
        with transaction(db):
            item = WorkItemService(db, kind).create_item(caller, payload)
        return WorkItemResponse.model_validate(item)

    @router.get("/{item_id}", response_model=WorkItemResponse, responses=ERROR_RESPONSES)
    def get_item(item_id: int, caller: CurrentCaller, db: DbSession) -> WorkItemResponse:
        item = WorkItemService(db, kind).authorize_item(caller, item_id)
        return WorkItemResponse.model_validate(item)

    @router.put("/{item_id}", response_model=WorkItemResponse, responses=ERROR_RESPONSES)
    def update_item(
        item_id: int,
        payload: WorkItemUpdate,
        caller: CurrentCaller,
        db: DbSession,
    ) -> WorkItemResponse:
        with transaction(db):
            item = WorkItemService(db, kind).update_item(caller, item_id, payload)
        return WorkItemResponse.model_validate(item)

    @router.delete("/{item_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
    def delete_item(item_id: int, caller: CurrentCaller, db: DbSession) -> MessageResponse:
        with transaction(db):
            WorkItemService(db, kind).delete_item(caller, item_id)
        return MessageResponse(message=f"{label} deleted successfully")

    @router.patch(
        "/components/{component_id}/status",
        response_model=StatusTransitionResponse,
        summary="Change a component's status",
        responses={**ERROR_RESPONSES, 422: {"description": "Unknown status"}},
    )
    def update_component_status(
        component_id: int,
        payload: ComponentStatusUpdate,
        caller: CurrentCaller,
        db: DbSession,
    ) -> StatusTransitionResponse:
        """Completing tops up the worklogs; reopening clears them."""
        with transaction(db):
            service = WorkItemService(db, kind)
            service.authorize_component(caller, component_id)
            component, item = service.apply_component_status(component_id, payload.status, caller.id)
        return _transition(component, item)

    @router.get(
        "/components/{component_id}/worklogs",
        response_model=list[WorkLogResponse],
        responses=ERROR_RESPONSES,
    )
    def list_worklogs(component_id: int, caller: CurrentCaller, db: DbSession) -> list[WorkLogResponse]:
        service = WorkItemService(db, kind)
        service.authorize_component(caller, component_id)
        return [WorkLogResponse.model_validate(w) for w in service.list_worklogs(component_id)]

    @router.post(
        "/components/{component_id}/worklogs",
        response_model=WorkLogResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Log hours against a component",
        responses={
            **ERROR_RESPONSES,
            409: {"description": "Component already completed"},
            422: {"description": "Non-positive hours or capacity exceeded"},
        },
    )
    def create_worklog(
        component_id: int,
        payload: WorkLogCreate,
        caller: CurrentCaller,
        db: DbSession,
    ) -> WorkLogResponse:
        with transaction(db):
            service = WorkItemService(db, kind)
            service.authorize_component(caller, component_id)
            worklog = service.record_worklog(
                component_id,
                caller.id,
                payload.hours_logged,
                payload.log_date,
                payload.notes,
            )
        return WorkLogResponse.model_validate(worklog)

    @router.put(
        "/worklogs/{log_id}",
        response_model=WorkLogResponse,
        responses={
            **ERROR_RESPONSES,
            409: {"description": "Component completed, or edit would complete it"},
            422: {"description": "Non-positive hours or capacity exceeded"},
        },
    )
    def update_worklog(
        log_id: int,
        payload: WorkLogUpdate,
        caller: CurrentCaller,
        db: DbSession,
    ) -> WorkLogResponse:
        with transaction(db):
            service = WorkItemService(db, kind)
            service.authorize_worklog(caller, log_id)
            worklog = service.edit_worklog(
                log_id,
                payload.hours_logged,
                payload.log_date,
                payload.notes,
                actor_id=caller.id,
            )
        return WorkLogResponse.model_validate(worklog)

    @router.delete("/worklogs/{log_id}", response_model=StatusTransitionResponse, responses=ERROR_RESPONSES)
    def delete_worklog(log_id: int, caller: CurrentCaller, db: DbSession) -> StatusTransitionResponse:
        with transaction(db):
            service = WorkItemService(db, kind)
            service.authorize_worklog(caller, log_id)
            component, item = service.delete_worklog(log_id)
        return _transition(component, item)

    return router


tasks_router = build_work_item_router(TASK_KIND)
live_issues_router = build_work_item_router(LIVE_ISSUE_KIND)
