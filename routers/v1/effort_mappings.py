"""Effort mapping administration endpoints."""

from fastapi import APIRouter, status

from app.auth.auth import CurrentCaller
from routers.v1.dependencies import DbSession
from schemas.common import MessageResponse
from schemas.effort import EffortMappingCreate, EffortMappingResponse, EffortMappingUpdate
from services.effort_service import EffortService
from services.transaction import transaction

router = APIRouter()


@router.get("", response_model=list[EffortMappingResponse], summary="List effort mappings")
def list_mappings(caller: CurrentCaller, db: DbSession) -> list[EffortMappingResponse]:
    return [EffortMappingResponse.model_validate(m) for m in EffortService(db).list_mappings()]


@router.post(
    "",
    response_model=EffortMappingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Type already exists"}},
)
def create_mapping(payload: EffortMappingCreate, caller: CurrentCaller, db: DbSession) -> EffortMappingResponse:
    with transaction(db):
        mapping = EffortService(db).create_mapping(payload.type, payload.values, created_by=caller.id)
    return EffortMappingResponse.model_validate(mapping)


@router.put(
    "/{type_}",
    response_model=EffortMappingResponse,
    responses={
        404: {"description": "Unknown type"},
        409: {"description": "New type name already exists"},
    },
)
def update_mapping(
    type_: str,
    payload: EffortMappingUpdate,
    caller: CurrentCaller,
    db: DbSession,
) -> EffortMappingResponse:
    """Rename a type and replace its complexity values."""
    with transaction(db):
        mapping = EffortService(db).update_mapping(
            type_, payload.new_type, payload.values, updated_by=caller.id
        )
    return EffortMappingResponse.model_validate(mapping)


@router.delete("/{type_}", response_model=MessageResponse, responses={404: {"description": "Unknown type"}})
def delete_mapping(type_: str, caller: CurrentCaller, db: DbSession) -> MessageResponse:
    with transaction(db):
        EffortService(db).delete_mapping(type_)
    return MessageResponse(message="Mapping deleted")
