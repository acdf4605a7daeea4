"""Monthly workload endpoint."""

from typing import Annotated

from fastapi import APIRouter, Query

from app.auth.auth import CurrentCaller
from routers.v1.dependencies import DbSession, Scope
from schemas.workload import EmployeeWorkload
from services.workload_service import WorkloadService

router = APIRouter()


@router.get(
    "",
    response_model=list[EmployeeWorkload],
    summary="Monthly workload per visible employee",
    responses={403: {"description": "Employees cannot view team workload"}},
)
def get_workload(
    caller: CurrentCaller,
    db: DbSession,
    scope: Scope,
    month: Annotated[int, Query(ge=1, le=12)],
    year: Annotated[int, Query(ge=1900, le=9999)],
) -> list[EmployeeWorkload]:
    """Planned, completed, pending and overdue hours for the month."""
    return WorkloadService(db).monthly_workload(caller, year, month, scope)
