"""Employee hierarchy endpoints."""

import logging

from fastapi import APIRouter

from app.auth.auth import CurrentCaller
from routers.v1.dependencies import DbSession, Scope
from schemas.common import MessageResponse
from schemas.employee import EmployeeReassign, EmployeeResponse, HierarchyChainResponse
from services.employee_service import EmployeeService
from services.transaction import transaction
from services.visibility_service import VisibilityService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[EmployeeResponse],
    summary="List visible employees",
)
def list_employees(caller: CurrentCaller, db: DbSession, scope: Scope) -> list[EmployeeResponse]:
    """Employees the caller may see, narrowed by the optional scope filters."""
    employees = VisibilityService(db).list_visible_employees(caller, scope)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.get(
    "/{employee_id}/hierarchy-chain",
    response_model=HierarchyChainResponse,
    summary="Supervisors above an employee",
    responses={403: {"description": "Employee outside the caller's visibility"}},
)
def get_hierarchy_chain(employee_id: int, caller: CurrentCaller, db: DbSession) -> HierarchyChainResponse:
    chain = EmployeeService(db).hierarchy_chain(caller, employee_id)
    return HierarchyChainResponse(employee_id=employee_id, **chain)


@router.put(
    "/{employee_id}/reports-to",
    response_model=EmployeeResponse,
    summary="Reassign an employee's supervisor",
    responses={
        403: {"description": "Employee or supervisor outside the caller's visibility"},
        422: {"description": "The move would create a reporting cycle"},
    },
)
def reassign_employee(
    employee_id: int,
    payload: EmployeeReassign,
    caller: CurrentCaller,
    db: DbSession,
) -> EmployeeResponse:
    with transaction(db):
        employee = EmployeeService(db).reassign(caller, employee_id, payload.reports_to)
    logger.info("Employee id=%s now reports to %s", employee_id, payload.reports_to)
    return EmployeeResponse.model_validate(employee)


@router.delete(
    "/{employee_id}",
    response_model=MessageResponse,
    summary="Delete an employee",
    responses={403: {"description": "Caller may not delete this employee"}},
)
def delete_employee(employee_id: int, caller: CurrentCaller, db: DbSession) -> MessageResponse:
    """Delete an employee; direct reports are detached, never cascaded."""
    with transaction(db):
        EmployeeService(db).delete(caller, employee_id)
    return MessageResponse(message="Employee deleted successfully")
