"""Employee hierarchy maintenance: reassignment, deletion and chain lookup."""

import logging

from sqlalchemy.orm import Session

from app.exceptions import AuthorizationError, NotFoundError, ValidationError
from models.employee import Employee
from models.enums import Role
from repositories.employee_repository import EmployeeRepository
from schemas.employee import CallerContext
from services.org_graph import OrgNode, OrgGraph
from services.visibility_service import VisibilityService

logger = logging.getLogger(__name__)

# Roles a manager may delete, and only within their own team.
MANAGER_DELETABLE_ROLES = {Role.ADMIN.value, Role.EMPLOYEE.value}


class EmployeeService:
    """Hierarchy edits that keep ``manager_id`` consistent with ``reports_to``."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EmployeeRepository(db)
        self.visibility = VisibilityService(db)

    def get_employee_or_404(self, employee_id: int) -> Employee:
        employee = self.repo.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def hierarchy_chain(self, caller: CallerContext, employee_id: int) -> dict[str, int | None]:
        """Nearest head LT, LT, ALT, manager and team lead above an employee."""
        self.get_employee_or_404(employee_id)
        self.visibility.ensure_can_act(caller, employee_id)
        return self.visibility.graph.resolve_chain(employee_id)

    def reassign(self, caller: CallerContext, employee_id: int, reports_to: int | None) -> Employee:
        """Move an employee (and implicitly its subtree) under a new supervisor.

        Raises:
            NotFoundError: Unknown employee or supervisor.
            AuthorizationError: Either side is outside the caller's visibility.
            ValidationError: The move would create a reporting cycle.
        """
        employee = self.get_employee_or_404(employee_id)
        self.visibility.ensure_can_act(caller, employee_id)

        graph = self.visibility.graph
        if reports_to is not None:
            self.get_employee_or_404(reports_to)
            self.visibility.ensure_can_act(caller, reports_to)
            if reports_to in graph.subtree(employee_id):
                raise ValidationError(
                    f"Employee {employee_id} cannot report to {reports_to}: that would create a cycle"
                )

        self.repo.set_reports_to(employee, reports_to)

        # Recompute the denormalized manager for the moved subtree only.
        moved = graph.subtree(employee_id)
        nodes = [
            OrgNode(
                id=node.id,
                role=node.role,
                reports_to=reports_to if node.id == employee_id else node.reports_to,
                application_name=node.application_name,
            )
            for node in (graph.get(emp_id) for emp_id in graph.ids())
            if node is not None
        ]
        updated = OrgGraph(nodes)
        self.repo.set_manager_ids({emp_id: updated.nearest_manager(emp_id) for emp_id in moved})
        self.visibility.invalidate()
        return employee

    def delete(self, caller: CallerContext, employee_id: int) -> None:
        """Delete an employee the caller is allowed to remove.

        Managers may only delete admins and employees they manage; admins may
        only delete employees under their own manager.
        """
        employee = self.get_employee_or_404(employee_id)
        if employee_id == caller.id:
            raise AuthorizationError("You cannot delete yourself")
        self.visibility.ensure_can_act(caller, employee_id)

        if caller.role == Role.ADMIN.value and employee.manager_id != caller.manager_id:
            raise AuthorizationError("Admins can only delete employees under their manager")

        if caller.role == Role.MANAGER.value:
            if employee.role not in MANAGER_DELETABLE_ROLES:
                raise AuthorizationError("Unauthorized to delete this user")
            if employee.manager_id != caller.id:
                raise AuthorizationError(f"Cannot delete this {employee.role}")

        self.repo.delete(employee)
        self.visibility.invalidate()
