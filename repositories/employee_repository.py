"""Repository for employee and reporting hierarchy database operations."""

import logging
from collections.abc import Iterable

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from models.employee import Employee

logger = logging.getLogger(__name__)


class EmployeeRepository:
    """Data access layer for employees."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
        """
        self.db = db

    def get_by_id(self, employee_id: int) -> Employee | None:
        """Get an employee by primary key."""
        return self.db.get(Employee, employee_id)

    def get_active_by_email(self, email: str) -> Employee | None:
        """Look up an active employee by email address (case-insensitive)."""
        return (
            self.db.query(Employee)
            .filter(func.lower(Employee.email) == email.lower())
            .filter(Employee.is_active.is_(True))
            .first()
        )

    def list_all(self) -> list[Employee]:
        """All employees; the hierarchy graph is built from this list."""
        return self.db.query(Employee).order_by(Employee.id.asc()).all()

    def list_by_ids(self, employee_ids: Iterable[int]) -> list[Employee]:
        """Employees whose id is in ``employee_ids``, ordered by name."""
        ids = list(employee_ids)
        if not ids:
            return []
        return (
            self.db.query(Employee)
            .filter(Employee.id.in_(ids))
            .order_by(Employee.name.asc(), Employee.id.asc())
            .all()
        )

    def set_reports_to(self, employee: Employee, reports_to: int | None) -> Employee:
        """Point an employee's reporting edge at a new supervisor."""
        employee.reports_to = reports_to
        self.db.flush()
        logger.info("Employee id=%s now reports to %s", employee.id, reports_to)
        return employee

    def set_manager_ids(self, manager_ids: dict[int, int | None]) -> None:
        """Persist recomputed denormalized ``manager_id`` values."""
        for employee in self.list_by_ids(manager_ids):
            employee.manager_id = manager_ids[employee.id]
        self.db.flush()

    def delete(self, employee: Employee) -> None:
        """Delete an employee, detaching (never deleting) its subordinates."""
        employee_id = employee.id
        self.db.execute(
            update(Employee)
            .where(Employee.reports_to == employee_id)
            .values(reports_to=None)
            .execution_options(synchronize_session="fetch")
        )
        self.db.execute(
            update(Employee)
            .where(Employee.manager_id == employee_id)
            .values(manager_id=None)
            .execution_options(synchronize_session="fetch")
        )
        self.db.delete(employee)
        self.db.flush()
        logger.info("Deleted employee id=%s and detached its subordinates", employee_id)
