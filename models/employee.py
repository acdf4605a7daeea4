"""Employee model and the reporting hierarchy edges."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text

from models.base import Base


class Employee(Base):
    """Employee model mapping to the employees table.

    ``reports_to`` is the single upward edge of the reporting tree. It is a
    back-reference, not ownership: deleting a supervisor nulls the edge on
    its subordinates. ``manager_id`` is the denormalized nearest ancestor
    whose role is ``manager``.
    """

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(Text, unique=True, nullable=False)
    role = Column(String(32), nullable=False, default="employee")
    reports_to = Column(
        Integer,
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    manager_id = Column(
        Integer,
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    application_name = Column(String(255))
    designation = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
