"""SQLAlchemy base class and the audit column mixin."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


def _employee_ref() -> Column:
    # Audit references survive the employee being deleted.
    return Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)


class ModifyModel:
    """Audit trail for work items, components, worklogs, projects and effort mappings.

    Timestamps are set by the database; ``created_by`` / ``updated_by`` hold
    the id of the acting employee and are written by the repositories.
    """

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @declared_attr
    def created_by(cls):
        return _employee_ref()

    @declared_attr
    def updated_by(cls):
        return _employee_ref()
