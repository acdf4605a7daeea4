"""Work item models: tasks and live issues, their components and worklogs.

Tasks and live issues share one shape but live in separate tables. Each
concrete class maps its table-specific foreign key columns onto the same
attribute names (``work_item_id``, ``component_id``) so that services can
operate on either kind through a :class:`WorkItemKind` bundle.
"""

from dataclasses import dataclass

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from models.base import Base, ModifyModel


class WorkItemColumns(ModifyModel):
    """Columns shared by tasks and live issues."""

    title = Column(String(500), nullable=False)
    description = Column(Text)
    status = Column(String(32), nullable=False, default="Pending")
    priority = Column(String(32))
    workload_hours = Column(Float, nullable=False, default=0.0)
    completed_at = Column(DateTime(timezone=True))
    due_date = Column(Date)


class ComponentColumns(ModifyModel):
    """Columns shared by task and live issue components."""

    type = Column(String(255), nullable=False)
    complexity = Column(String(64), nullable=False)
    count = Column(Integer, nullable=False, default=1)
    hours_per_item = Column(Float, nullable=False, default=0.0)
    total_hours = Column(Float, nullable=False, default=0.0)
    status = Column(String(32), nullable=False, default="Pending")
    completed_at = Column(DateTime(timezone=True))
    file_required = Column(Boolean, nullable=False, default=False)
    file_type = Column(String(64))


class WorkLogColumns(ModifyModel):
    """Columns shared by task and live issue worklogs."""

    hours_logged = Column(Float, nullable=False)
    log_date = Column(Date, nullable=False)
    notes = Column(Text)
    is_auto = Column(Boolean, nullable=False, default=False)


class Task(WorkItemColumns, Base):
    """A planned task assigned to one employee."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    assigned_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    manager_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), index=True)
    version = Column(Integer, nullable=False)

    components = relationship(
        "TaskComponent",
        back_populates="work_item",
        cascade="all, delete-orphan",
        order_by="TaskComponent.id",
    )

    __mapper_args__ = {"version_id_col": version}


class TaskComponent(ComponentColumns, Base):
    """A priced unit of work within a task."""

    __tablename__ = "task_components"

    id = Column(Integer, primary_key=True, index=True)
    work_item_id = Column(
        "task_id",
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version = Column(Integer, nullable=False)

    work_item = relationship("Task", back_populates="components")
    worklogs = relationship(
        "TaskWorkLog",
        back_populates="component",
        cascade="all, delete-orphan",
        order_by="TaskWorkLog.id",
    )

    __mapper_args__ = {"version_id_col": version}


class TaskWorkLog(WorkLogColumns, Base):
    """Hours an employee logged against a task component."""

    __tablename__ = "task_worklogs"

    id = Column(Integer, primary_key=True, index=True)
    component_id = Column(
        "task_component_id",
        Integer,
        ForeignKey("task_components.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)

    component = relationship("TaskComponent", back_populates="worklogs")


class LiveIssue(WorkItemColumns, Base):
    """A production issue assigned to one employee."""

    __tablename__ = "live_issues"

    id = Column(Integer, primary_key=True, index=True)
    assigned_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    manager_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), index=True)
    version = Column(Integer, nullable=False)

    components = relationship(
        "LiveIssueComponent",
        back_populates="work_item",
        cascade="all, delete-orphan",
        order_by="LiveIssueComponent.id",
    )

    __mapper_args__ = {"version_id_col": version}


class LiveIssueComponent(ComponentColumns, Base):
    """A priced unit of work within a live issue."""

    __tablename__ = "live_issue_components"

    id = Column(Integer, primary_key=True, index=True)
    work_item_id = Column(
        "live_issue_id",
        Integer,
        ForeignKey("live_issues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version = Column(Integer, nullable=False)

    work_item = relationship("LiveIssue", back_populates="components")
    worklogs = relationship(
        "LiveIssueWorkLog",
        back_populates="component",
        cascade="all, delete-orphan",
        order_by="LiveIssueWorkLog.id",
    )

    __mapper_args__ = {"version_id_col": version}


class LiveIssueWorkLog(WorkLogColumns, Base):
    """Hours an employee logged against a live issue component."""

    __tablename__ = "live_issue_worklogs"

    id = Column(Integer, primary_key=True, index=True)
    component_id = Column(
        "live_issue_component_id",
        Integer,
        ForeignKey("live_issue_components.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)

    component = relationship("LiveIssueComponent", back_populates="worklogs")


@dataclass(frozen=True)
class WorkItemKind:
    """The three mapped classes that make up one kind of work item."""

    label: str
    item_model: type
    component_model: type
    worklog_model: type


TASK_KIND = WorkItemKind(
    label="Task",
    item_model=Task,
    component_model=TaskComponent,
    worklog_model=TaskWorkLog,
)

LIVE_ISSUE_KIND = WorkItemKind(
    label="Live issue",
    item_model=LiveIssue,
    component_model=LiveIssueComponent,
    worklog_model=LiveIssueWorkLog,
)

WORK_ITEM_KINDS = (TASK_KIND, LIVE_ISSUE_KIND)
