"""Models package."""

from models.base import Base, ModifyModel
from models.effort import EffortMapping
from models.employee import Employee
from models.project import Project, ProjectChangeLog
from models.work_item import (
    LIVE_ISSUE_KIND,
    TASK_KIND,
    WORK_ITEM_KINDS,
    LiveIssue,
    LiveIssueComponent,
    LiveIssueWorkLog,
    Task,
    TaskComponent,
    TaskWorkLog,
    WorkItemKind,
)

__all__ = [
    "Base",
    "ModifyModel",
    "Employee",
    "EffortMapping",
    "Project",
    "ProjectChangeLog",
    "Task",
    "TaskComponent",
    "TaskWorkLog",
    "LiveIssue",
    "LiveIssueComponent",
    "LiveIssueWorkLog",
    "WorkItemKind",
    "TASK_KIND",
    "LIVE_ISSUE_KIND",
    "WORK_ITEM_KINDS",
]
