"""Enumerations shared by models, schemas and services."""

from enum import Enum


class Role(str, Enum):
    """Supervisory roles in the reporting hierarchy."""

    HEAD_LT = "head_lt"
    LT = "lt"
    ALT = "alt"
    MANAGER = "manager"
    ADMIN = "admin"
    EMPLOYEE = "employee"


class WorkItemStatus(str, Enum):
    """Rolled-up status of a task or live issue."""

    PENDING = "Pending"
    WIP = "WIP"
    HOLD = "Hold"
    DROPPED = "Dropped"
    COMPLETED = "Completed"


class ProjectStage(str, Enum):
    """Project pipeline stages. Declaration order is pipeline order."""

    BRS_DISCUSSION = "BRS_Discussion"
    APPROACH_PREPARATION = "Approach_Preparation"
    APPROACH_FINALIZATION = "Approach_Finalization"
    UNDER_DEVELOPMENT = "Under_Development"
    UNDER_QA = "Under_QA"
    UNDER_UAT = "Under_UAT"
    UAT_SIGNOFF = "UAT_Signoff"
    UNDER_PREPROD = "Under_Preprod"
    PREPROD_SIGNOFF = "Preprod_Signoff"
    LIVE = "Live"
    HOLD = "Hold"
    DROPPED = "Dropped"


class OnTrackStatus(str, Enum):
    """Schedule health of a project."""

    ON_TRACK = "On Track"
    DELAYED = "Delayed"
