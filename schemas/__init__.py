"""Schemas package."""

from schemas.common import ErrorResponse, MessageResponse
from schemas.effort import EffortMappingCreate, EffortMappingResponse, EffortMappingUpdate
from schemas.employee import CallerContext, EmployeeResponse, VisibilityScope
from schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from schemas.work_item import (
    ComponentSpec,
    PricedComponent,
    WorkItemCreate,
    WorkItemResponse,
    WorkItemUpdate,
)
from schemas.workload import EmployeeWorkload

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "CallerContext",
    "VisibilityScope",
    "EmployeeResponse",
    "EffortMappingCreate",
    "EffortMappingUpdate",
    "EffortMappingResponse",
    "ComponentSpec",
    "PricedComponent",
    "WorkItemCreate",
    "WorkItemUpdate",
    "WorkItemResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "EmployeeWorkload",
]
