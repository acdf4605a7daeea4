"""Pydantic schemas for work items, components and worklogs."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.employee import VisibilityScope


class ComponentSpec(BaseModel):
    """A requested component before pricing."""

    id: int | None = Field(default=None, description="Existing component id when updating")
    type: str = Field(description="Effort mapping type, e.g. No_of_new_feature")
    complexity: str = Field(description="Complexity key within the type, e.g. Medium")
    count: int | None = Field(default=None, ge=0, description="Number of items; defaults to 1")
    file_required: bool = False
    file_type: str | None = None


class PricedComponent(ComponentSpec):
    """A component with hours derived from the effort table."""

    hours_per_item: float = Field(ge=0)
    total_hours: float = Field(ge=0)


class WorkItemCreate(BaseModel):
    """Request body for creating a task or live issue."""

    assigned_employee_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    priority: str | None = None
    due_date: date | None = None
    components: list[ComponentSpec] = Field(default_factory=list)
    scope: VisibilityScope = Field(default_factory=VisibilityScope)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class WorkItemUpdate(BaseModel):
    """Partial update of a task or live issue.

    When ``components`` is supplied it replaces the component set: entries
    with a known ``id`` are updated, entries without one are inserted and
    existing components missing from the list are deleted.
    """

    assigned_employee_id: int | None = None
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    due_date: date | None = None
    components: list[ComponentSpec] | None = None


class ComponentStatusUpdate(BaseModel):
    """Request body for a component status transition."""

    status: str


class WorkLogCreate(BaseModel):
    """Request body for logging hours against a component."""

    hours_logged: float = Field(description="Hours to log; must be positive")
    log_date: date
    notes: str | None = None


class WorkLogUpdate(BaseModel):
    """Request body for editing an existing worklog."""

    hours_logged: float
    log_date: date
    notes: str | None = None


class WorkLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    component_id: int
    employee_id: int
    hours_logged: float
    log_date: date
    notes: str | None = None
    is_auto: bool = False


class ComponentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    work_item_id: int
    type: str
    complexity: str
    count: int
    hours_per_item: float
    total_hours: float
    status: str
    completed_at: datetime | None = None
    file_required: bool = False
    file_type: str | None = None


class WorkItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    assigned_employee_id: int
    manager_id: int | None = None
    status: str
    priority: str | None = None
    workload_hours: float
    completed_at: datetime | None = None
    due_date: date | None = None
    components: list[ComponentResponse] = Field(default_factory=list)


class StatusTransitionResponse(BaseModel):
    """Component and parent state after a status change or worklog delete."""

    component: ComponentResponse
    work_item: WorkItemResponse
