"""Pydantic schemas for projects, their change ledger and analytics."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.schedule_service import ALL_STAGES


def _validate_stage(v: str | None) -> str | None:
    if v is not None and v not in ALL_STAGES:
        raise ValueError(f"Unknown project stage {v!r}")
    return v


class ProjectCreate(BaseModel):
    """Request body for creating a project.

    Sprint, UAT release and go-live dates are derived from the stage and
    cannot be supplied.
    """

    name: str = Field(min_length=1)
    description: str | None = None
    priority: str | None = None
    stage: str = "BRS_Discussion"
    start_date: date | None = Field(default=None, description="Defaults to today")
    planned_end_date: date | None = None
    project_cost: float | None = Field(default=None, ge=0)
    remarks: str | None = None

    @field_validator("stage")
    @classmethod
    def validate_stage(cls, v: str) -> str:
        return _validate_stage(v)


class ProjectUpdate(BaseModel):
    """Partial update of a project; omitted fields keep their value."""

    name: str | None = None
    description: str | None = None
    priority: str | None = None
    stage: str | None = None
    start_date: date | None = None
    planned_end_date: date | None = None
    project_cost: float | None = Field(default=None, ge=0)
    remarks: str | None = None

    @field_validator("stage")
    @classmethod
    def validate_stage(cls, v: str | None) -> str | None:
        return _validate_stage(v)


class ProjectFilters(BaseModel):
    """Query filters for listing projects."""

    priority: str | None = None
    stage: str | None = None
    on_track_status: str | None = None
    start_date_from: date | None = None
    start_date_to: date | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    manager_id: int | None = None
    priority: str | None = None
    stage: str
    start_date: date | None = None
    planned_end_date: date | None = None
    sprint_start_date: date | None = None
    sprint_end_date: date | None = None
    uat_release_date: date | None = None
    go_live_date: date | None = None
    on_track_status: str
    man_days: int | None = None
    project_cost: float | None = None
    remarks: str | None = None


class Recommendation(BaseModel):
    type: str
    message: str


class ProjectDetailResponse(BaseModel):
    """A project with advisory notes and the fields the automaton just changed."""

    project: ProjectResponse
    recommendations: list[Recommendation] = Field(default_factory=list)
    auto_updated: list[str] = Field(default_factory=list)


class ProjectName(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ProjectChangeLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    changed_at: datetime
    actor_id: int | None = None
    field: str
    old_value: str | None = None
    new_value: str | None = None


class ProjectAnalytics(BaseModel):
    """Counts over the caller's projects."""

    total: int
    live: int
    by_stage: dict[str, int]
    by_on_track_status: dict[str, int]
    by_priority: dict[str, int]
