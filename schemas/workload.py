"""Pydantic schemas for the monthly workload report."""

from pydantic import BaseModel, Field


class WorkloadPercentages(BaseModel):
    """Shares of planned hours, rounded to whole percent."""

    completed: int = 0
    pending: int = 0
    overdue: int = 0


class WorkloadSummary(BaseModel):
    planned_hours: float = 0.0
    completed_hours: float = 0.0
    pending_hours: float = 0.0
    overdue_hours: float = 0.0
    month_logged_hours: float = 0.0
    percentages: WorkloadPercentages = Field(default_factory=WorkloadPercentages)


class EmployeeWorkload(BaseModel):
    """One visible employee's workload for a month."""

    employee_id: int
    employee_name: str
    application_name: str | None = None
    item_count: int = 0
    summary: WorkloadSummary = Field(default_factory=WorkloadSummary)
