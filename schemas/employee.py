"""Pydantic schemas for callers, visibility scopes and employee endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CallerContext(BaseModel):
    """Identity of the authenticated caller as seen by the core services."""

    id: int
    role: str
    manager_id: int | None = None
    application_name: str | None = None

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v: str) -> str:
        return v.strip().lower()


class VisibilityScope(BaseModel):
    """Optional narrowing filters applied on top of role-based visibility."""

    lt_id: int | None = Field(default=None, description="Restrict to this LT's subtree")
    alt_id: int | None = Field(default=None, description="Restrict to this ALT's subtree")
    manager_id: int | None = Field(default=None, description="Restrict to this manager's subtree")
    tl_id: int | None = Field(default=None, description="Restrict to this team lead's subtree")
    application_name: str | None = Field(default=None, description="Application tag filter")

    @field_validator("lt_id", "alt_id", "manager_id", "tl_id", mode="before")
    @classmethod
    def ignore_non_numeric(cls, v: Any) -> int | None:
        """Empty or non-numeric ids are treated as absent rather than rejected."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        text = str(v).strip()
        if not text:
            return None
        try:
            return int(float(text))
        except ValueError:
            return None

    @field_validator("application_name", mode="before")
    @classmethod
    def blank_application_is_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class EmployeeResponse(BaseModel):
    """Employee as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    reports_to: int | None = None
    manager_id: int | None = None
    application_name: str | None = None
    designation: str | None = None
    is_active: bool = True


class EmployeeReassign(BaseModel):
    """Request body for moving an employee under a new supervisor."""

    reports_to: int | None = Field(description="New supervisor id, or null to detach")


class HierarchyChainResponse(BaseModel):
    """Nearest supervisor at each level above an employee."""

    employee_id: int
    head_lt_id: int | None = None
    lt_id: int | None = None
    alt_id: int | None = None
    manager_id: int | None = None
    tl_id: int | None = None
