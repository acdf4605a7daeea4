"""Pydantic schemas for effort mapping configuration."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _validate_hours(values: dict[str, float]) -> dict[str, float]:
    for complexity, hours in values.items():
        if not complexity.strip():
            raise ValueError("Complexity keys must be non-empty")
        if hours < 0:
            raise ValueError(f"Hours for {complexity} must not be negative")
    return values


class EffortMappingCreate(BaseModel):
    """Request body for creating an effort mapping."""

    type: str = Field(min_length=1, description="Component type, e.g. No_of_new_feature")
    values: dict[str, float] = Field(
        description="Hours per item keyed by complexity, e.g. {'Simple': 1, 'Medium': 2}",
    )

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: dict[str, float]) -> dict[str, float]:
        return _validate_hours(v)


class EffortMappingUpdate(BaseModel):
    """Request body for renaming a type and replacing its values."""

    new_type: str = Field(min_length=1)
    values: dict[str, float]

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: dict[str, float]) -> dict[str, float]:
        return _validate_hours(v)


class EffortMappingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    values: dict[str, float]
