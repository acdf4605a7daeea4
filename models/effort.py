"""Effort mapping model: hours per item keyed by component type and complexity."""

from sqlalchemy import JSON, Column, Integer, String

from models.base import Base, ModifyModel


class EffortMapping(ModifyModel, Base):
    """One configuration record per component type.

    ``values`` maps complexity to hours per item, e.g.
    ``{"Simple": 0.5, "Medium": 1, "Complex": 3}``.
    """

    __tablename__ = "effort_mappings"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(255), unique=True, nullable=False, index=True)
    values = Column(JSON, nullable=False, default=dict)
