"""Repository for effort mapping configuration records."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from models.effort import EffortMapping

logger = logging.getLogger(__name__)


class EffortRepository:
    """Data access layer for effort mappings."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> list[EffortMapping]:
        return self.db.query(EffortMapping).order_by(EffortMapping.type.asc()).all()

    def get_by_type(self, type_: str) -> EffortMapping | None:
        return self.db.query(EffortMapping).filter(EffortMapping.type == type_).first()

    def create(self, type_: str, values: dict[str, Any], created_by: int | None = None) -> EffortMapping:
        mapping = EffortMapping(
            type=type_,
            values=values,
            created_by=created_by,
            updated_by=created_by,
        )
        self.db.add(mapping)
        self.db.flush()
        logger.info("Created effort mapping: type=%s", type_)
        return mapping

    def update(
        self,
        mapping: EffortMapping,
        new_type: str,
        values: dict[str, Any],
        updated_by: int | None = None,
    ) -> EffortMapping:
        old_type = mapping.type
        mapping.type = new_type
        mapping.values = dict(values)
        if updated_by:
            mapping.updated_by = updated_by
        self.db.flush()
        logger.info("Updated effort mapping: type=%s -> %s", old_type, new_type)
        return mapping

    def delete(self, mapping: EffortMapping) -> None:
        self.db.delete(mapping)
        self.db.flush()
        logger.info("Deleted effort mapping: type=%s", mapping.type)
