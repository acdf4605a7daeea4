"""Effort pricing: turn requested components into hours using the effort table."""

import logging
from collections.abc import Iterable, Mapping

from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError
from models.effort import EffortMapping
from repositories.effort_repository import EffortRepository
from schemas.work_item import ComponentSpec, PricedComponent

logger = logging.getLogger(__name__)

EffortTable = Mapping[str, Mapping[str, float]]


def price_components(
    requested: Iterable[ComponentSpec],
    effort_table: EffortTable,
) -> list[PricedComponent]:
    """Price each requested component against a read-only effort table.

    A type/complexity pair missing from the table prices at 0 hours rather
    than failing.

    Args:
        requested: Components as requested by the caller.
        effort_table: Snapshot of ``type -> {complexity -> hours_per_item}``.

    Returns:
        One PricedComponent per requested component, in request order.
    """
    priced = []
    for spec in requested:
        hours_per_item = float(effort_table.get(spec.type, {}).get(spec.complexity, 0) or 0)
        if hours_per_item == 0:
            logger.warning(
                "No effort mapping for type=%s complexity=%s; pricing at 0 hours",
                spec.type,
                spec.complexity,
            )
        count = spec.count if spec.count is not None else 1
        priced.append(
            PricedComponent(
                id=spec.id,
                type=spec.type,
                complexity=spec.complexity,
                count=count,
                file_required=spec.file_required,
                file_type=spec.file_type if spec.file_required else None,
                hours_per_item=hours_per_item,
                total_hours=count * hours_per_item,
            )
        )
    return priced


def workload_hours(priced: Iterable[PricedComponent]) -> float:
    """Total hours of a work item: the sum of its components' totals."""
    return sum(component.total_hours for component in priced)


class EffortService:
    """Effort table administration and per-transaction snapshots."""

    def __init__(self, db: Session):
        self.repo = EffortRepository(db)

    def load_table(self) -> dict[str, dict[str, float]]:
        """Snapshot the whole effort table for one transaction."""
        return {mapping.type: dict(mapping.values or {}) for mapping in self.repo.list_all()}

    def price(self, requested: Iterable[ComponentSpec]) -> list[PricedComponent]:
        return price_components(requested, self.load_table())

    def list_mappings(self) -> list[EffortMapping]:
        return self.repo.list_all()

    def create_mapping(
        self,
        type_: str,
        values: dict[str, float],
        created_by: int | None = None,
    ) -> EffortMapping:
        if self.repo.get_by_type(type_) is not None:
            raise ConflictError(f"Type {type_} already exists")
        return self.repo.create(type_, values, created_by=created_by)

    def update_mapping(
        self,
        type_: str,
        new_type: str,
        values: dict[str, float],
        updated_by: int | None = None,
    ) -> EffortMapping:
        mapping = self.repo.get_by_type(type_)
        if mapping is None:
            raise NotFoundError(f"Type {type_} not found")
        if new_type != type_ and self.repo.get_by_type(new_type) is not None:
            raise ConflictError(f"Type {new_type} already exists")
        return self.repo.update(mapping, new_type, values, updated_by=updated_by)

    def delete_mapping(self, type_: str) -> None:
        mapping = self.repo.get_by_type(type_)
        if mapping is None:
            raise NotFoundError(f"Type {type_} not found")
        self.repo.delete(mapping)
