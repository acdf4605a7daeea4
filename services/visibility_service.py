"""Organizational visibility: which employees a caller may see or act on.

Visibility is the intersection of independent clauses:

* one role clause, chosen from a registry of per-role strategies;
* one "must be in subtree(X)" clause per supplied scope filter
  (``lt_id``, ``alt_id``, ``manager_id``, ``tl_id``);
* an application tag clause when ``application_name`` is supplied.

Scope filters can therefore only narrow what the role allows.
"""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from app.exceptions import AuthorizationError
from models.employee import Employee
from models.enums import Role
from repositories.employee_repository import EmployeeRepository
from schemas.employee import CallerContext, VisibilityScope
from services.org_graph import OrgGraph

logger = logging.getLogger(__name__)

RoleStrategy = Callable[[OrgGraph, CallerContext, VisibilityScope], set[int]]

ROLE_STRATEGIES: dict[str, RoleStrategy] = {}

SCOPE_SUBTREE_FIELDS = ("lt_id", "alt_id", "manager_id", "tl_id")


def role_strategy(*roles: Role) -> Callable[[RoleStrategy], RoleStrategy]:
    """Register a visibility strategy for one or more roles."""

    def decorator(func: RoleStrategy) -> RoleStrategy:
        for role in roles:
            ROLE_STRATEGIES[role.value] = func
        return func

    return decorator


@role_strategy(Role.HEAD_LT, Role.LT, Role.ALT)
def _leadership_visibility(graph: OrgGraph, caller: CallerContext, scope: VisibilityScope) -> set[int]:
    return graph.descendants(caller.id) | {caller.id}


@role_strategy(Role.MANAGER)
def _manager_visibility(graph: OrgGraph, caller: CallerContext, scope: VisibilityScope) -> set[int]:
    if scope.tl_id is not None:
        team = graph.direct_reports(scope.tl_id) | {scope.tl_id}
        # A tl_id outside the manager's own tree must not widen visibility.
        return team & graph.descendants(caller.id)
    return graph.direct_reports(caller.id)


@role_strategy(Role.ADMIN)
def _admin_visibility(graph: OrgGraph, caller: CallerContext, scope: VisibilityScope) -> set[int]:
    if scope.tl_id is not None:
        return graph.subtree(scope.tl_id)
    return graph.subtree(caller.id) | {caller.id}


@role_strategy(Role.EMPLOYEE)
def _employee_visibility(graph: OrgGraph, caller: CallerContext, scope: VisibilityScope) -> set[int]:
    return {caller.id}


class VisibilityResolver:
    """Pure resolver over a prebuilt OrgGraph."""

    def __init__(self, graph: OrgGraph):
        self.graph = graph

    def resolve_visible_set(
        self,
        caller: CallerContext,
        scope: VisibilityScope | None = None,
    ) -> frozenset[int]:
        """Ids of every employee the caller may see or act on.

        Args:
            caller: Authenticated caller.
            scope: Optional narrowing filters.

        Returns:
            Frozen set of employee ids. Unknown roles see nobody.
        """
        scope = scope or VisibilityScope()
        strategy = ROLE_STRATEGIES.get(caller.role)
        if strategy is None:
            logger.warning("No visibility strategy for role=%s (caller id=%s)", caller.role, caller.id)
            return frozenset()

        visible = strategy(self.graph, caller, scope)

        for field in SCOPE_SUBTREE_FIELDS:
            root = getattr(scope, field)
            if root is not None:
                visible &= self.graph.subtree(root)

        if scope.application_name:
            wanted = scope.application_name.upper()
            visible = {
                emp_id
                for emp_id in visible
                if (node := self.graph.get(emp_id)) is not None
                and (node.application_name or "").strip().upper() == wanted
            }

        return frozenset(visible)

    def can_act_on(
        self,
        caller: CallerContext,
        target_employee_id: int,
        scope: VisibilityScope | None = None,
    ) -> bool:
        """Whether the caller may act on the target; acting on oneself is always allowed."""
        if target_employee_id == caller.id:
            return True
        return target_employee_id in self.resolve_visible_set(caller, scope)

    def ensure_can_act(
        self,
        caller: CallerContext,
        target_employee_id: int,
        scope: VisibilityScope | None = None,
    ) -> None:
        """Raise AuthorizationError when the target is outside the caller's visible set."""
        if not self.can_act_on(caller, target_employee_id, scope):
            logger.warning(
                "Caller id=%s role=%s denied access to employee id=%s",
                caller.id,
                caller.role,
                target_employee_id,
            )
            raise AuthorizationError(
                f"You are not authorized to act on employee {target_employee_id}."
            )


class VisibilityService:
    """Loads the reporting tree for one request and answers visibility questions."""

    def __init__(self, db: Session):
        self.repo = EmployeeRepository(db)
        self._resolver: VisibilityResolver | None = None

    @property
    def resolver(self) -> VisibilityResolver:
        if self._resolver is None:
            self._resolver = VisibilityResolver(OrgGraph.from_employees(self.repo.list_all()))
        return self._resolver

    @property
    def graph(self) -> OrgGraph:
        return self.resolver.graph

    def resolve_visible_set(
        self,
        caller: CallerContext,
        scope: VisibilityScope | None = None,
    ) -> frozenset[int]:
        return self.resolver.resolve_visible_set(caller, scope)

    def ensure_can_act(
        self,
        caller: CallerContext,
        target_employee_id: int,
        scope: VisibilityScope | None = None,
    ) -> None:
        self.resolver.ensure_can_act(caller, target_employee_id, scope)

    def list_visible_employees(
        self,
        caller: CallerContext,
        scope: VisibilityScope | None = None,
    ) -> list[Employee]:
        """Employee rows visible to the caller, ordered by name."""
        return self.repo.list_by_ids(self.resolve_visible_set(caller, scope))

    def invalidate(self) -> None:
        """Drop the cached graph after a hierarchy edit."""
        self._resolver = None
