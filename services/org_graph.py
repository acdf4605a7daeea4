"""In-memory view of the employee reporting tree.

The tree is stored as an adjacency list built once per request from the
employees table. All traversals are breadth-first and guard against cycles,
so a corrupted ``reports_to`` chain degrades to a finite walk instead of
hanging the request.
"""

from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import dataclass

from models.enums import Role

# Ancestor role -> key in the resolved hierarchy chain. Team leads carry the admin role.
CHAIN_KEYS = {
    Role.HEAD_LT.value: "head_lt_id",
    Role.LT.value: "lt_id",
    Role.ALT.value: "alt_id",
    Role.MANAGER.value: "manager_id",
    Role.ADMIN.value: "tl_id",
}


@dataclass(frozen=True)
class OrgNode:
    """The hierarchy-relevant slice of an employee row."""

    id: int
    role: str
    reports_to: int | None = None
    application_name: str | None = None


class OrgGraph:
    """Adjacency-list reporting tree with subtree and ancestor queries."""

    def __init__(self, nodes: Iterable[OrgNode]):
        self._nodes: dict[int, OrgNode] = {}
        self._children: dict[int, list[int]] = defaultdict(list)
        for node in nodes:
            self._nodes[node.id] = node
        for node in self._nodes.values():
            if node.reports_to is not None and node.reports_to != node.id:
                self._children[node.reports_to].append(node.id)

    @classmethod
    def from_employees(cls, employees: Iterable) -> "OrgGraph":
        """Build a graph from Employee ORM rows (or anything shaped like them)."""
        return cls(
            OrgNode(
                id=emp.id,
                role=(emp.role or "").lower(),
                reports_to=emp.reports_to,
                application_name=emp.application_name,
            )
            for emp in employees
        )

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, employee_id: int) -> OrgNode | None:
        return self._nodes.get(employee_id)

    def ids(self) -> frozenset[int]:
        return frozenset(self._nodes)

    def direct_reports(self, employee_id: int) -> set[int]:
        """Employees whose ``reports_to`` edge points at ``employee_id``."""
        return set(self._children.get(employee_id, ()))

    def subtree(self, root_id: int) -> set[int]:
        """The root and everyone transitively reporting to it.

        Unknown roots yield an empty set.
        """
        if root_id not in self._nodes:
            return set()
        seen = {root_id}
        queue = deque([root_id])
        while queue:
            current = queue.popleft()
            for child in self._children.get(current, ()):
                if child not in seen:
                    seen.add(child)
                    queue.append(child)
        return seen

    def descendants(self, root_id: int) -> set[int]:
        """Everyone transitively reporting to ``root_id``, excluding the root."""
        return self.subtree(root_id) - {root_id}

    def ancestors(self, employee_id: int) -> list[int]:
        """Supervisors of ``employee_id``, nearest first."""
        chain: list[int] = []
        seen = {employee_id}
        node = self._nodes.get(employee_id)
        while node is not None and node.reports_to is not None and node.reports_to not in seen:
            chain.append(node.reports_to)
            seen.add(node.reports_to)
            node = self._nodes.get(node.reports_to)
        return chain

    def nearest_manager(self, employee_id: int) -> int | None:
        """Nearest ancestor holding the manager role, used to denormalize ``manager_id``."""
        for ancestor_id in self.ancestors(employee_id):
            ancestor = self._nodes.get(ancestor_id)
            if ancestor is not None and ancestor.role == Role.MANAGER.value:
                return ancestor_id
        return None

    def resolve_chain(self, employee_id: int) -> dict[str, int | None]:
        """Nearest ancestor for each supervisory level above ``employee_id``.

        Returns a dict with ``head_lt_id``, ``lt_id``, ``alt_id``,
        ``manager_id`` and ``tl_id`` keys; levels missing from the chain map
        to None.
        """
        chain: dict[str, int | None] = {key: None for key in CHAIN_KEYS.values()}
        for ancestor_id in self.ancestors(employee_id):
            ancestor = self._nodes.get(ancestor_id)
            if ancestor is None:
                continue
            key = CHAIN_KEYS.get(ancestor.role)
            if key is not None and chain[key] is None:
                chain[key] = ancestor_id
        return chain
