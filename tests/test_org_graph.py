from services.org_graph import OrgGraph, OrgNode
from tests.conftest import ORG


def build_graph() -> OrgGraph:
    return OrgGraph(
        OrgNode(id=emp_id, role=role, reports_to=reports_to, application_name=app)
        for emp_id, _, role, reports_to, _, app in ORG
    )


def test_subtree_includes_root_and_all_descendants():
    graph = build_graph()

    assert graph.subtree(10) == {10, 20, 21, 22}
    assert graph.subtree(3) == {3, 10, 20, 21, 22, 30, 31}
    assert graph.descendants(10) == {20, 21, 22}


def test_subtree_of_unknown_root_is_empty():
    assert build_graph().subtree(999) == set()


def test_direct_reports():
    graph = build_graph()

    assert graph.direct_reports(20) == {21, 22}
    assert graph.direct_reports(21) == set()


def test_ancestors_are_nearest_first():
    assert build_graph().ancestors(21) == [20, 10, 3, 2, 1]


def test_resolve_chain_maps_each_level():
    chain = build_graph().resolve_chain(21)

    assert chain == {
        "head_lt_id": 1,
        "lt_id": 2,
        "alt_id": 3,
        "manager_id": 10,
        "tl_id": 20,
    }


def test_resolve_chain_for_top_of_tree_is_empty():
    chain = build_graph().resolve_chain(1)

    assert set(chain.values()) == {None}


def test_nearest_manager():
    graph = build_graph()

    assert graph.nearest_manager(21) == 10
    assert graph.nearest_manager(31) == 30
    assert graph.nearest_manager(3) is None


def test_cyclic_edges_terminate():
    graph = OrgGraph([
        OrgNode(id=1, role="manager", reports_to=2),
        OrgNode(id=2, role="manager", reports_to=1),
    ])

    assert graph.subtree(1) == {1, 2}
    assert graph.ancestors(1) == [2]


def test_from_employees_lowercases_roles(org):
    graph = OrgGraph.from_employees([org[10], org[20]])

    assert graph.get(10).role == "manager"
    assert 20 in graph
    assert len(graph) == 2
