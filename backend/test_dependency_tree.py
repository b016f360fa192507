from archgraph.graph.memory_source import InMemoryGraphSource
from archgraph.graph.types import EdgeType
from archgraph.traversal.dependency_tree import (
    dependency_closure,
    dependency_tree,
    depends_on_adjacency,
)

from conftest import CountingSource, chain_source, component, depends, edge, run


def test_scenario_tree_two_levels(scenario):
    tree = run(dependency_tree(scenario, "comp-a", depth=2))

    assert tree.found
    assert tree.to_dict()["dependencies"] == [
        {
            "id": "comp-b",
            "name": "Comp B",
            "type": "component",
            "dependencies": [
                {"id": "comp-c", "name": "Comp C", "type": "component", "dependencies": []},
            ],
        },
    ]


def test_serialized_tree_is_rooted_at_the_queried_node(scenario):
    data = run(dependency_tree(scenario, "comp-b", depth=1)).to_dict()

    assert data == {
        "id": "comp-b",
        "name": "Comp B",
        "type": "component",
        "found": True,
        "depth": 1,
        "dependencies": [
            {"id": "comp-c", "name": "Comp C", "type": "component", "dependencies": []},
        ],
    }


def test_depth_one_lists_direct_dependencies_only(scenario):
    tree = run(dependency_tree(scenario, "comp-a", depth=1))

    assert [child.id for child in tree.dependencies] == ["comp-b"]
    assert tree.dependencies[0].dependencies == []


def test_tree_never_deeper_than_depth():
    source = chain_source("n-1", "n-2", "n-3", "n-4", "n-5", "n-6")

    for depth in range(1, 6):
        tree = run(dependency_tree(source, "n-1", depth=depth))
        assert tree.root.height == depth


def test_same_tree_beyond_graph_diameter():
    source = chain_source("n-1", "n-2", "n-3")

    shallow = run(dependency_tree(source, "n-1", depth=4))
    deep = run(dependency_tree(source, "n-1", depth=5))

    assert shallow.root == deep.root
    assert shallow.root.height == 2


def test_cycle_terminates_branch():
    source = InMemoryGraphSource(
        [component("a"), component("b")],
        [depends("a", "b"), depends("b", "a")],
    )

    tree = run(dependency_tree(source, "a", depth=10))

    assert [c.id for c in tree.dependencies] == ["b"]
    assert tree.dependencies[0].dependencies == []


def test_root_never_listed_as_its_own_child():
    source = InMemoryGraphSource([component("a"), component("b")], [depends("a", "a"), depends("a", "b")])

    tree = run(dependency_tree(source, "a", depth=3))

    assert [c.id for c in tree.dependencies] == ["b"]


def test_diamond_shows_shared_dependency_under_each_parent():
    source = CountingSource(
        [component(i) for i in ("a", "b", "c", "d")],
        [depends("a", "b"), depends("a", "c"), depends("b", "d"), depends("c", "d")],
    )

    tree = run(dependency_tree(source, "a", depth=3))

    b, c = tree.dependencies
    assert [x.id for x in b.dependencies] == ["d"]
    assert [x.id for x in c.dependencies] == ["d"]
    # d's edges are read once even though it is expanded twice
    assert source.edge_reads["d"] == 1


def test_missing_root_is_empty_tree():
    tree = run(dependency_tree(InMemoryGraphSource(), "ghost", depth=3))

    assert not tree.found
    assert tree.to_dict() == {"id": "ghost", "found": False, "depth": 3, "dependencies": []}


def test_invalid_depth_falls_back_to_default():
    source = chain_source("n-1", "n-2", "n-3")

    assert run(dependency_tree(source, "n-1", depth=0)).root.height == 1
    assert run(dependency_tree(source, "n-1", depth=-4)).root.height == 1


def test_only_depends_on_edges_are_followed():
    source = InMemoryGraphSource(
        [component("a"), component("b"), component("db")],
        [depends("a", "b"), edge("a", "db", EdgeType.READS_FROM), edge("b", "a", EdgeType.CONTROLS)],
    )

    tree = run(dependency_tree(source, "a", depth=2))

    assert [c.id for c in tree.dependencies] == ["b"]
    assert tree.dependencies[0].dependencies == []


def test_dangling_dependency_is_an_id_only_leaf():
    source = InMemoryGraphSource([component("a")], [depends("a", "missing"), depends("missing", "a")])

    tree = run(dependency_tree(source, "a", depth=3))

    assert tree.to_dict()["dependencies"] == [{"id": "missing", "dependencies": []}]


def test_no_dependencies_is_not_an_error(scenario):
    tree = run(dependency_tree(scenario, "comp-c", depth=5))

    assert tree.found
    assert tree.dependencies == []


def test_dependency_closure_is_unbounded():
    adjacency = depends_on_adjacency([depends("a", "b"), depends("b", "c"), depends("c", "d")])

    assert dependency_closure(adjacency, "a") == {"b", "c", "d"}
    assert dependency_closure(adjacency, "d") == set()


def test_dependency_closure_includes_start_only_on_cycle():
    adjacency = depends_on_adjacency([depends("a", "b"), depends("b", "a")])

    assert dependency_closure(adjacency, "a") == {"a", "b"}


def test_adjacency_can_be_restricted_to_node_set():
    edges = [depends("a", "b"), depends("a", "ghost"), edge("a", "c", EdgeType.SEQUENCE)]

    assert depends_on_adjacency(edges, {"a", "b"}) == {"a": ["b"]}
    assert depends_on_adjacency(edges) == {"a": ["b", "ghost"]}
