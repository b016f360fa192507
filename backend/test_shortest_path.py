from archgraph.graph.memory_source import InMemoryGraphSource
from archgraph.graph.types import EdgeType
from archgraph.traversal.shortest_path import shortest_path

from conftest import component, depends, edge, layer, run


def test_scenario_path(scenario):
    result = run(shortest_path(scenario, "comp-a", "comp-c"))

    assert result.found
    assert result.node_ids == ["comp-a", "comp-b", "comp-c"]
    assert [(e.source_id, e.target_id) for e in result.edges] == [
        ("comp-a", "comp-b"),
        ("comp-b", "comp-c"),
    ]
    assert result.length == 2


def test_direction_is_ignored(scenario):
    result = run(shortest_path(scenario, "comp-c", "comp-a"))

    assert result.node_ids == ["comp-c", "comp-b", "comp-a"]


def test_lengths_are_symmetric():
    source = InMemoryGraphSource(
        [component(i) for i in ("a", "b", "c", "d", "e")],
        [
            depends("a", "b"),
            edge("c", "b", EdgeType.WRITES_TO),
            edge("c", "d", EdgeType.DISPATCHES_TO),
            edge("e", "d", EdgeType.ESCALATES_TO),
            edge("a", "e", EdgeType.SANITISES),
        ],
    )

    for x in ("a", "b", "c", "d", "e"):
        for y in ("a", "b", "c", "d", "e"):
            forward = run(shortest_path(source, x, y))
            backward = run(shortest_path(source, y, x))
            assert forward.length == backward.length


def test_containment_is_not_a_relationship_path():
    source = InMemoryGraphSource(
        [layer("layer-1"), component("a", layer="layer-1"), component("b", layer="layer-1")],
        [edge("layer-1", "a", EdgeType.CONTAINS), edge("layer-1", "b", EdgeType.CONTAINS)],
    )

    result = run(shortest_path(source, "a", "b"))

    assert not result.found
    assert result.path == []
    assert result.length == -1


def test_unreachable_is_a_result_not_an_error(scenario):
    result = run(shortest_path(scenario, "comp-a", "layer-1"))

    assert result.to_dict()["found"] is False


def test_absent_endpoints(scenario):
    assert not run(shortest_path(scenario, "ghost", "comp-a")).found
    assert not run(shortest_path(scenario, "comp-a", "ghost")).found
    assert not run(shortest_path(scenario, "ghost", "ghost")).found


def test_same_node_is_a_single_step_path(scenario):
    result = run(shortest_path(scenario, "comp-b", "comp-b"))

    assert result.node_ids == ["comp-b"]
    assert result.length == 0


def test_picks_fewest_hops():
    source = InMemoryGraphSource(
        [component(i) for i in ("s", "m-1", "m-2", "m-3", "t")],
        [depends("s", "m-1"), depends("m-1", "m-2"), depends("m-2", "t"), edge("s", "m-3", EdgeType.GATES), edge("m-3", "t", EdgeType.GATES)],
    )

    assert run(shortest_path(source, "s", "t")).node_ids == ["s", "m-3", "t"]


def test_tie_break_does_not_depend_on_edge_order():
    nodes = [component(i) for i in ("s", "via-x", "via-y", "t")]
    edges = [
        edge("s", "via-y", EdgeType.CONTROLS),
        edge("via-y", "t", EdgeType.CONTROLS),
        edge("s", "via-x", EdgeType.CONTROLS),
        edge("via-x", "t", EdgeType.CONTROLS),
    ]

    first = run(shortest_path(InMemoryGraphSource(nodes, edges), "s", "t"))
    second = run(shortest_path(InMemoryGraphSource(nodes, list(reversed(edges))), "s", "t"))

    assert first.node_ids == second.node_ids == ["s", "via-x", "t"]


def test_dangling_node_on_path_keeps_its_id():
    source = InMemoryGraphSource(
        [component("a"), component("c")],
        [depends("a", "ghost"), depends("ghost", "c")],
    )

    result = run(shortest_path(source, "a", "c"))

    assert [n.to_dict() for n in result.path][1] == {"id": "ghost"}
