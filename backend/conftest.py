import asyncio
from collections import Counter

import pytest

from archgraph.graph.memory_source import InMemoryGraphSource
from archgraph.graph.types import Edge, EdgeType, Node, NodeType, Version, VersionStatus


def run(coro):
    return asyncio.run(coro)


def layer(node_id, sort_order=0):
    return Node(id=node_id, name=node_id.replace("-", " ").title(), type=NodeType.LAYER, sort_order=sort_order)


def component(node_id, layer=None, type=NodeType.COMPONENT):
    return Node(id=node_id, name=node_id.replace("-", " ").title(), type=type, layer=layer)


def depends(source_id, target_id):
    return Edge(source_id=source_id, target_id=target_id, type=EdgeType.DEPENDS_ON)


def edge(source_id, target_id, type):
    return Edge(source_id=source_id, target_id=target_id, type=type)


def version(node_id, tag, status, progress=None):
    if progress is None:
        progress = {VersionStatus.COMPLETE: 100, VersionStatus.IN_PROGRESS: 50}.get(status, 0)
    return Version(node_id=node_id, version=tag, progress=progress, status=status)


def chain_source(*ids):
    """ids[0] DEPENDS_ON ids[1] DEPENDS_ON ids[2] ..."""
    return InMemoryGraphSource(
        [component(i) for i in ids],
        [depends(a, b) for a, b in zip(ids, ids[1:])],
    )


class CountingSource(InMemoryGraphSource):
    """Records how many times each id was asked for its outgoing edges."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.edge_reads = Counter()

    async def edges_from_source(self, node_id):
        self.edge_reads[node_id] += 1
        return await super().edges_from_source(node_id)


@pytest.fixture
def scenario():
    """layer-1 CONTAINS comp-a; comp-a -> comp-b -> comp-c (DEPENDS_ON)."""
    return InMemoryGraphSource(
        [
            layer("layer-1"),
            component("comp-a", layer="layer-1"),
            component("comp-b"),
            component("comp-c"),
        ],
        [
            edge("layer-1", "comp-a", EdgeType.CONTAINS),
            depends("comp-a", "comp-b"),
            depends("comp-b", "comp-c"),
        ],
    )
