from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Edge, Feature, Node, Version, VersionStatus


class InMemoryGraphSource(GraphSource):
    """
    GraphSource over plain lists held in memory.

    Used by the HTTP app (fed by the YAML loader) and by the tests. The
    graph is taken as given: dangling edges and unresolved layer references
    are kept so callers can observe degraded output. Run the integrity
    check from archgraph.graph.integrity to reject bad input up front.

    Iteration order is insertion order for every accessor.
    """

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
        versions: Iterable[Version] = (),
        features: Iterable[Feature] = (),
    ):
        self._nodes: Dict[str, Node] = {}
        for node in nodes:
            self._nodes[node.id] = node

        self._edges: List[Edge] = list(edges)
        self._by_source: Dict[str, List[Edge]] = defaultdict(list)
        self._by_target: Dict[str, List[Edge]] = defaultdict(list)
        for edge in self._edges:
            self._by_source[edge.source_id].append(edge)
            self._by_target[edge.target_id].append(edge)

        self._versions: Dict[str, List[Version]] = defaultdict(list)
        self._version_index: Dict[Tuple[str, str], Version] = {}
        for version in versions:
            self._versions[version.node_id].append(version)
            self._version_index[(version.node_id, version.version)] = version

        self._features: Dict[str, List[Feature]] = defaultdict(list)
        for feature in features:
            self._features[feature.node_id].append(feature)

    @property
    def stats(self) -> Dict[str, int]:
        return {
            "nodes": len(self._nodes),
            "edges": len(self._edges),
            "versions": len(self._version_index),
            "features": sum(len(f) for f in self._features.values()),
        }

    async def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    async def node_exists(self, node_id: str) -> bool:
        return node_id in self._nodes

    async def nodes_by_layer(self, layer_id: str) -> List[Node]:
        return [n for n in self._nodes.values() if n.layer == layer_id]

    async def edges_from_source(self, node_id: str) -> List[Edge]:
        return list(self._by_source.get(node_id, ()))

    async def edges_to_target(self, node_id: str) -> List[Edge]:
        return list(self._by_target.get(node_id, ()))

    async def all_nodes(self) -> List[Node]:
        return list(self._nodes.values())

    async def all_edges(self) -> List[Edge]:
        return list(self._edges)

    async def version_status(self, node_id: str, version: str) -> VersionStatus:
        record = self._version_index.get((node_id, version))
        if record is None:
            return VersionStatus.PLANNED
        return record.status

    async def versions_for_node(self, node_id: str) -> List[Version]:
        return list(self._versions.get(node_id, ()))

    async def features_for_node(self, node_id: str) -> List[Feature]:
        return list(self._features.get(node_id, ()))
