"""
Shortest relationship path between two nodes.

Edges are treated as undirected and CONTAINS edges are skipped: a layer
holding two components does not make them related.

Tie-break: edges are sorted by (source_id, target_id, type) before the
adjacency is built, so among equal-length paths the same one is returned
regardless of the order the source yields edges in.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Edge
from archgraph.traversal.results import NodeSummary, resolve_nodes

logger = logging.getLogger(__name__)

Adjacency = Dict[str, List[Tuple[str, Edge]]]


@dataclass
class PathResult:
    from_id: str
    to_id: str
    path: List[NodeSummary] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.path)

    @property
    def length(self) -> int:
        """Edge count; -1 when no path exists."""
        return len(self.edges) if self.found else -1

    @property
    def node_ids(self) -> List[str]:
        return [n.id for n in self.path]

    def to_dict(self) -> dict:
        return {
            "from": self.from_id,
            "to": self.to_id,
            "found": self.found,
            "length": self.length,
            "path": [n.to_dict() for n in self.path],
            "edges": [e.to_dict() for e in self.edges],
        }


def relationship_adjacency(edges: List[Edge]) -> Adjacency:
    adjacency: Adjacency = {}
    for edge in sorted(edges, key=lambda e: e.key):
        if not edge.type.is_relationship:
            continue
        adjacency.setdefault(edge.source_id, []).append((edge.target_id, edge))
        adjacency.setdefault(edge.target_id, []).append((edge.source_id, edge))
    return adjacency


def bfs_predecessors(
    adjacency: Adjacency,
    from_id: str,
    to_id: str,
) -> Dict[str, Tuple[str, Edge]]:
    """node -> (predecessor, edge) for every node discovered before to_id is dequeued."""
    visited = {from_id}
    parent: Dict[str, Tuple[str, Edge]] = {}
    queue = deque([from_id])

    while queue:
        current = queue.popleft()
        if current == to_id:
            break
        for neighbour, edge in adjacency.get(current, ()):
            if neighbour in visited:
                continue
            visited.add(neighbour)
            parent[neighbour] = (current, edge)
            queue.append(neighbour)
    return parent


def reconstruct(
    parent: Dict[str, Tuple[str, Edge]],
    from_id: str,
    to_id: str,
) -> Tuple[List[str], List[Edge]]:
    ids = [to_id]
    edges: List[Edge] = []
    current = to_id
    while current != from_id:
        previous, edge = parent[current]
        edges.append(edge)
        ids.append(previous)
        current = previous
    ids.reverse()
    edges.reverse()
    return ids, edges


async def shortest_path(source: GraphSource, from_id: str, to_id: str) -> PathResult:
    """
    Unweighted BFS from from_id to to_id.

    Unreachable or unknown endpoints are a normal outcome: found is False
    and the path is empty.
    """
    if from_id == to_id:
        node = await source.get_node(from_id)
        if node is None:
            return PathResult(from_id=from_id, to_id=to_id)
        return PathResult(from_id=from_id, to_id=to_id, path=[NodeSummary.of(from_id, node)])

    adjacency = relationship_adjacency(await source.all_edges())
    parent = bfs_predecessors(adjacency, from_id, to_id)

    if to_id not in parent:
        logger.debug("[ShortestPath] No path %s -> %s", from_id, to_id)
        return PathResult(from_id=from_id, to_id=to_id)

    ids, edges = reconstruct(parent, from_id, to_id)
    nodes = await resolve_nodes(source, ids)
    logger.debug("[ShortestPath] %s -> %s in %d hop(s)", from_id, to_id, len(edges))
    return PathResult(
        from_id=from_id,
        to_id=to_id,
        path=[NodeSummary.of(i, nodes[i]) for i in ids],
        edges=edges,
    )
