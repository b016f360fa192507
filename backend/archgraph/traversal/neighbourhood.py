"""
N-hop neighbourhood: the local subgraph around a component.

Every edge type counts and direction is ignored, so one hop reaches
anything the node points at or is pointed at by.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Edge
from archgraph.traversal.bounds import DEFAULT_HOPS, clamp_hops
from archgraph.traversal.fanout import gather_all
from archgraph.traversal.results import NodeSummary, resolve_nodes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NeighbourNode:
    summary: NodeSummary
    distance: int

    @property
    def id(self) -> str:
        return self.summary.id

    def to_dict(self) -> dict:
        data = self.summary.to_dict()
        data["distance"] = self.distance
        return data


@dataclass
class Neighbourhood:
    node_id: str
    hops: int
    root: Optional[NodeSummary] = None
    nodes: List[NeighbourNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.root is not None

    def distances(self) -> Dict[str, int]:
        return {n.id: n.distance for n in self.nodes}

    def to_dict(self) -> dict:
        return {
            "id": self.node_id,
            "found": self.found,
            "hops": self.hops,
            "root": self.root.to_dict() if self.root else None,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


async def _incident_edges(source: GraphSource, node_id: str) -> Tuple[str, List[Edge]]:
    outgoing, incoming = await gather_all(
        source.edges_from_source(node_id),
        source.edges_to_target(node_id),
    )
    return node_id, outgoing + incoming


async def neighbourhood(
    source: GraphSource,
    node_id: str,
    hops: int = DEFAULT_HOPS,
) -> Neighbourhood:
    """
    BFS out to `hops` over the undirected union of all edges.

    A node's distance is the hop at which it was first reached. The edge
    list holds every edge whose endpoints were both visited, the root
    included, each once.
    """
    hops = clamp_hops(hops)
    root_node = await source.get_node(node_id)
    if root_node is None:
        logger.debug("[Neighbourhood] Root '%s' not found", node_id)
        return Neighbourhood(node_id=node_id, hops=hops)

    distance: Dict[str, int] = {node_id: 0}
    seen_edges: Dict[Tuple[str, str, str], Edge] = {}
    frontier = [node_id]

    for hop in range(1, hops + 1):
        if not frontier:
            break
        incident = await gather_all(*(_incident_edges(source, i) for i in frontier))
        next_frontier: List[str] = []
        for current, edges in incident:
            for edge in edges:
                seen_edges.setdefault(edge.key, edge)
                neighbour = edge.target_id if edge.source_id == current else edge.source_id
                if neighbour not in distance:
                    distance[neighbour] = hop
                    next_frontier.append(neighbour)
        frontier = next_frontier

    # Edges between two nodes on the outermost ring were never fetched.
    if frontier:
        outer: Set[str] = set(frontier)
        outgoing = await gather_all(*(source.edges_from_source(i) for i in frontier))
        for edges in outgoing:
            for edge in edges:
                if edge.target_id in outer:
                    seen_edges.setdefault(edge.key, edge)

    visited = set(distance)
    edges = [
        e for e in seen_edges.values()
        if e.source_id in visited and e.target_id in visited
    ]

    reached = sorted(
        (i for i in distance if i != node_id),
        key=lambda i: (distance[i], i),
    )
    nodes = await resolve_nodes(source, reached)
    result = Neighbourhood(
        node_id=node_id,
        hops=hops,
        root=NodeSummary.of(node_id, root_node),
        nodes=[NeighbourNode(NodeSummary.of(i, nodes[i]), distance[i]) for i in reached],
        edges=edges,
    )
    logger.debug(
        "[Neighbourhood] %s within %d hop(s): %d node(s), %d edge(s)",
        node_id, hops, len(result.nodes), len(edges),
    )
    return result
