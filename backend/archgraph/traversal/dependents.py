import logging
from typing import List

from archgraph.graph.source import GraphSource
from archgraph.graph.types import EdgeType
from archgraph.traversal.results import NodeSummary, resolve_summaries

logger = logging.getLogger(__name__)


async def dependents(source: GraphSource, node_id: str) -> List[NodeSummary]:
    """
    Components that depend directly on node_id (inbound DEPENDS_ON, one hop).

    Deeper reverse traversal is deliberately not offered. A source id with
    no node behind it comes back as an id-only summary.
    """
    in_edges = await source.edges_to_target(node_id)
    source_ids = [e.source_id for e in in_edges if e.type is EdgeType.DEPENDS_ON]
    summaries = await resolve_summaries(source, source_ids)

    dangling = [s.id for s in summaries if s.is_dangling]
    if dangling:
        logger.warning(
            "[Dependents] %s has dependents with no node: %s",
            node_id, ", ".join(dangling),
        )
    return summaries
