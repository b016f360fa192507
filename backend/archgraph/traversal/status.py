"""
Status aggregation for a version tag (mvp, v1, ...).

Components are grouped by their derived progress status, and the
"next implementable" frontier is every planned component whose whole
dependency closure is already complete. Each entry carries the tag's
progress and feature sizing so callers can pick what to build next.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Edge, EdgeType, Node, VersionStatus
from archgraph.traversal.dependency_tree import dependency_closure, depends_on_adjacency
from archgraph.traversal.fanout import gather_all
from archgraph.traversal.results import NodeSummary

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "mvp"


@dataclass(frozen=True)
class ComponentStatus:
    summary: NodeSummary
    status: VersionStatus
    progress: int = 0
    total_steps: int = 0
    feature_count: int = 0

    @property
    def id(self) -> str:
        return self.summary.id

    def to_dict(self) -> dict:
        data = self.summary.to_dict()
        data["progress"] = self.progress
        data["total_steps"] = self.total_steps
        data["feature_count"] = self.feature_count
        return data


@dataclass
class StatusReport:
    version: str
    by_status: Dict[VersionStatus, List[ComponentStatus]] = field(
        default_factory=lambda: {status: [] for status in VersionStatus}
    )
    next_implementable: List[ComponentStatus] = field(default_factory=list)

    def ids(self, status: VersionStatus) -> List[str]:
        return [c.id for c in self.by_status[status]]

    def by_status_dict(self) -> dict:
        return {
            status.value: [c.to_dict() for c in members]
            for status, members in self.by_status.items()
        }

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "by_status": self.by_status_dict(),
            "next_implementable": [c.to_dict() for c in self.next_implementable],
        }


async def component_statuses(
    source: GraphSource,
    components: List[Node],
    version: str,
) -> Dict[str, VersionStatus]:
    statuses = await gather_all(*(source.version_status(n.id, version) for n in components))
    return {node.id: status for node, status in zip(components, statuses)}


async def component_status(source: GraphSource, node: Node, version: str) -> ComponentStatus:
    status, versions, features = await gather_all(
        source.version_status(node.id, version),
        source.versions_for_node(node.id),
        source.features_for_node(node.id),
    )
    record = next((v for v in versions if v.version == version), None)
    tagged = [f for f in features if f.version == version]
    return ComponentStatus(
        summary=NodeSummary.of(node.id, node),
        status=status,
        progress=record.progress if record else 0,
        total_steps=sum(f.step_count for f in tagged),
        feature_count=len(tagged),
    )


def build_report(
    version: str,
    nodes: List[Node],
    edges: List[Edge],
    entries: List[ComponentStatus],
) -> StatusReport:
    report = StatusReport(version=version)
    for entry in entries:
        report.by_status[entry.status].append(entry)

    # Layers are structure, not work: a dependency on one is ignored.
    # Dangling targets stay in the adjacency; they have no status and so
    # never count as complete.
    layer_ids = {n.id for n in nodes if n.is_layer}
    adjacency = depends_on_adjacency(
        e for e in edges
        if e.type is EdgeType.DEPENDS_ON and e.target_id not in layer_ids
    )
    statuses = {entry.id: entry.status for entry in entries}
    for entry in entries:
        if entry.status is not VersionStatus.PLANNED:
            continue
        closure = dependency_closure(adjacency, entry.id)
        if all(statuses.get(dep) is VersionStatus.COMPLETE for dep in closure):
            report.next_implementable.append(entry)
    return report


async def status_report(source: GraphSource, version: str = DEFAULT_VERSION) -> StatusReport:
    nodes, edges = await gather_all(source.all_nodes(), source.all_edges())
    components = [n for n in nodes if not n.is_layer]
    entries = await gather_all(*(component_status(source, n, version) for n in components))
    report = build_report(version, nodes, edges, entries)
    logger.debug(
        "[StatusReport] %s: %s, %d next implementable",
        version,
        ", ".join(f"{s.value}={len(m)}" for s, m in report.by_status.items()),
        len(report.next_implementable),
    )
    return report


async def components_by_status(
    source: GraphSource,
    version: str = DEFAULT_VERSION,
) -> Dict[VersionStatus, List[ComponentStatus]]:
    return (await status_report(source, version)).by_status


async def next_implementable(
    source: GraphSource,
    version: str = DEFAULT_VERSION,
) -> List[ComponentStatus]:
    return (await status_report(source, version)).next_implementable
