"""
Graph integrity checks run before a graph is served.

Catches:
- Duplicate node IDs
- Duplicate typed edges (same source, target and type)
- Edges pointing at missing nodes (tolerated, warned)
- Layer references that are missing or point at a non-layer node
- Components contained by more than one layer
- Self-dependencies
- Versions / features attached to unknown nodes
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from archgraph.graph.errors import GraphDataError
from archgraph.graph.types import Edge, EdgeType, Feature, Node, Version

logger = logging.getLogger(__name__)


class IssueSeverity(Enum):
    ERROR = "error"      # graph must not be served
    WARNING = "warning"  # served, queries degrade gracefully


@dataclass
class IntegrityIssue:
    severity: IssueSeverity
    code: str
    message: str
    node_id: Optional[str] = None
    edge_info: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "edge_info": self.edge_info,
        }


@dataclass
class IntegrityReport:
    issues: List[IntegrityIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


def _edge_info(edge: Edge) -> str:
    return f"{edge.source_id} -[{edge.type.value}]-> {edge.target_id}"


def check_graph(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    versions: Iterable[Version] = (),
    features: Iterable[Feature] = (),
) -> IntegrityReport:
    nodes = list(nodes)
    edges = list(edges)
    issues: List[IntegrityIssue] = []

    seen_ids: Dict[str, int] = defaultdict(int)
    for node in nodes:
        seen_ids[node.id] += 1
    for node_id, count in seen_ids.items():
        if count > 1:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.ERROR,
                code="DUPLICATE_NODE_ID",
                message=f"Node ID '{node_id}' appears {count} times",
                node_id=node_id,
            ))

    by_id = {node.id: node for node in nodes}

    for node in nodes:
        if not node.layer:
            continue
        layer = by_id.get(node.layer)
        if layer is None:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.WARNING,
                code="MISSING_LAYER",
                message=f"Node '{node.id}' references missing layer '{node.layer}'",
                node_id=node.id,
            ))
        elif not layer.is_layer:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.ERROR,
                code="LAYER_NOT_A_LAYER",
                message=(
                    f"Node '{node.id}' references '{node.layer}' as its layer, "
                    f"but that node has type '{layer.type.value}'"
                ),
                node_id=node.id,
            ))

    edge_counts: Dict[Tuple[str, str, str], int] = defaultdict(int)
    parents: Dict[str, List[str]] = defaultdict(list)

    for edge in edges:
        edge_counts[edge.key] += 1

        if edge.source_id not in by_id:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.WARNING,
                code="DANGLING_SOURCE",
                message=f"Edge references missing source node '{edge.source_id}'",
                edge_info=_edge_info(edge),
            ))
        if edge.target_id not in by_id:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.WARNING,
                code="DANGLING_TARGET",
                message=f"Edge references missing target node '{edge.target_id}'",
                edge_info=_edge_info(edge),
            ))

        if edge.type is EdgeType.CONTAINS:
            parents[edge.target_id].append(edge.source_id)
        elif edge.type is EdgeType.DEPENDS_ON and edge.source_id == edge.target_id:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.WARNING,
                code="SELF_DEPENDENCY",
                message=f"Node '{edge.source_id}' depends on itself",
                node_id=edge.source_id,
                edge_info=_edge_info(edge),
            ))

    for (source_id, target_id, edge_type), count in edge_counts.items():
        if count > 1:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.ERROR,
                code="DUPLICATE_EDGE",
                message=f"Edge '{source_id}' -[{edge_type}]-> '{target_id}' appears {count} times",
                edge_info=f"{source_id} -[{edge_type}]-> {target_id}",
            ))

    for child_id, parent_ids in parents.items():
        if len(parent_ids) > 1:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.WARNING,
                code="MULTIPLE_CONTAINERS",
                message=f"Node '{child_id}' is contained by {', '.join(sorted(parent_ids))}",
                node_id=child_id,
            ))

    for version in versions:
        if version.node_id not in by_id:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.WARNING,
                code="ORPHANED_VERSION",
                message=f"Version '{version.version}' belongs to missing node '{version.node_id}'",
                node_id=version.node_id,
            ))
    for feature in features:
        if feature.node_id not in by_id:
            issues.append(IntegrityIssue(
                severity=IssueSeverity.WARNING,
                code="ORPHANED_FEATURE",
                message=f"Feature '{feature.filename}' belongs to missing node '{feature.node_id}'",
                node_id=feature.node_id,
            ))

    report = IntegrityReport(issues=issues)
    logger.debug(
        "[Integrity] %d nodes, %d edges: %d errors, %d warnings",
        len(nodes), len(edges), len(report.errors), len(report.warnings),
    )
    return report


def raise_on_errors(report: IntegrityReport) -> None:
    """Raise GraphDataError if the report holds any error-level issue."""
    if not report.is_valid:
        raise GraphDataError(report.errors)
