"""
Graph model and the read-only source the traversal engine queries.
"""

from archgraph.graph.errors import ArchGraphError, GraphDataError, GraphSourceError
from archgraph.graph.memory_source import InMemoryGraphSource
from archgraph.graph.source import GraphSource
from archgraph.graph.types import (
    Edge,
    EdgeType,
    Feature,
    Node,
    NodeType,
    Version,
    VersionStatus,
)
