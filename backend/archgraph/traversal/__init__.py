"""
Traversal and aggregation engine.

One async function per query; each reads what it needs from a GraphSource
at call time and returns a plain result value.
"""

from archgraph.traversal.bounds import (
    DEFAULT_DEPTH,
    DEFAULT_HOPS,
    MAX_DEPTH,
    MAX_HOPS,
    clamp_depth,
    clamp_hops,
)
from archgraph.traversal.context import ComponentContext, component_context
from archgraph.traversal.dependency_tree import DependencyTree, TreeNode, dependency_tree
from archgraph.traversal.dependents import dependents
from archgraph.traversal.layer_overview import LayerOverview, LayerSummary, layer_overview
from archgraph.traversal.neighbourhood import Neighbourhood, neighbourhood
from archgraph.traversal.results import NodeSummary
from archgraph.traversal.shortest_path import PathResult, shortest_path
from archgraph.traversal.status import (
    ComponentStatus,
    StatusReport,
    components_by_status,
    next_implementable,
    status_report,
)
from archgraph.traversal.topological import OrderResult, implementation_order
