import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from archgraph import config
from archgraph.api.schemas import CycleConflictResponse, ErrorResponse, HealthResponse
from archgraph.graph.source import GraphSource
from archgraph.traversal import (
    clamp_depth,
    clamp_hops,
    component_context,
    dependency_tree,
    dependents,
    implementation_order,
    layer_overview,
    neighbourhood,
    shortest_path,
    status_report,
)

logger = logging.getLogger(__name__)

router = APIRouter()

HTML_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(value: str) -> str:
    return HTML_TAG_RE.sub("", value)


def get_graph_source(request: Request) -> GraphSource:
    return request.app.state.graph_source


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _not_found(node_id: str) -> JSONResponse:
    return _error(404, f"Node not found: {node_id}")


def _version(version: Optional[str]) -> str:
    return strip_html(version) if version else config.DEFAULT_VERSION


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, source: GraphSource = Depends(get_graph_source)):
    nodes = await source.all_nodes()
    edges = await source.all_edges()
    return HealthResponse(
        status="ok",
        nodes=len(nodes),
        edges=len(edges),
        graph_file=getattr(request.app.state, "graph_file", None),
    )


# ============================
# Per-component queries
# ============================

@router.get("/api/components/{node_id}/dependencies")
async def get_dependencies(
    node_id: str,
    depth: Optional[str] = None,
    source: GraphSource = Depends(get_graph_source),
):
    node_id = strip_html(node_id)
    if not await source.node_exists(node_id):
        return _not_found(node_id)
    tree = await dependency_tree(source, node_id, clamp_depth(depth))
    return tree.to_dict()


@router.get("/api/components/{node_id}/dependents")
async def get_dependents(node_id: str, source: GraphSource = Depends(get_graph_source)):
    node_id = strip_html(node_id)
    if not await source.node_exists(node_id):
        return _not_found(node_id)
    result = await dependents(source, node_id)
    return {"id": node_id, "dependents": [n.to_dict() for n in result]}


@router.get("/api/components/{node_id}/neighbourhood")
async def get_neighbourhood(
    node_id: str,
    hops: Optional[str] = None,
    source: GraphSource = Depends(get_graph_source),
):
    node_id = strip_html(node_id)
    if not await source.node_exists(node_id):
        return _not_found(node_id)
    result = await neighbourhood(source, node_id, clamp_hops(hops))
    return result.to_dict()


@router.get("/api/components/{node_id}/context")
async def get_context(node_id: str, source: GraphSource = Depends(get_graph_source)):
    node_id = strip_html(node_id)
    context = await component_context(source, node_id)
    if not context.found:
        return _not_found(node_id)
    return context.to_dict()


# ============================
# Whole-graph queries
# ============================

@router.get("/api/graph/path")
async def get_path(
    from_id: Optional[str] = Query(default=None, alias="from"),
    to_id: Optional[str] = Query(default=None, alias="to"),
    source: GraphSource = Depends(get_graph_source),
):
    if not from_id or not to_id:
        return _error(400, "Missing required query parameters: from, to")
    result = await shortest_path(source, strip_html(from_id), strip_html(to_id))
    return result.to_dict()


@router.get("/api/graph/implementation-order")
async def get_implementation_order(source: GraphSource = Depends(get_graph_source)):
    result = await implementation_order(source)
    if result.has_cycle:
        return JSONResponse(
            status_code=409,
            content=CycleConflictResponse(cycle=result.cycle).model_dump(),
        )
    return {"order": result.order}


@router.get("/api/graph/components-by-status")
async def get_components_by_status(
    version: Optional[str] = None,
    source: GraphSource = Depends(get_graph_source),
):
    report = await status_report(source, _version(version))
    return {"version": report.version, **report.by_status_dict()}


@router.get("/api/graph/next-implementable")
async def get_next_implementable(
    version: Optional[str] = None,
    source: GraphSource = Depends(get_graph_source),
):
    report = await status_report(source, _version(version))
    return {
        "version": report.version,
        "components": [n.to_dict() for n in report.next_implementable],
    }


@router.get("/api/graph/status")
async def get_status_report(
    version: Optional[str] = None,
    source: GraphSource = Depends(get_graph_source),
):
    report = await status_report(source, _version(version))
    return report.to_dict()


@router.get("/api/graph/layer-overview")
async def get_layer_overview(
    version: Optional[str] = None,
    source: GraphSource = Depends(get_graph_source),
):
    overview = await layer_overview(source, _version(version))
    return overview.to_dict()
