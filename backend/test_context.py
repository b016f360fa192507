import asyncio

import pytest

from archgraph.graph.errors import GraphSourceError
from archgraph.graph.memory_source import InMemoryGraphSource
from archgraph.graph.types import EdgeType, Feature, VersionStatus
from archgraph.traversal.context import component_context

from conftest import component, depends, edge, layer, run, version


def context_source(cls=InMemoryGraphSource):
    return cls(
        [
            layer("core"),
            component("engine", layer="core"),
            component("parser", layer="core"),
            component("planner", layer="core"),
            component("store"),
            component("cli"),
        ],
        [
            edge("core", "engine", EdgeType.CONTAINS),
            depends("engine", "store"),
            depends("engine", "ghost"),
            depends("cli", "engine"),
            edge("engine", "parser", EdgeType.SEQUENCE),
        ],
        [
            version("engine", "mvp", VersionStatus.IN_PROGRESS, progress=40),
            version("engine", "v1", VersionStatus.PLANNED),
        ],
        [
            Feature(node_id="engine", version="mvp", filename="01-scan.md", title="Scan", step_count=3),
            Feature(node_id="engine", version="mvp", filename="02-eval.md", title="Eval", step_count=5),
            Feature(node_id="engine", version="v1", filename="01-jit.md", title="JIT", step_count=2),
            Feature(node_id="parser", version="mvp", filename="01-lex.md", title="Lex", step_count=9),
        ],
    )


def test_missing_component_is_not_found():
    result = run(component_context(context_source(), "ghost"))

    assert not result.found
    assert result.to_dict() == {"id": "ghost", "found": False}


def test_dependencies_and_dependents():
    result = run(component_context(context_source(), "engine"))

    assert [n.to_dict() for n in result.dependencies] == [
        {"id": "store", "name": "Store", "type": "component"},
        {"id": "ghost"},
    ]
    assert [n.id for n in result.dependents] == ["cli"]


def test_layer_and_siblings_exclude_the_node_itself():
    result = run(component_context(context_source(), "engine"))

    assert result.layer.id == "core"
    assert [n.id for n in result.siblings] == ["parser", "planner"]


def test_no_layer_means_no_siblings():
    result = run(component_context(context_source(), "store"))

    assert result.layer is None
    assert result.siblings == []
    assert result.to_dict()["layer"] is None


def test_features_are_grouped_by_version():
    result = run(component_context(context_source(), "engine"))

    assert {tag: [f.filename for f in fs] for tag, fs in result.features.items()} == {
        "mvp": ["01-scan.md", "02-eval.md"],
        "v1": ["01-jit.md"],
    }


def test_progress_per_version():
    progress = run(component_context(context_source(), "engine")).progress

    assert progress["mvp"] == {"total_steps": 8, "feature_count": 2, "status": "in-progress", "progress": 40}
    assert progress["v1"] == {"total_steps": 2, "feature_count": 1, "status": "planned", "progress": 0}


def test_serialized_shape():
    data = run(component_context(context_source(), "engine")).to_dict()

    assert data["found"] is True
    assert data["component"]["layer"] == "core"
    assert data["features"]["v1"] == [{"filename": "01-jit.md", "title": "JIT", "step_count": 2}]
    assert set(data) == {
        "id", "found", "component", "versions", "features",
        "dependencies", "dependents", "layer", "siblings", "progress",
    }


class FailingFeatureSource(InMemoryGraphSource):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.slow_read_finished = False

    async def versions_for_node(self, node_id):
        await asyncio.sleep(5)
        self.slow_read_finished = True
        return await super().versions_for_node(node_id)

    async def features_for_node(self, node_id):
        raise GraphSourceError("feature store unavailable")


def test_failed_read_propagates_and_cancels_the_rest():
    source = context_source(FailingFeatureSource)

    with pytest.raises(GraphSourceError, match="feature store unavailable"):
        run(component_context(source, "engine"))

    assert not source.slow_read_finished
