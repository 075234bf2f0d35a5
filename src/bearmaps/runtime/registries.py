# runtime/registries.py
from collections.abc import Callable

from bearmaps.app.protocols import NearestVertexLocator
from bearmaps.config.models import (
    GraphByPath,
    LocatorScanModel,
    LocatorUnion,
    LocatorVectorizedModel,
)
from bearmaps.domain.graph import RoadGraph
from bearmaps.domain.locators import ScanLocator, VectorizedLocator
from bearmaps.engine.hooks import EngineHooks
from bearmaps.runtime.resources import load_graph_from_path

LocatorFactory = Callable[[LocatorUnion, RoadGraph], NearestVertexLocator]

_locator_registry: dict[str, LocatorFactory] = {}


# ------------------- Nearest-vertex locators ---------------------------


def register_locator(kind: str):
    def deco(fn: LocatorFactory):
        _locator_registry[kind] = fn
        return fn

    return deco


def make_locator(cfg: LocatorUnion, graph: RoadGraph) -> NearestVertexLocator:
    try:
        factory = _locator_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown locator kind {cfg.kind!r}") from None
    return factory(cfg, graph)


@register_locator("scan")
def _make_scan(cfg: LocatorScanModel, graph):
    return ScanLocator(graph)


@register_locator("vectorized")
def _make_vectorized(cfg: LocatorVectorizedModel, graph):
    return VectorizedLocator(graph)


# ------------------- Graphs ---------------------------


def resolve_graph(
    ref: GraphByPath | None,
    *,
    graph: RoadGraph | None = None,
    hooks: EngineHooks | None = None,
) -> RoadGraph:
    """A prebuilt graph wins over a configured path. Loaded graphs report graph_built to hooks."""
    if graph is not None:
        return graph
    if ref is None:
        raise ValueError("No graph provided")
    if isinstance(ref, GraphByPath):
        try:
            return load_graph_from_path(ref.file, ref.fmt, hooks)
        except FileNotFoundError:
            if ref.must_exist:
                raise
            return _empty_graph()
    raise TypeError(ref)


def _empty_graph() -> RoadGraph:
    g = RoadGraph()
    g.finalize()
    return g
