# bearmaps/io/feed.py
"""Records handed over by the map decoder, and graph assembly from them."""

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from bearmaps.domain.graph import RoadGraph
from bearmaps.engine.hooks import EngineHooks, NoopHooks


@dataclass(frozen=True)
class VertexRecord:
    id: int
    lon: float
    lat: float


@dataclass(frozen=True)
class WayRecord:
    id: int
    refs: tuple[int, ...]


def build_graph(
    vertices: Iterable[VertexRecord],
    ways: Iterable[WayRecord],
    *,
    hooks: EngineHooks | None = None,
) -> RoadGraph:
    """Load every vertex and way, then finalize. Feed order does not matter."""
    hooks = hooks or NoopHooks()
    t0 = time.perf_counter()
    g = RoadGraph()
    g.load_vertices(vertices)
    n_ways = g.load_ways(ways)
    pruned = g.finalize()
    hooks.graph_built(
        vertices=len(g), ways=n_ways, pruned=pruned, ms=(time.perf_counter() - t0) * 1000
    )
    return g


def records_from_mapping(doc: Mapping) -> tuple[list[VertexRecord], list[WayRecord]]:
    """
    Parse {"nodes": [{"id", "lon", "lat"}, ...], "ways": [{"id", "refs"}, ...]}.
    """
    try:
        nodes = [VertexRecord(int(n["id"]), float(n["lon"]), float(n["lat"])) for n in doc["nodes"]]
        ways = [
            WayRecord(int(w["id"]), tuple(int(r) for r in w["refs"])) for w in doc.get("ways", ())
        ]
    except (KeyError, TypeError) as e:
        raise ValueError(f"malformed graph feed: {e!r}") from e
    return nodes, ways
