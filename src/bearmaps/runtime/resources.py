# bearmaps/runtime/resources.py
import json
import pickle
import time
from functools import lru_cache

from bearmaps.domain.graph import RoadGraph
from bearmaps.engine.hooks import EngineHooks, NoopHooks
from bearmaps.io.feed import build_graph, records_from_mapping


@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str, hooks: EngineHooks | None = None) -> RoadGraph:
    hooks = hooks or NoopHooks()
    if fmt == "pickle":
        t0 = time.perf_counter()
        with open(file, "rb") as f:
            g = pickle.load(f)
        if not isinstance(g, RoadGraph):
            raise TypeError(f"{file} does not hold a RoadGraph (got {type(g).__name__})")
        hooks.graph_built(
            vertices=len(g), ways=len(g.ways()), pruned=0, ms=(time.perf_counter() - t0) * 1000
        )
        return g
    if fmt == "json":
        with open(file, encoding="utf-8") as f:
            nodes, ways = records_from_mapping(json.load(f))
        return build_graph(nodes, ways, hooks=hooks)
    raise ValueError(f"Unsupported graph fmt {fmt!r}")
