# bearmaps/domain/pathfinding.py
import heapq
import time
from dataclasses import dataclass
from enum import Enum

from bearmaps.domain.errors import UnknownVertexError
from bearmaps.domain.graph import RoadGraph
from bearmaps.engine.hooks import EngineHooks, NoopHooks


class SearchStatus(Enum):
    FOUND = "found"
    UNREACHABLE = "unreachable"
    EXHAUSTED = "exhausted"  # hit max_expansions


@dataclass
class Scratch:
    cost: float  # best known distance from source
    estimate: float  # straight-line distance to target
    parent: int | None


@dataclass(frozen=True)
class PathResult:
    status: SearchStatus
    vertices: tuple[int, ...]
    cost: float
    expanded: int

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND


def _reconstruct(scratch: dict[int, Scratch], target: int) -> tuple[int, ...]:
    path = []
    v: int | None = target
    while v is not None:
        path.append(v)
        v = scratch[v].parent
    path.reverse()
    return tuple(path)


def astar(
    graph: RoadGraph,
    source: int,
    target: int,
    *,
    max_expansions: int | None = None,
    hooks: EngineHooks | None = None,
) -> PathResult:
    """
    A* over road distance with a great-circle heuristic.

    Search state lives in a local map keyed by vertex id, so calls are
    independent of each other. Frontier entries are (priority, vertex_id)
    tuples: equal priorities pop the smaller id first.
    """
    for v in (source, target):
        if v not in graph:
            raise UnknownVertexError(v)
    hooks = hooks or NoopHooks()
    t0 = time.perf_counter()
    hooks.search_start(source=source, target=target)

    def done(status: SearchStatus, path: tuple[int, ...], cost: float, expanded: int):
        res = PathResult(status, path, cost, expanded)
        hooks.search_end(
            status=status.value,
            expanded=expanded,
            cost=cost,
            ms=(time.perf_counter() - t0) * 1000,
        )
        return res

    if source == target:
        return done(SearchStatus.FOUND, (source,), 0.0, 0)

    h0 = graph.distance(source, target)
    scratch: dict[int, Scratch] = {source: Scratch(0.0, h0, None)}
    frontier: list[tuple[float, int]] = [(h0, source)]
    visited: set[int] = set()
    expanded = 0

    while frontier:
        _, v = heapq.heappop(frontier)
        if v in visited:
            continue  # stale entry
        visited.add(v)
        expanded += 1

        if v == target:
            return done(SearchStatus.FOUND, _reconstruct(scratch, v), scratch[v].cost, expanded)
        if max_expansions is not None and expanded >= max_expansions:
            return done(SearchStatus.EXHAUSTED, (), float("inf"), expanded)

        base = scratch[v].cost
        for w in graph.adjacent(v):
            if w in visited:
                continue
            cost = base + graph.distance(v, w)
            rec = scratch.get(w)
            if rec is None:
                rec = scratch[w] = Scratch(float("inf"), graph.distance(w, target), None)
            if cost < rec.cost:
                rec.cost, rec.parent = cost, v
                heapq.heappush(frontier, (cost + rec.estimate, w))

    return done(SearchStatus.UNREACHABLE, (), float("inf"), expanded)


class AStarPathFinder:
    def __init__(
        self,
        graph: RoadGraph,
        *,
        max_expansions: int | None = None,
        hooks: EngineHooks | None = None,
    ):
        self.G, self.max_expansions, self.hooks = graph, max_expansions, hooks

    def find(self, source: int, target: int) -> PathResult:
        return astar(
            self.G, source, target, max_expansions=self.max_expansions, hooks=self.hooks
        )
