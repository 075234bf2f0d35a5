# bearmaps/services/routing.py
from dataclasses import dataclass

from bearmaps.app.protocols import NearestVertexLocator, PathFinder
from bearmaps.domain.entities.geography import Point
from bearmaps.domain.graph import RoadGraph
from bearmaps.domain.pathfinding import SearchStatus


@dataclass(frozen=True)
class Route:
    status: SearchStatus
    vertex_ids: tuple[int, ...]
    points: tuple[Point, ...]
    bearings: tuple[float, ...]  # bearings[i]: heading from step i to step i + 1
    distance_mi: float

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND


class RoutingService:
    """Snaps both ends to graph vertices, then asks the path finder."""

    def __init__(self, graph: RoadGraph, *, locator: NearestVertexLocator, finder: PathFinder):
        self.G, self.locator, self.finder = graph, locator, finder

    def shortest_path(
        self, start_lon: float, start_lat: float, dest_lon: float, dest_lat: float
    ) -> Route:
        source = self.locator.closest(start_lon, start_lat)
        target = self.locator.closest(dest_lon, dest_lat)
        res = self.finder.find(source, target)
        if not res.found:
            return Route(res.status, (), (), (), float("inf"))
        ids = res.vertices
        return Route(
            status=res.status,
            vertex_ids=ids,
            points=tuple(self.G.point(v) for v in ids),
            bearings=tuple(self.G.bearing(a, b) for a, b in zip(ids, ids[1:])),
            distance_mi=res.cost,
        )
