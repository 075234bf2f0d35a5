import numpy as np

from bearmaps.domain import geomath
from bearmaps.domain.errors import EmptyGraphError
from bearmaps.domain.graph import RoadGraph


class ScanLocator:
    """Plain linear scan; delegates to RoadGraph.closest."""

    def __init__(self, graph: RoadGraph):
        self.G = graph

    def closest(self, lon: float, lat: float) -> int:
        return self.G.closest(lon, lat)


class VectorizedLocator:
    """
    Nearest vertex over numpy coordinate arrays.

    Arrays are snapshotted at construction, so build it from a finalized
    graph. argmin returns the first minimum, which keeps the
    earliest-inserted tie-break of RoadGraph.closest.
    """

    def __init__(self, graph: RoadGraph):
        ids = graph.vertices()
        self._ids = np.asarray(ids, dtype=np.int64)
        self._lons = np.fromiter((graph.lon(v) for v in ids), dtype=float, count=len(ids))
        self._lats = np.fromiter((graph.lat(v) for v in ids), dtype=float, count=len(ids))

    def __len__(self) -> int:
        return len(self._ids)

    def closest(self, lon: float, lat: float) -> int:
        if not len(self._ids):
            raise EmptyGraphError("closest() on an empty graph")
        d = geomath.distances(lon, lat, self._lons, self._lats)
        if np.isnan(d).all():
            raise ValueError(f"no vertex is comparable to ({lon!r}, {lat!r})")
        return int(self._ids[np.nanargmin(d)])
