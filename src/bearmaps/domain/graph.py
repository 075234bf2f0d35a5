# bearmaps/domain/graph.py
from collections.abc import Iterable, Sequence

from bearmaps.domain import geomath
from bearmaps.domain.entities.geography import Point, Vertex, Way
from bearmaps.domain.errors import EmptyGraphError, GraphFinalizedError, UnknownVertexError


class RoadGraph:
    """
    Intersections (vertices) and roads (ways) of a map extract.

    Construction is two-phase: load vertices and ways in any order, then
    call finalize(). Ways are polylines, so consecutive refs become mutual
    neighbours; finalize() prunes every vertex left without a neighbour.
    The graph does not promise connectivity, only that no vertex has
    degree zero.

    Lookups of an absent id raise UnknownVertexError.
    """

    def __init__(self):
        self._vertices: dict[int, Vertex] = {}
        self._ways: dict[int, Way] = {}
        # neighbours keyed by id so ways may arrive before their vertices
        self._adj: dict[int, list[int]] = {}
        self._finalized = False

    # --------------- Construction -----------------------------

    def add_vertex(self, vid: int, lon: float, lat: float) -> None:
        self._check_open()
        # last write wins; adjacency recorded for vid is kept
        self._vertices[vid] = Vertex(vid, float(lon), float(lat), self._adj.setdefault(vid, []))

    def add_edge(self, wid: int, refs: Sequence[int]) -> None:
        self._check_open()
        refs = tuple(refs)
        self._ways[wid] = Way(wid, refs)
        for a, b in zip(refs, refs[1:]):
            if a == b:
                continue
            self._adj.setdefault(a, []).append(b)
            self._adj.setdefault(b, []).append(a)

    def load_vertices(self, records: Iterable) -> int:
        n = 0
        for r in records:
            self.add_vertex(r.id, r.lon, r.lat)
            n += 1
        return n

    def load_ways(self, records: Iterable) -> int:
        n = 0
        for r in records:
            self.add_edge(r.id, r.refs)
            n += 1
        return n

    def finalize(self) -> int:
        """Freeze the graph and prune isolated vertices. Returns the number pruned."""
        self._check_open()
        for vid in [k for k in self._adj if k not in self._vertices]:
            del self._adj[vid]
        for vid, nbrs in self._adj.items():
            # drop refs to ids that never became vertices, and repeats from shared segments
            nbrs[:] = dict.fromkeys(w for w in nbrs if w in self._vertices)
        pruned = self.clean()
        self._finalized = True
        return pruned

    def clean(self) -> int:
        """Remove vertices with no neighbours. Only meaningful once every way is loaded."""
        lonely = [vid for vid, v in self._vertices.items() if not v.adjacent]
        for vid in lonely:
            del self._vertices[vid]
            self._adj.pop(vid, None)
        return len(lonely)

    def _check_open(self) -> None:
        if self._finalized:
            raise GraphFinalizedError("graph is finalized; build a new RoadGraph instead")

    # --------------- Queries -----------------------------------

    @property
    def finalized(self) -> bool:
        return self._finalized

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vid) -> bool:
        return vid in self._vertices

    def vertices(self) -> list[int]:
        return list(self._vertices)

    def ways(self) -> list[int]:
        return list(self._ways)

    def way(self, wid: int) -> Way:
        return self._ways[wid]

    def vertex(self, v: int) -> Vertex:
        try:
            return self._vertices[v]
        except KeyError:
            raise UnknownVertexError(v) from None

    def adjacent(self, v: int) -> list[int]:
        return list(self.vertex(v).adjacent)

    def lon(self, v: int) -> float:
        return self.vertex(v).lon

    def lat(self, v: int) -> float:
        return self.vertex(v).lat

    def point(self, v: int) -> Point:
        return self.vertex(v).point

    def distance(self, v: int, w: int) -> float:
        a, b = self.vertex(v), self.vertex(w)
        return geomath.distance(a.lon, a.lat, b.lon, b.lat)

    def bearing(self, v: int, w: int) -> float:
        a, b = self.vertex(v), self.vertex(w)
        return geomath.bearing(a.lon, a.lat, b.lon, b.lat)

    def closest(self, lon: float, lat: float) -> int:
        """Id of the vertex nearest to (lon, lat); ties go to the earliest inserted."""
        if not self._vertices:
            raise EmptyGraphError("closest() on an empty graph")
        best_id, best = None, float("inf")
        for v in self._vertices.values():
            d = geomath.distance(lon, lat, v.lon, v.lat)
            if d < best:
                best_id, best = v.id, d
        if best_id is None:
            raise ValueError(f"no vertex is comparable to ({lon!r}, {lat!r})")
        return best_id
