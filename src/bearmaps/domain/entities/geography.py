import math
from dataclasses import dataclass, field


# Core geometry types; coordinates are decimal degrees
@dataclass(frozen=True)
class Point:
    lon: float
    lat: float


@dataclass(frozen=True)
class BoundingBox:
    """Upper-left / lower-right box; lat decreases from top to bottom."""

    ullon: float
    ullat: float
    lrlon: float
    lrlat: float

    @property
    def width_deg(self) -> float:
        return self.lrlon - self.ullon

    @property
    def height_deg(self) -> float:
        return self.ullat - self.lrlat

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in (self.ullon, self.ullat, self.lrlon, self.lrlat))

    @property
    def is_degenerate(self) -> bool:
        return not (self.width_deg > 0 and self.height_deg > 0)

    def contains(self, other: "BoundingBox", tol: float = 1e-12) -> bool:
        return (
            self.ullon <= other.ullon + tol
            and self.lrlon >= other.lrlon - tol
            and self.ullat >= other.ullat - tol
            and self.lrlat <= other.lrlat + tol
        )

    def intersection(self, other: "BoundingBox") -> "BoundingBox | None":
        box = BoundingBox(
            ullon=max(self.ullon, other.ullon),
            ullat=min(self.ullat, other.ullat),
            lrlon=min(self.lrlon, other.lrlon),
            lrlat=max(self.lrlat, other.lrlat),
        )
        return None if box.is_degenerate else box


@dataclass
class Vertex:
    id: int
    lon: float
    lat: float
    adjacent: list[int] = field(default_factory=list)

    @property
    def point(self) -> Point:
        return Point(self.lon, self.lat)


@dataclass(frozen=True)
class Way:
    id: int
    refs: tuple[int, ...]  # polyline order
