from typing import Protocol, runtime_checkable


@runtime_checkable
class NearestVertexLocator(Protocol):
    """Snap a free (lon, lat) to the id of the nearest graph vertex."""

    def closest(self, lon: float, lat: float) -> int: ...


@runtime_checkable
class PathFinder(Protocol):
    """
    Responsibilities:
      • Shortest vertex sequence between two vertex ids.
      • Report unreachable targets as a result, not an exception.
    """

    def find(self, source: int, target: int): ...
