# bearmaps/domain/rasterer.py
import math
import time
from collections.abc import Mapping
from dataclasses import dataclass

from bearmaps.domain.entities.geography import BoundingBox
from bearmaps.engine.hooks import EngineHooks, NoopHooks

TILE_SIZE = 256
MAX_DEPTH = 7

# Root box of the pre-rendered tile set (Berkeley map extract)
ROOT_ULLON = -122.2998046875
ROOT_ULLAT = 37.892195547244356
ROOT_LRLON = -122.2119140625
ROOT_LRLAT = 37.82280243352756
ROOT_BOX = BoundingBox(ROOT_ULLON, ROOT_ULLAT, ROOT_LRLON, ROOT_LRLAT)

# absorbs float noise when the ratio lands on a power of two
_LOG_EPS = 1e-9


def tile_name(depth: int, x: int, y: int) -> str:
    return f"d{depth}_x{x}_y{y}.png"


@dataclass(frozen=True)
class RasterRequest:
    ullon: float
    ullat: float
    lrlon: float
    lrlat: float
    w: float  # viewport pixels
    h: float = 0.0

    @classmethod
    def from_params(cls, params: Mapping[str, float]) -> "RasterRequest":
        return cls(
            ullon=float(params["ullon"]),
            ullat=float(params["ullat"]),
            lrlon=float(params["lrlon"]),
            lrlat=float(params["lrlat"]),
            w=float(params["w"]),
            h=float(params.get("h", 0.0)),
        )

    @property
    def box(self) -> BoundingBox:
        return BoundingBox(self.ullon, self.ullat, self.lrlon, self.lrlat)


@dataclass(frozen=True)
class RasterResult:
    depth: int
    render_grid: list[list[str]]
    raster_box: BoundingBox
    query_success: bool

    @property
    def shape(self) -> tuple[int, int]:
        rows = len(self.render_grid)
        return rows, (len(self.render_grid[0]) if rows else 0)

    def to_dict(self) -> dict:
        return {
            "render_grid": self.render_grid,
            "raster_ul_lon": self.raster_box.ullon,
            "raster_ul_lat": self.raster_box.ullat,
            "raster_lr_lon": self.raster_box.lrlon,
            "raster_lr_lat": self.raster_box.lrlat,
            "depth": self.depth,
            "query_success": self.query_success,
        }


class Rasterer:
    """
    Picks the tile grid that best covers a query box.

    Depth d holds 2**d x 2**d tiles over the root box. The chosen depth is
    the shallowest whose longitudinal distance per pixel (LonDPP) is no
    greater than the query's, capped at max_depth.
    """

    def __init__(
        self,
        root: BoundingBox = ROOT_BOX,
        *,
        tile_size: int = TILE_SIZE,
        max_depth: int = MAX_DEPTH,
        hooks: EngineHooks | None = None,
    ):
        if root.is_degenerate:
            raise ValueError(f"degenerate root box {root}")
        if tile_size <= 0 or max_depth < 0:
            raise ValueError("tile_size must be > 0 and max_depth >= 0")
        self.root, self.tile_size, self.max_depth = root, tile_size, max_depth
        self.hooks = hooks or NoopHooks()

    @property
    def root_lon_dpp(self) -> float:
        return abs(self.root.lrlon - self.root.ullon) / self.tile_size

    def depth_for(self, box: BoundingBox, width: float) -> int:
        image_lon_dpp = abs(box.lrlon - box.ullon) / width
        k = math.ceil(math.log2(self.root_lon_dpp / image_lon_dpp) - _LOG_EPS)
        return max(0, min(self.max_depth, k))

    def tiles_for(self, box: BoundingBox, depth: int) -> tuple[int, int, int, int]:
        """Tile index box (x1, y1, x2, y2), upper-left inclusive, lower-right exclusive."""
        n = 2**depth
        lon_per_tile = self.root.width_deg / n
        lat_per_tile = self.root.height_deg / n
        # truncate toward the root corners so the whole query is covered
        x1 = int((box.ullon - self.root.ullon) / lon_per_tile)
        y1 = int((self.root.ullat - box.ullat) / lat_per_tile)
        x2 = n - int((self.root.lrlon - box.lrlon) / lon_per_tile)
        y2 = n - int((box.lrlat - self.root.lrlat) / lat_per_tile)
        return x1, y1, x2, y2

    def tile_box(self, depth: int, x1: int, y1: int, x2: int, y2: int) -> BoundingBox:
        n = 2**depth
        lon_per_tile = self.root.width_deg / n
        lat_per_tile = self.root.height_deg / n
        return BoundingBox(
            ullon=self.root.ullon + x1 * lon_per_tile,
            ullat=self.root.ullat - y1 * lat_per_tile,
            lrlon=self.root.ullon + x2 * lon_per_tile,
            lrlat=self.root.ullat - y2 * lat_per_tile,
        )

    def raster(self, request: RasterRequest) -> RasterResult:
        t0 = time.perf_counter()
        query = request.box
        clipped = None
        if query.is_finite and not query.is_degenerate and 0 < request.w < math.inf:
            clipped = self.root.intersection(query)
        if clipped is None:
            self.hooks.error("raster", reason="degenerate_query", box=str(query), w=request.w)
            res = RasterResult(0, [], query, False)
            self._report(res, t0)
            return res

        depth = self.depth_for(query, request.w)
        x1, y1, x2, y2 = self.tiles_for(clipped, depth)
        grid = [[tile_name(depth, x, y) for x in range(x1, x2)] for y in range(y1, y2)]
        res = RasterResult(depth, grid, self.tile_box(depth, x1, y1, x2, y2), True)
        self._report(res, t0)
        return res

    def _report(self, res: RasterResult, t0: float) -> None:
        rows, cols = res.shape
        self.hooks.raster(
            depth=res.depth,
            rows=rows,
            cols=cols,
            success=res.query_success,
            ms=(time.perf_counter() - t0) * 1000,
        )
