# tests/domain/test_rasterer.py
import pytest

from bearmaps.domain.entities.geography import BoundingBox
from bearmaps.domain.rasterer import ROOT_BOX, Rasterer, RasterRequest, tile_name

ROUNDED_ROOT = BoundingBox(-122.30, 37.89, -122.20, 37.82)


def _req(box: BoundingBox, w: float, h: float = 600.0) -> RasterRequest:
    return RasterRequest(box.ullon, box.ullat, box.lrlon, box.lrlat, w, h)


@pytest.fixture
def rasterer() -> Rasterer:
    return Rasterer(ROUNDED_ROOT, tile_size=256, max_depth=7)


# ---------- Depth selection


def test_full_root_at_native_width_is_depth_zero(rasterer: Rasterer):
    res = rasterer.raster(_req(ROUNDED_ROOT, 256))
    assert res.query_success
    assert res.depth == 0
    assert res.render_grid == [["d0_x0_y0.png"]]
    assert res.raster_box == ROUNDED_ROOT


def test_default_root_box_behaves_the_same():
    res = Rasterer().raster(_req(ROOT_BOX, 256))
    assert res.depth == 0 and res.render_grid == [["d0_x0_y0.png"]]
    assert res.raster_box == ROOT_BOX


def test_halving_the_box_adds_one_level_then_saturates(rasterer: Rasterer):
    r = ROUNDED_ROOT
    for k in range(10):
        box = BoundingBox(
            r.ullon, r.ullat, r.ullon + r.width_deg / 2**k, r.ullat - r.height_deg / 2**k
        )
        assert rasterer.depth_for(box, 256) == min(k, 7)


def test_doubling_the_width_adds_one_level_then_saturates(rasterer: Rasterer):
    for k in range(10):
        assert rasterer.depth_for(ROUNDED_ROOT, 256 * 2**k) == min(k, 7)


def test_zoomed_out_request_stays_at_depth_zero(rasterer: Rasterer):
    assert rasterer.depth_for(ROUNDED_ROOT, 64) == 0


def test_depth_between_levels_rounds_up(rasterer: Rasterer):
    # 1.5x finer than the root needs depth 1 to keep LonDPP <= the query's
    assert rasterer.depth_for(ROUNDED_ROOT, 384) == 1


def test_custom_max_depth_caps():
    r = Rasterer(ROUNDED_ROOT, max_depth=3)
    assert r.depth_for(ROUNDED_ROOT, 256 * 2**6) == 3


# ---------- Grid selection


def test_depth_one_grid_is_row_major(rasterer: Rasterer):
    res = rasterer.raster(_req(ROUNDED_ROOT, 512))
    assert res.depth == 1
    assert res.render_grid == [
        ["d1_x0_y0.png", "d1_x1_y0.png"],
        ["d1_x0_y1.png", "d1_x1_y1.png"],
    ]


def test_interior_query_picks_covering_tiles(rasterer: Rasterer):
    # depth 2: tiles are 0.025 lon x 0.0175 lat
    box = BoundingBox(-122.27, 37.87, -122.24, 37.85)
    res = rasterer.raster(_req(box, 300))
    assert res.depth == 2
    assert res.render_grid == [
        ["d2_x1_y1.png", "d2_x2_y1.png"],
        ["d2_x1_y2.png", "d2_x2_y2.png"],
    ]
    assert abs(res.raster_box.ullon - (-122.275)) < 1e-9
    assert abs(res.raster_box.lrlon - (-122.225)) < 1e-9
    assert abs(res.raster_box.ullat - 37.8725) < 1e-9
    assert abs(res.raster_box.lrlat - 37.8375) < 1e-9


@pytest.mark.parametrize(
    "box,w",
    [
        (BoundingBox(-122.2999, 37.8899, -122.2001, 37.8201), 700),
        (BoundingBox(-122.281, 37.881, -122.262, 37.863), 512),
        (BoundingBox(-122.2345, 37.8456, -122.2301, 37.8401), 1000),
        (BoundingBox(-122.25, 37.86, -122.24999, 37.85999), 10),
        (BoundingBox(-122.29, 37.88, -122.21, 37.83), 1091),
    ],
)
def test_raster_box_contains_request(rasterer: Rasterer, box: BoundingBox, w: float):
    res = rasterer.raster(_req(box, w))
    assert res.query_success
    assert res.raster_box.contains(box)
    assert ROUNDED_ROOT.contains(res.raster_box)
    rows, cols = res.shape
    n = 2**res.depth
    assert abs(res.raster_box.width_deg - cols * ROUNDED_ROOT.width_deg / n) < 1e-9
    assert abs(res.raster_box.height_deg - rows * ROUNDED_ROOT.height_deg / n) < 1e-9


def test_partially_outside_query_is_clipped_to_root(rasterer: Rasterer):
    box = BoundingBox(-122.35, 37.95, -122.25, 37.86)
    res = rasterer.raster(_req(box, 256))
    assert res.query_success
    assert ROUNDED_ROOT.contains(res.raster_box)
    assert res.raster_box.ullon == ROUNDED_ROOT.ullon and res.raster_box.ullat == ROUNDED_ROOT.ullat


# ---------- Degenerate queries


@pytest.mark.parametrize(
    "box,w",
    [
        (BoundingBox(-122.25, 37.86, -122.25, 37.84), 256),  # zero width
        (BoundingBox(-122.25, 37.86, -122.24, 37.86), 256),  # zero height
        (BoundingBox(-122.24, 37.86, -122.25, 37.84), 256),  # corners swapped
        (BoundingBox(-121.00, 38.50, -120.90, 38.40), 256),  # outside root
        (ROUNDED_ROOT, 0),
        (ROUNDED_ROOT, -10),
        (BoundingBox(float("nan"), 37.86, -122.24, 37.84), 256),
    ],
)
def test_degenerate_query_fails_softly(rasterer: Rasterer, box: BoundingBox, w: float):
    res = rasterer.raster(_req(box, w))
    assert res.query_success is False
    assert res.render_grid == []
    assert res.shape == (0, 0)


# ---------- Output contract


def test_tile_name_format():
    assert tile_name(7, 12, 127) == "d7_x12_y127.png"


def test_to_dict_has_front_end_keys(rasterer: Rasterer):
    out = rasterer.raster(_req(ROUNDED_ROOT, 256)).to_dict()
    assert out == {
        "render_grid": [["d0_x0_y0.png"]],
        "raster_ul_lon": -122.30,
        "raster_ul_lat": 37.89,
        "raster_lr_lon": -122.20,
        "raster_lr_lat": 37.82,
        "depth": 0,
        "query_success": True,
    }


def test_request_from_params():
    req = RasterRequest.from_params(
        {"ullon": -122.3, "ullat": 37.89, "lrlon": -122.2, "lrlat": 37.82, "w": 256, "h": 300}
    )
    assert req.box == ROUNDED_ROOT
    assert req.w == 256.0 and req.h == 300.0


def test_bad_root_is_rejected():
    with pytest.raises(ValueError):
        Rasterer(BoundingBox(-122.2, 37.89, -122.3, 37.82))
