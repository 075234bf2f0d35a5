# tests/io/test_engine_logging.py
import json
import logging

from bearmaps.domain.pathfinding import astar
from bearmaps.io.engine_logging import EngineLogging, _default_json_logger
from bearmaps.io.feed import VertexRecord, WayRecord, build_graph


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def _logger(name: str):
    log = logging.getLogger(name)
    log.setLevel(logging.DEBUG)
    log.propagate = False
    h = _ListHandler()
    log.handlers = [h]
    return log, h


def test_search_and_graph_events_are_structured():
    log, h = _logger("test.bearmaps.search")
    hooks = EngineLogging(run_id="r-1", debug=True, logger=log)
    g = build_graph(
        [VertexRecord(1, 0.0, 0.0), VertexRecord(2, 0.0, 0.01), VertexRecord(3, 5.0, 5.0)],
        [WayRecord(1, (1, 2))],
        hooks=hooks,
    )
    astar(g, 1, 2, hooks=hooks)

    msgs = [r.getMessage() for r in h.records]
    assert msgs == ["graph_built", "search_start", "search_end"]
    built = h.records[0].extra
    assert built["run_id"] == "r-1" and built["vertices"] == 2 and built["pruned"] == 1
    end = h.records[2].extra
    assert end["status"] == "found" and end["expanded"] == 2


def test_search_start_is_debug_only():
    log, h = _logger("test.bearmaps.quiet")
    hooks = EngineLogging(logger=log)
    hooks.search_start(source=1, target=2)
    hooks.search_end(status="unreachable", expanded=3, cost=float("inf"), ms=0.1)
    assert [r.getMessage() for r in h.records] == ["search_end"]
    assert h.records[0].extra["cost"] is None


def test_raster_events_are_sampled():
    log, h = _logger("test.bearmaps.raster")
    hooks = EngineLogging(logger=log, sample_every=3)
    for _ in range(7):
        hooks.raster(depth=1, rows=2, cols=2, success=True, ms=0.0)
    assert len(h.records) == 2


def test_error_is_logged_at_error_level():
    log, h = _logger("test.bearmaps.error")
    EngineLogging(logger=log).error("raster", reason="degenerate_query", w=0)
    (rec,) = h.records
    assert rec.levelno == logging.ERROR and rec.getMessage() == "raster_error"


def test_default_logger_writes_json(capsys):
    log = _default_json_logger(name="test.bearmaps.json", level="INFO")
    log.propagate = False
    log.info("hello", extra={"extra": {"depth": 3}})
    line = capsys.readouterr().out.strip().splitlines()[-1]
    assert json.loads(line) == {
        "level": "INFO",
        "msg": "hello",
        "logger": "test.bearmaps.json",
        "depth": 3,
    }
