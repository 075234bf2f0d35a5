# bearmaps/io/engine_logging.py
import json
import logging
import sys

from bearmaps.engine.hooks import NoopHooks


def _default_json_logger(name="bearmaps", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class EngineLogging(NoopHooks):
    """
    Structured JSON logs for graph construction, searches and raster queries.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)
        self._rasters = 0

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------- Graph -----------------------------

    def graph_built(self, *, vertices: int, ways: int, pruned: int, ms: float):
        self._emit("INFO", "graph_built", vertices=vertices, ways=ways, pruned=pruned, ms=ms)

    # --------------- Routing ---------------------------

    def search_start(self, *, source: int, target: int):
        if self.debug:
            self._emit("DEBUG", "search_start", source=source, target=target)

    def search_end(self, *, status: str, expanded: int, cost: float, ms: float):
        # inf is not valid JSON
        self._emit(
            "INFO",
            "search_end",
            status=status,
            expanded=expanded,
            cost=cost if cost != float("inf") else None,
            ms=ms,
        )

    # --------------- Raster ----------------------------

    def raster(self, *, depth: int, rows: int, cols: int, success: bool, ms: float):
        self._rasters += 1
        if self.debug or (self._rasters % self.sample_every) == 0:
            self._emit("INFO", "raster", depth=depth, rows=rows, cols=cols, success=success, ms=ms)

    def error(self, op: str, *, reason: str, **extra):
        self._emit("ERROR", f"{op}_error", reason=reason, **extra)
