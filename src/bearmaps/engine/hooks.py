# bearmaps/engine/hooks.py
from typing import Protocol


class EngineHooks(Protocol):
    def graph_built(self, *, vertices, ways, pruned, ms): ...
    def search_start(self, *, source, target): ...
    def search_end(self, *, status, expanded, cost, ms): ...
    def raster(self, *, depth, rows, cols, success, ms): ...
    def error(self, op: str, *, reason: str, **kw): ...


class NoopHooks:
    def graph_built(self, **_):
        pass

    def search_start(self, **_):
        pass

    def search_end(self, **_):
        pass

    def raster(self, **_):
        pass

    def error(self, *_, **__):
        pass
