# bearmaps/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from bearmaps.app.protocols import NearestVertexLocator
from bearmaps.config.models import ServiceModel
from bearmaps.domain.graph import RoadGraph
from bearmaps.domain.pathfinding import AStarPathFinder
from bearmaps.domain.rasterer import Rasterer
from bearmaps.engine.hooks import EngineHooks, NoopHooks
from bearmaps.io.engine_logging import EngineLogging  # JSON logs
from bearmaps.runtime.registries import make_locator, resolve_graph
from bearmaps.services.routing import RoutingService


@dataclass
class App:
    config: ServiceModel
    hooks: EngineHooks
    graph: RoadGraph
    locator: NearestVertexLocator
    finder: AStarPathFinder
    router: RoutingService
    rasterer: Rasterer


def build(
    cfg: ServiceModel | Mapping | None = None,
    *,
    graph: RoadGraph | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    if cfg is None:
        cfg = {}
    model = cfg if isinstance(cfg, ServiceModel) else ServiceModel.model_validate(cfg)

    # 1) Hooks
    hooks = (
        EngineLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Raster (independent of the graph)
    rasterer = Rasterer(
        model.raster.root.to_box(),
        tile_size=model.raster.tile_size,
        max_depth=model.raster.max_depth,
        hooks=hooks,
    )

    # 3) Graph & routing
    g = resolve_graph(model.graph, graph=graph, hooks=hooks)
    if not g.finalized:
        g.finalize()
    locator = make_locator(model.routing.locator, g)
    finder = AStarPathFinder(g, max_expansions=model.routing.max_expansions, hooks=hooks)
    router = RoutingService(g, locator=locator, finder=finder)

    return App(model, hooks, g, locator, finder, router, rasterer)
