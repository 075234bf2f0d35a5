# main.py
import argparse
import json
import sys

from bearmaps.app.build import build
from bearmaps.domain.rasterer import RasterRequest
from bearmaps.io.feed import build_graph


def _load_config(args) -> dict:
    cfg = {}
    if args.config:
        with open(args.config, encoding="utf-8") as f:
            cfg = json.load(f)
    if args.graph:
        cfg["graph"] = {"file": args.graph, "fmt": "json"}
    return cfg


def _load_app(args, cfg: dict):
    # raster-only runs need no road network
    graph = None if "graph" in cfg else build_graph([], [])
    return build(cfg, graph=graph, use_logging=args.verbose)


def run_route(args, cfg: dict) -> dict:
    app = _load_app(args, cfg)
    route = app.router.shortest_path(args.start_lon, args.start_lat, args.dest_lon, args.dest_lat)
    return {
        "status": route.status.value,
        "vertices": list(route.vertex_ids),
        "points": [[p.lon, p.lat] for p in route.points],
        "bearings": list(route.bearings),
        "distance_mi": route.distance_mi if route.found else None,
    }


def run_raster(args, cfg: dict) -> dict:
    app = _load_app(args, cfg)
    req = RasterRequest(args.ullon, args.ullat, args.lrlon, args.lrlat, args.w, args.h)
    return app.rasterer.raster(req).to_dict()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Road routing and map tile selection.")
    parser.add_argument("--config", help="JSON service config")
    parser.add_argument("--graph", help="JSON graph feed (nodes + ways)")
    parser.add_argument("-v", "--verbose", action="store_true", help="emit JSON engine logs")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("route", help="shortest path between two lon/lat points")
    for name in ("start_lon", "start_lat", "dest_lon", "dest_lat"):
        p.add_argument(name, type=float)
    p.set_defaults(fn=run_route, needs_graph=True)

    p = sub.add_parser("raster", help="tile grid covering a query box")
    for name in ("ullon", "ullat", "lrlon", "lrlat", "w", "h"):
        p.add_argument(name, type=float)
    p.set_defaults(fn=run_raster, needs_graph=False)

    args = parser.parse_args(argv)
    cfg = _load_config(args)
    if args.needs_graph and "graph" not in cfg:
        parser.error(f"{args.cmd} needs a road graph: pass --graph or set 'graph' in --config")

    try:
        out, code = args.fn(args, cfg), 0
    except (LookupError, ValueError) as e:
        out, code = {"error": type(e).__name__, "detail": str(e)}, 1
    json.dump(out, sys.stdout)
    sys.stdout.write("\n")
    return code


if __name__ == "__main__":
    sys.exit(main())
