# -*- coding: utf-8 -*-
"""
python -m citysearch --cities data/cities.csv [--region GB] [--port 8080]

Precedence: command line > YAML config (--config) > environment > defaults.
"""
import argparse, os, sys

import structlog
import uvicorn

from .api import create_app
from .gazetteer import GazetteerError, load_gazetteer, only_region
from .logging_conf import setup_logging
from .scoring import tuning
from .utils import ConfigError, load_config

logger = structlog.get_logger(__name__)

DEFAULTS = {"region": "GB", "host": "0.0.0.0", "port": 8080}

def resolve_settings(args: argparse.Namespace) -> dict:
    cfg = load_config(args.config)
    env = {
        "cities": os.getenv("CITIES_CSV"),
        "region": os.getenv("CITYSEARCH_REGION"),
        "host": os.getenv("HOST"),
        "port": os.getenv("PORT"),
    }
    out = {}
    for key in ("cities", "region", "host", "port"):
        for val in (getattr(args, key), cfg.get(key), env[key], DEFAULTS.get(key)):
            if val is not None:
                out[key] = val
                break
        else:
            out[key] = None
    try:
        out["port"] = int(out["port"])
    except (TypeError, ValueError):
        raise ConfigError(f"port {out['port']!r} is not an integer") from None
    return out

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="citysearch", description="Place-name suggestion service")
    ap.add_argument("--cities", help="location of the cities csv file")
    ap.add_argument("--region", help="keep only this country code ('' keeps everything)")
    ap.add_argument("--host")
    ap.add_argument("--port", type=int)
    ap.add_argument("--config", default="config.yml", help="optional YAML config")
    ap.add_argument("--log-level", help="overrides LOG_LEVEL")
    return ap

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)
    try:
        settings = resolve_settings(args)
        cap, weight = tuning()
    except ConfigError as e:
        logger.error("startup_failed", reason=str(e))
        return 1

    if not settings["cities"]:
        logger.error("startup_failed", reason="--cities must be set to the location of the cities database")
        return 1

    filters = [only_region(settings["region"])] if settings["region"] else []
    try:
        gazetteer = load_gazetteer(settings["cities"], *filters)
    except FileNotFoundError as e:
        logger.error("startup_failed", reason=f"cities database could not be opened: {e}")
        return 1
    except GazetteerError as e:
        logger.error("startup_failed", reason=f"failed to create gazetteer: {e}")
        return 1

    logger.info("startup", places=len(gazetteer), region=settings["region"] or None,
                host=settings["host"], port=settings["port"], distance_cap_km=cap, text_weight=weight)
    uvicorn.run(create_app(gazetteer), host=settings["host"], port=settings["port"], log_config=None)
    return 0

if __name__ == "__main__":
    sys.exit(main())
