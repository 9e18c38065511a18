# -*- coding: utf-8 -*-
import os, yaml, pandas as pd
from pandas.errors import ParserError

def load_config(path="config.yml") -> dict:
    """YAML config as a dict; a missing file gives {} so env/defaults take over."""
    if not path or not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def read_csv_smart(source, **kwargs) -> pd.DataFrame:
    # some exports come semicolon-separated
    try:
        return pd.read_csv(source, **kwargs)
    except ParserError:
        if hasattr(source, "seek"):
            source.seek(0)
        return pd.read_csv(source, sep=";", **kwargs)

class ConfigError(ValueError):
    """Bad setting in the environment or config file; fatal at startup."""

def env_float(name: str, default: float, lo: float | None = None, hi: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        val = float(raw)
    except ValueError:
        raise ConfigError(f"{name}={raw!r} is not a number") from None
    if val != val or (lo is not None and val < lo) or (hi is not None and val > hi):
        raise ConfigError(f"{name}={raw!r} must be within [{lo}, {hi}]")
    return val
