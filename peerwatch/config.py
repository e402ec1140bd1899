from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .models import SortColumn, SortOrder
from .utils.path import to_abs_path

COLLECTORS = ("auto", "linux", "psutil")

class ConfigError(ValueError):
    pass

@dataclass
class CFG:
    interval: float = 1.0
    port: int = 8765
    host: str = "0.0.0.0"
    collector: str = "auto"
    udp_enabled: bool = False
    sort_column: SortColumn = SortColumn.NONE
    sort_order: SortOrder = SortOrder.ASCENDING
    config_path: Optional[Path] = None

def parse_sort_column(value: Any) -> SortColumn:
    if isinstance(value, SortColumn):
        return value
    name = str(value or "none").strip().lower().replace("-", "").replace("_", "")
    for col in SortColumn:
        if col.name.lower() == name:
            return col
    raise ConfigError(f"unknown sort column: {value!r}")

def parse_sort_order(value: Any) -> SortOrder:
    if isinstance(value, SortOrder):
        return value
    v = str(value or "asc").strip().lower()
    if v in ("asc", "ascending"):
        return SortOrder.ASCENDING
    if v in ("desc", "descending"):
        return SortOrder.DESCENDING
    raise ConfigError(f"unknown sort order: {value!r}")

def load_config_file(path: Optional[str]) -> dict:
    """Read a YAML (.yaml/.yml) or JSON mapping of CFG fields."""
    if not path:
        return {}
    p = to_abs_path(path)
    if not p or not p.exists():
        raise ConfigError(f"config not found: {p or path}")
    txt = p.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(txt) if p.suffix in (".yaml", ".yml") else json.loads(txt)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot parse {p}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: expected a mapping at top level")
    data["config_path"] = p
    return data

def apply_settings(cfg: CFG, data: dict) -> CFG:
    for key, value in data.items():
        if value is None:
            continue
        if key == "interval":
            cfg.interval = float(value)
            if cfg.interval <= 0:
                raise ConfigError("interval must be positive")
        elif key == "port":
            cfg.port = int(value)
        elif key == "host":
            cfg.host = str(value)
        elif key == "collector":
            if value not in COLLECTORS:
                raise ConfigError(f"unknown collector: {value!r} (expected one of {', '.join(COLLECTORS)})")
            cfg.collector = value
        elif key in ("udp", "udp_enabled"):
            cfg.udp_enabled = bool(value)
        elif key in ("sort", "sort_column"):
            cfg.sort_column = parse_sort_column(value)
        elif key in ("order", "sort_order"):
            cfg.sort_order = parse_sort_order(value)
        elif key == "config_path":
            cfg.config_path = value
        else:
            raise ConfigError(f"unknown config key: {key!r}")
    return cfg

def init_cfg_from_args(args) -> CFG:
    """File settings first, then any flag given on the command line."""
    cfg = apply_settings(CFG(), load_config_file(getattr(args, "config", None)))
    overrides = {
        "interval": getattr(args, "interval", None),
        "port": getattr(args, "port", None),
        "host": getattr(args, "host", None),
        "collector": getattr(args, "collector", None),
        "sort_column": getattr(args, "sort", None),
    }
    if getattr(args, "udp", False):
        overrides["udp_enabled"] = True
    if getattr(args, "desc", False):
        overrides["sort_order"] = SortOrder.DESCENDING
    return apply_settings(cfg, overrides)
