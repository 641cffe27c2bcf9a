"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from polygon_workspace.common.errors import ConfigError
from polygon_workspace.common.fs import read_yaml
from polygon_workspace.common.schema import validate_workspace_config

DEFAULT_CONFIG_PATH = Path("config") / "workspace.yml"


@dataclass(frozen=True)
class WorkspaceConfig:
    store_path: Path
    store_echo: bool
    log_level: str
    log_dir: Path | None
    filename_prefix: str


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path) or {}
    return _deep_merge(base, overlay)


def load_config(
    path: Path = DEFAULT_CONFIG_PATH,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> WorkspaceConfig:
    cfg = validate_workspace_config(_load_yaml_with_overlay(path, overlay_path), allow_unknown=allow_unknown)

    log_dir = cfg["logging"].get("log_dir")
    return WorkspaceConfig(
        store_path=Path(str(cfg["store"]["path"])).expanduser(),
        store_echo=bool(cfg["store"].get("echo", False)),
        log_level=str(cfg["logging"]["level"]).upper(),
        log_dir=Path(str(log_dir)).expanduser() if log_dir else None,
        filename_prefix=str(cfg["export"]["filename_prefix"]).strip(),
    )
