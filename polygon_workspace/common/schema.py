"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from polygon_workspace.common.constants import LOG_LEVELS
from polygon_workspace.common.errors import ConfigError

TOP_LEVEL_KEYS = {"store", "logging", "export"}
STORE_KEYS = {"path", "echo"}
LOGGING_KEYS = {"level", "log_dir"}
EXPORT_KEYS = {"filename_prefix"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"Expected a mapping for {ctx}")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_workspace_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, TOP_LEVEL_KEYS, "workspace config")
    _assert_no_unknown_keys(cfg, TOP_LEVEL_KEYS, "workspace config", allow_unknown)

    _assert_required_keys(cfg["store"], {"path"}, "store")
    _assert_no_unknown_keys(cfg["store"], STORE_KEYS, "store", allow_unknown)

    _assert_required_keys(cfg["logging"], {"level"}, "logging")
    _assert_no_unknown_keys(cfg["logging"], LOGGING_KEYS, "logging", allow_unknown)
    level = str(cfg["logging"]["level"]).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {cfg['logging']['level']}")

    _assert_required_keys(cfg["export"], EXPORT_KEYS, "export")
    _assert_no_unknown_keys(cfg["export"], EXPORT_KEYS, "export", allow_unknown)
    if not str(cfg["export"]["filename_prefix"]).strip():
        raise ConfigError("export.filename_prefix must be non-empty")

    return cfg
