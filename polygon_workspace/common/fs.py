"""Filesystem helpers."""

from __future__ import annotations

import sys
from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def read_text_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with Path(path).open("r", encoding="utf-8") as f:
        return f.read()


def read_bytes(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read()


def write_bytes(path: Path, payload: bytes) -> None:
    ensure_dir(path.parent)
    with path.open("wb") as f:
        f.write(payload)
