"""Atomic report writing."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def _tmp_path(dest: Path) -> Path:
    return dest.with_suffix(f"{dest.suffix}.tmp")


def atomic_write_json(payload: dict[str, Any], dest: Path) -> None:
    """Write a JSON report through a sibling temp file and an atomic rename."""
    tmp = _tmp_path(dest)
    tmp.parent.mkdir(parents=True, exist_ok=True)

    try:
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False), encoding="utf-8")
        os.replace(tmp, dest)
    except (OSError, TypeError, ValueError) as exc:
        if tmp.exists():
            tmp.unlink()
        raise RuntimeError(f"Failed to atomically write json: {dest}") from exc
