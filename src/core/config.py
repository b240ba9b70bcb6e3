"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sanity.sampling import DEFAULT_SAMPLE_FRACTION, validate_fraction
from sanity.types import (
    NEGATIVE_CLASS_LABEL,
    POSITIVE_CLASS_LABEL,
    ColumnNameMapping,
    TaskType,
    ValidationIntensity,
)


@dataclass(frozen=True)
class ValidationConfig:
    """Sanity validation configuration values."""

    input_root: Path
    task_type: TaskType
    intensity: ValidationIntensity = ValidationIntensity.FULL
    sample_fraction: float = DEFAULT_SAMPLE_FRACTION
    seed: int | None = None
    max_workers: int | None = None
    column_mapping: ColumnNameMapping = field(default_factory=ColumnNameMapping)
    feature_shards: tuple[str, ...] = ("features",)
    positive_label: float = POSITIVE_CLASS_LABEL
    negative_label: float = NEGATIVE_CLASS_LABEL
    file_glob: str = "**/*"


def _resolve_path(value: str, base_dir: Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else (base_dir / path).resolve()


def _get_required(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise KeyError(f"Missing required config key: {key}")
    return data[key]


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def load_config(path: Path) -> ValidationConfig:
    """Load and validate sanity validation config from YAML."""
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    base_dir = path.resolve().parent

    shards = raw.get("feature_shards", ["features"])
    if isinstance(shards, str):
        shards = [shards]

    cfg = ValidationConfig(
        input_root=_resolve_path(str(_get_required(raw, "input_root")), base_dir),
        task_type=TaskType.parse(_get_required(raw, "task_type")),
        intensity=ValidationIntensity.parse(raw.get("intensity", ValidationIntensity.FULL.value)),
        sample_fraction=float(raw.get("sample_fraction", DEFAULT_SAMPLE_FRACTION)),
        seed=_optional_int(raw.get("seed")),
        max_workers=_optional_int(raw.get("max_workers")),
        column_mapping=ColumnNameMapping.from_dict(raw.get("column_mapping")),
        feature_shards=tuple(str(shard) for shard in shards),
        positive_label=float(raw.get("positive_label", POSITIVE_CLASS_LABEL)),
        negative_label=float(raw.get("negative_label", NEGATIVE_CLASS_LABEL)),
        file_glob=str(raw.get("file_glob", "**/*")),
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: ValidationConfig) -> None:
    """Validate config fields and semantic constraints."""
    validate_fraction(cfg.sample_fraction)
    if cfg.seed is not None and cfg.seed < 0:
        raise ValueError("seed must be >= 0.")
    if cfg.max_workers is not None and cfg.max_workers < 1:
        raise ValueError("max_workers must be >= 1.")
    if not cfg.feature_shards:
        raise ValueError("feature_shards cannot be empty.")
    if any(not shard.strip() for shard in cfg.feature_shards):
        raise ValueError("feature_shards entries cannot be blank.")
    if cfg.positive_label == cfg.negative_label:
        raise ValueError("positive_label and negative_label must differ.")
    if not cfg.file_glob.strip():
        raise ValueError("file_glob cannot be empty.")
