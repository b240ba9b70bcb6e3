"""Tests for YAML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import load_config
from sanity.types import ColumnRole, TaskType, UnsupportedTaskType, ValidationIntensity


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "sanity.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_load_config_defaults_and_relative_input_root(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, "input_root: data\ntask_type: logistic_regression\n"))

    assert cfg.input_root == (tmp_path / "data").resolve()
    assert cfg.task_type is TaskType.LOGISTIC_REGRESSION
    assert cfg.intensity is ValidationIntensity.FULL
    assert cfg.sample_fraction == 0.10
    assert cfg.seed is None
    assert cfg.feature_shards == ("features",)
    assert cfg.column_mapping[ColumnRole.LABEL] == "response"


def test_load_config_overrides(tmp_path: Path) -> None:
    body = "\n".join(
        [
            f"input_root: {tmp_path}",
            "task_type: poisson_regression",
            "intensity: sampled",
            "sample_fraction: 0.25",
            "seed: 9",
            "max_workers: 4",
            "column_mapping:",
            "  label: clicks",
            "  weight: w",
            "feature_shards: [global, perUser]",
            "negative_label: -1",
        ]
    )
    cfg = load_config(_write(tmp_path, body))

    assert cfg.intensity is ValidationIntensity.SAMPLED
    assert cfg.sample_fraction == 0.25
    assert cfg.seed == 9
    assert cfg.max_workers == 4
    assert cfg.column_mapping.to_dict() == {"label": "clicks", "features": "features", "offset": "offset", "weight": "w"}
    assert cfg.feature_shards == ("global", "perUser")
    assert cfg.negative_label == -1.0


def test_missing_required_key(tmp_path: Path) -> None:
    with pytest.raises(KeyError, match="task_type"):
        load_config(_write(tmp_path, "input_root: data\n"))


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config not found"):
        load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("extra", "error", "match"),
    [
        ("sample_fraction: 0", ValueError, "sample_fraction"),
        ("seed: -1", ValueError, "seed"),
        ("max_workers: 0", ValueError, "max_workers"),
        ("feature_shards: []", ValueError, "feature_shards"),
        ("positive_label: 0", ValueError, "must differ"),
        ("intensity: heavy", ValueError, "Unknown validation intensity"),
        ("column_mapping: {uid: id}", ValueError, "Unknown column role"),
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, extra: str, error: type[Exception], match: str) -> None:
    with pytest.raises(error, match=match):
        load_config(_write(tmp_path, f"input_root: data\ntask_type: linear_regression\n{extra}\n"))


def test_unknown_task_type(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedTaskType):
        load_config(_write(tmp_path, "input_root: data\ntask_type: survival\n"))
