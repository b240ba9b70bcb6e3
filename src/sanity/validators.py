"""Sanity-check entry points run before model training."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Collection

import numpy as np

from core.config import ValidationConfig
from core.logging import get_logger, log_event
from sanity.gate import ValidationFailure, gate
from sanity.partitions import PartitionedDataset, TabularDataset
from sanity.reduction import evaluate_checks, evaluate_tabular_checks, normalize_feature_shards
from sanity.registry import checks_for, checks_for_tabular
from sanity.sampling import DEFAULT_SAMPLE_FRACTION, select
from sanity.types import (
    NEGATIVE_CLASS_LABEL,
    POSITIVE_CLASS_LABEL,
    ColumnNameMapping,
    TaskType,
    ValidationIntensity,
)

LOGGER = get_logger(__name__)

VALIDATOR_VERSION = "training_data_sanity.v1"


def sanity_check(
    dataset: PartitionedDataset,
    task_type: TaskType | str,
    intensity: ValidationIntensity | str,
    *,
    sample_fraction: float = DEFAULT_SAMPLE_FRACTION,
    rng: np.random.Generator | None = None,
    max_workers: int | None = None,
    positive_label: float = POSITIVE_CLASS_LABEL,
    negative_label: float = NEGATIVE_CLASS_LABEL,
) -> None:
    """Validate typed records for a training task.

    Raises ``UnsupportedTaskType`` for an unknown task and
    ``ValidationFailure`` listing every failed check.
    """

    resolved_task = TaskType.parse(task_type)
    resolved_intensity = ValidationIntensity.parse(intensity)
    checks = checks_for(resolved_task, positive_label=positive_label, negative_label=negative_label)

    selected = select(dataset, resolved_intensity, fraction=sample_fraction, rng=rng)
    log_event(
        LOGGER,
        "Sanity check started",
        task=resolved_task.value,
        intensity=resolved_intensity.value,
        checks=len(checks),
        partitions=selected.num_partitions,
    )
    messages = evaluate_checks(selected, checks, max_workers=max_workers)
    gate(messages)


def sanity_check_tabular(
    dataset: TabularDataset,
    task_type: TaskType | str,
    intensity: ValidationIntensity | str,
    column_mapping: ColumnNameMapping,
    feature_shards: Collection[str] | str,
    *,
    sample_fraction: float = DEFAULT_SAMPLE_FRACTION,
    rng: np.random.Generator | None = None,
    max_workers: int | None = None,
    positive_label: float = POSITIVE_CLASS_LABEL,
    negative_label: float = NEGATIVE_CLASS_LABEL,
) -> None:
    """Validate tabular rows for a training task.

    Feature checks are applied once per feature shard column. Columns
    absent from the dataset schema pass without being evaluated.
    """

    resolved_task = TaskType.parse(task_type)
    resolved_intensity = ValidationIntensity.parse(intensity)
    checks = checks_for_tabular(resolved_task, positive_label=positive_label, negative_label=negative_label)
    shards = normalize_feature_shards(feature_shards)

    selected = select(dataset, resolved_intensity, fraction=sample_fraction, rng=rng)
    log_event(
        LOGGER,
        "Tabular sanity check started",
        task=resolved_task.value,
        intensity=resolved_intensity.value,
        checks=len(checks),
        partitions=selected.num_partitions,
        shards=",".join(sorted(shards)),
    )
    messages = evaluate_tabular_checks(
        selected,
        checks,
        column_mapping,
        shards,
        max_workers=max_workers,
    )
    gate(messages)


@dataclass
class ValidationReport:
    """Run-level sanity validation report payload."""

    generated_at_utc: str
    task_type: str
    intensity: str
    validator_version: str = VALIDATOR_VERSION
    sample_fraction: float = DEFAULT_SAMPLE_FRACTION
    seed: int | None = None
    total_partitions: int = 0
    total_rows: int = 0
    column_mapping: dict[str, str] = field(default_factory=dict)
    feature_shards: list[str] = field(default_factory=list)
    passed: bool = False
    messages: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize report to dict."""

        return asdict(self)


def run_tabular_validation(
    dataset: TabularDataset,
    config: ValidationConfig,
    rng: np.random.Generator | None = None,
) -> ValidationReport:
    """Run the tabular sanity check under ``config`` and report instead of raising."""

    if rng is None and config.seed is not None:
        rng = np.random.default_rng(config.seed)

    report = ValidationReport(
        generated_at_utc=datetime.now(timezone.utc).isoformat(),
        task_type=config.task_type.value,
        intensity=config.intensity.value,
        sample_fraction=config.sample_fraction,
        seed=config.seed,
        total_partitions=dataset.num_partitions,
        total_rows=dataset.count(),
        column_mapping=config.column_mapping.to_dict(),
        feature_shards=list(config.feature_shards),
    )

    try:
        sanity_check_tabular(
            dataset,
            config.task_type,
            config.intensity,
            config.column_mapping,
            config.feature_shards,
            sample_fraction=config.sample_fraction,
            rng=rng,
            max_workers=config.max_workers,
            positive_label=config.positive_label,
            negative_label=config.negative_label,
        )
    except ValidationFailure as exc:
        report.messages = list(exc.messages)
        log_event(LOGGER, "Sanity check failed", task=report.task_type, failures=len(report.messages))
        return report

    report.passed = True
    return report
