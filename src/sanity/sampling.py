"""Validation intensity selection."""

from __future__ import annotations

from typing import TypeVar

import numpy as np

from core.logging import get_logger, log_event
from sanity.partitions import PartitionedDataset, TabularDataset
from sanity.types import ValidationIntensity

LOGGER = get_logger(__name__)

DEFAULT_SAMPLE_FRACTION = 0.10

DatasetT = TypeVar("DatasetT", PartitionedDataset, TabularDataset)


def validate_fraction(fraction: float) -> float:
    """Return the fraction when it lies in (0, 1]."""

    value = float(fraction)
    if not 0.0 < value <= 1.0:
        raise ValueError(f"sample_fraction must be in (0, 1], got {fraction!r}")
    return value


def select(
    dataset: DatasetT,
    intensity: ValidationIntensity | str,
    *,
    fraction: float = DEFAULT_SAMPLE_FRACTION,
    rng: np.random.Generator | None = None,
) -> DatasetT:
    """Return the part of ``dataset`` that should be validated."""

    resolved = ValidationIntensity.parse(intensity)
    if resolved == ValidationIntensity.FULL:
        return dataset
    if resolved == ValidationIntensity.DISABLED:
        return dataset.empty()

    fraction = validate_fraction(fraction)
    generator = rng if rng is not None else np.random.default_rng()
    sampled = dataset.sample(fraction, generator)
    log_event(
        LOGGER,
        "Validation sample drawn",
        fraction=f"{fraction:.3f}",
        rows_in=dataset.count(),
        rows_sampled=sampled.count(),
    )
    return sampled
