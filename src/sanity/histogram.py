"""Predicted-probability vs observed-frequency bins for goodness-of-fit checks."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

import numpy as np

from sanity.types import POSITIVE_CLASS_LABEL


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class PredictedProbabilityBin:
    """One bucket of predicted probabilities with expected and observed counts."""

    min_predicted: float
    max_predicted: float
    num_samples: int
    observed_pos_count: int = 0

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_predicted <= self.max_predicted <= 1.0:
            raise ValueError(
                f"Bin bounds must satisfy 0 <= min <= max <= 1, got [{self.min_predicted}, {self.max_predicted}]"
            )
        if self.num_samples < 0:
            raise ValueError("num_samples must be >= 0.")
        if not 0 <= self.observed_pos_count <= self.num_samples:
            raise ValueError("observed_pos_count must be between 0 and num_samples.")

    @property
    def midpoint(self) -> float:
        return 0.5 * (self.min_predicted + self.max_predicted)

    @property
    def expected_pos_count(self) -> int:
        return _round_half_up(self.midpoint * self.num_samples)

    @property
    def expected_neg_count(self) -> int:
        return self.num_samples - self.expected_pos_count

    @property
    def observed_neg_count(self) -> int:
        return self.num_samples - self.observed_pos_count


def bin_predictions(
    scores: Sequence[float],
    labels: Sequence[float],
    num_bins: int,
    positive_label: float = POSITIVE_CLASS_LABEL,
) -> list[PredictedProbabilityBin]:
    """Group predicted probabilities into equal-width bins over [0, 1]."""

    if num_bins < 1:
        raise ValueError("num_bins must be >= 1.")
    score_arr = np.asarray(scores, dtype=float)
    label_arr = np.asarray(labels, dtype=float)
    if score_arr.shape != label_arr.shape:
        raise ValueError("scores and labels must have the same length.")
    if score_arr.size and not np.all((score_arr >= 0.0) & (score_arr <= 1.0)):
        raise ValueError("scores must be probabilities in [0, 1].")

    edges = np.linspace(0.0, 1.0, num_bins + 1)
    # right edge of the last bin is inclusive
    indices = np.clip(np.searchsorted(edges, score_arr, side="right") - 1, 0, num_bins - 1)
    positives = label_arr == positive_label

    bins: list[PredictedProbabilityBin] = []
    for idx in range(num_bins):
        in_bin = indices == idx
        bins.append(
            PredictedProbabilityBin(
                min_predicted=float(edges[idx]),
                max_predicted=float(edges[idx + 1]),
                num_samples=int(in_bin.sum()),
                observed_pos_count=int((in_bin & positives).sum()),
            )
        )
    return bins


def chi_square_statistic(bins: Sequence[PredictedProbabilityBin]) -> float:
    """Hosmer-Lemeshow style statistic; cells with zero expectation are skipped."""

    total = 0.0
    for item in bins:
        for observed, expected in (
            (item.observed_pos_count, item.expected_pos_count),
            (item.observed_neg_count, item.expected_neg_count),
        ):
            if expected > 0:
                total += (observed - expected) ** 2 / expected
    return total
