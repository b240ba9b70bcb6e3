"""Tests for predicted-probability histogram bins."""

from __future__ import annotations

import pytest

from sanity.histogram import PredictedProbabilityBin, bin_predictions, chi_square_statistic


@pytest.mark.parametrize(
    ("min_pred", "max_pred", "num_samples", "expected_pos", "expected_neg"),
    [
        (0.0, 1.0, 1000, 500, 500),
        (0.0, 0.5, 1000, 250, 750),
        (0.5, 1.0, 1000, 750, 250),
        (0.0, 0.1, 1000, 50, 950),
        (0.9, 1.0, 1000, 950, 50),
    ],
)
def test_expected_counts_use_bin_midpoint(
    min_pred: float, max_pred: float, num_samples: int, expected_pos: int, expected_neg: int
) -> None:
    item = PredictedProbabilityBin(min_pred, max_pred, num_samples, 0)

    assert item.expected_pos_count == expected_pos
    assert item.expected_neg_count == expected_neg


def test_observed_negative_count_is_complement() -> None:
    item = PredictedProbabilityBin(0.2, 0.4, 100, observed_pos_count=31)

    assert item.observed_neg_count == 69


@pytest.mark.parametrize(
    ("min_pred", "max_pred", "num_samples", "observed"),
    [(-0.1, 0.5, 10, 0), (0.6, 0.5, 10, 0), (0.0, 1.1, 10, 0), (0.0, 1.0, -1, 0), (0.0, 1.0, 10, 11)],
)
def test_invalid_bins_are_rejected(min_pred: float, max_pred: float, num_samples: int, observed: int) -> None:
    with pytest.raises(ValueError):
        PredictedProbabilityBin(min_pred, max_pred, num_samples, observed)


def test_bin_predictions_groups_scores_and_counts_positives() -> None:
    scores = [0.05, 0.1, 0.45, 0.5, 0.99, 1.0]
    labels = [0.0, 1.0, 0.0, 1.0, 1.0, 1.0]

    bins = bin_predictions(scores, labels, num_bins=2)

    assert [(item.min_predicted, item.max_predicted) for item in bins] == [(0.0, 0.5), (0.5, 1.0)]
    assert [item.num_samples for item in bins] == [3, 3]
    assert [item.observed_pos_count for item in bins] == [1, 3]


def test_bin_predictions_rejects_bad_input() -> None:
    with pytest.raises(ValueError, match="num_bins"):
        bin_predictions([0.5], [1.0], num_bins=0)
    with pytest.raises(ValueError, match="same length"):
        bin_predictions([0.5, 0.2], [1.0], num_bins=2)
    with pytest.raises(ValueError, match="probabilities"):
        bin_predictions([1.5], [1.0], num_bins=2)


def test_chi_square_is_zero_for_perfect_calibration() -> None:
    bins = [PredictedProbabilityBin(0.0, 0.5, 1000, 250), PredictedProbabilityBin(0.5, 1.0, 1000, 750)]

    assert chi_square_statistic(bins) == 0.0


def test_chi_square_sums_positive_and_negative_cells() -> None:
    item = PredictedProbabilityBin(0.0, 1.0, 100, observed_pos_count=60)

    # expected 50/50, observed 60/40
    assert chi_square_statistic([item]) == pytest.approx(100 / 50 + 100 / 50)
