"""Tests for partition-parallel check reduction."""

from __future__ import annotations

from functools import reduce
from itertools import permutations
import math

import numpy as np
import pandas as pd
import pytest

from sanity.partitions import PartitionedDataset, TabularDataset
from sanity.reduction import (
    combine_results,
    evaluate_checks,
    evaluate_partition,
    evaluate_tabular_checks,
    normalize_feature_shards,
)
from sanity.registry import (
    NON_FINITE_FEATURES_MESSAGE,
    NON_FINITE_LABEL_MESSAGE,
    NON_FINITE_WEIGHT_MESSAGE,
    checks_for,
    checks_for_tabular,
)
from sanity.types import ColumnNameMapping, LabeledRecord, TaskType


def _records(count: int, bad_index: int | None = None, **bad_fields: float) -> list[LabeledRecord]:
    out = [LabeledRecord(label=float(idx % 3), features={0: 1.0, 5: float(idx)}) for idx in range(count)]
    if bad_index is not None:
        out[bad_index] = LabeledRecord(**{"label": 1.0, "features": {0: 1.0}, **bad_fields})
    return out


def test_combine_is_elementwise_and() -> None:
    assert combine_results((True, True, False), (True, False, False)) == (True, False, False)
    with pytest.raises(ValueError, match="different lengths"):
        combine_results((True,), (True, True))


def test_partition_results_combine_identically_in_any_order() -> None:
    checks = checks_for(TaskType.LINEAR_REGRESSION)
    records = _records(40, bad_index=17, weight=math.inf)
    whole = evaluate_partition(records, checks)

    dataset = PartitionedDataset.from_records(records, num_partitions=4)
    partials = [evaluate_partition(part, checks) for part in dataset.partitions]
    for order in permutations(partials):
        assert reduce(combine_results, order, (True,) * len(checks)) == whole

    left = combine_results(combine_results(partials[0], partials[1]), combine_results(partials[2], partials[3]))
    assert left == whole


@pytest.mark.parametrize("num_partitions", [1, 2, 3, 7, 40])
def test_partitioning_does_not_change_messages(num_partitions: int) -> None:
    checks = checks_for(TaskType.LINEAR_REGRESSION)
    records = _records(40, bad_index=39, label=math.nan)
    dataset = PartitionedDataset.from_records(records, num_partitions=num_partitions)

    assert dataset.num_partitions == num_partitions
    assert evaluate_checks(dataset, checks, max_workers=3) == [NON_FINITE_LABEL_MESSAGE]


def test_all_failing_checks_are_reported_in_check_order() -> None:
    checks = checks_for(TaskType.LINEAR_REGRESSION)
    records = _records(10)
    records[2] = LabeledRecord(label=1.0, weight=math.nan)
    records[8] = LabeledRecord(label=1.0, features={1: -math.inf})
    dataset = PartitionedDataset.from_records(records, num_partitions=3)

    assert evaluate_checks(dataset, checks) == [NON_FINITE_FEATURES_MESSAGE, NON_FINITE_WEIGHT_MESSAGE]


def test_empty_dataset_passes_every_check() -> None:
    checks = checks_for(TaskType.POISSON_REGRESSION)

    assert evaluate_checks(PartitionedDataset.empty(), checks) == []
    assert evaluate_checks(PartitionedDataset.from_partitions([[], []]), checks) == []


def _frame(rows: int = 12) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "response": [float(idx % 2) for idx in range(rows)],
            "global": [{0: 1.0, 1: float(idx)} for idx in range(rows)],
            "member": [[0.5, float(idx)] for idx in range(rows)],
            "offset": np.zeros(rows),
            "weight": np.ones(rows),
        }
    )


def test_tabular_feature_check_fans_out_over_shards() -> None:
    frame = _frame()
    frame["member"] = [[math.nan] if idx == 7 else [0.5, float(idx)] for idx in range(len(frame))]
    dataset = TabularDataset.from_frame(frame, num_partitions=3)
    checks = checks_for_tabular(TaskType.LOGISTIC_REGRESSION)
    mapping = ColumnNameMapping()

    assert evaluate_tabular_checks(dataset, checks, mapping, {"global"}) == []
    assert evaluate_tabular_checks(dataset, checks, mapping, {"global", "member"}) == [NON_FINITE_FEATURES_MESSAGE]


def test_tabular_failure_reported_once_for_many_failing_rows() -> None:
    frame = _frame()
    frame["weight"] = math.nan
    dataset = TabularDataset.from_frame(frame, num_partitions=4)

    messages = evaluate_tabular_checks(
        dataset,
        checks_for_tabular(TaskType.LINEAR_REGRESSION),
        ColumnNameMapping(),
        {"global"},
    )
    assert messages == [NON_FINITE_WEIGHT_MESSAGE]


def test_tabular_absent_columns_pass_vacuously() -> None:
    frame = _frame().drop(columns=["weight", "offset"])
    frame["wt"] = math.nan
    dataset = TabularDataset.from_frame(frame, num_partitions=2)
    checks = checks_for_tabular(TaskType.LINEAR_REGRESSION)

    assert evaluate_tabular_checks(dataset, checks, ColumnNameMapping(), {"global", "missing_shard"}) == []

    remapped = ColumnNameMapping.from_dict({"weight": "wt"})
    assert evaluate_tabular_checks(dataset, checks, remapped, {"global"}) == [NON_FINITE_WEIGHT_MESSAGE]


def test_tabular_empty_dataset_passes() -> None:
    dataset = TabularDataset.from_frame(_frame()).empty()
    checks = checks_for_tabular(TaskType.POISSON_REGRESSION)

    assert dataset.columns
    assert evaluate_tabular_checks(dataset, checks, ColumnNameMapping(), {"global"}) == []


def test_tabular_column_present_in_later_partition_is_checked() -> None:
    first = pd.DataFrame({"response": [1.0, 0.0]})
    second = pd.DataFrame({"response": [1.0], "weight": [math.inf]})
    dataset = TabularDataset.from_frames([first, second])
    checks = checks_for_tabular(TaskType.LOGISTIC_REGRESSION)

    assert dataset.columns == ("response", "weight")
    assert evaluate_tabular_checks(dataset, checks, ColumnNameMapping(), ()) == [NON_FINITE_WEIGHT_MESSAGE]
    assert evaluate_tabular_checks(TabularDataset.from_frames([first]), checks, ColumnNameMapping(), ()) == []


def test_tabular_bare_string_shard_is_one_shard() -> None:
    frame = _frame()
    frame["global"] = [{0: math.nan} if idx == 3 else {0: 1.0} for idx in range(len(frame))]
    dataset = TabularDataset.from_frame(frame, num_partitions=2)
    checks = checks_for_tabular(TaskType.LOGISTIC_REGRESSION)

    assert normalize_feature_shards("global") == frozenset({"global"})
    assert evaluate_tabular_checks(dataset, checks, ColumnNameMapping(), "global") == [NON_FINITE_FEATURES_MESSAGE]
