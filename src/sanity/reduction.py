"""Partition-parallel AND-reduction of sanity checks.

Each partition is folded independently into one boolean per check,
seeded with ``True``. Partial results are combined with an element-wise
AND, which is associative and commutative, so neither partition order nor
merge order changes the outcome. Only the messages of failed checks leave
the engine; failing rows are never collected.
"""

from __future__ import annotations

import concurrent.futures
import logging
from functools import reduce
from typing import Any, Callable, Collection, Sequence, TypeVar

import pandas as pd

from core.logging import get_logger, log_event
from sanity.partitions import PartitionedDataset, TabularDataset
from sanity.registry import Check, TabularCheck
from sanity.types import ColumnNameMapping, ColumnRole, LabeledRecord

LOGGER = get_logger(__name__)

PartitionT = TypeVar("PartitionT")


def combine_results(left: Sequence[bool], right: Sequence[bool]) -> tuple[bool, ...]:
    """Merge two partial results with an element-wise logical AND."""

    if len(left) != len(right):
        raise ValueError(f"Cannot combine results of different lengths: {len(left)} != {len(right)}")
    return tuple(a and b for a, b in zip(left, right))


def evaluate_partition(partition: Sequence[LabeledRecord], checks: Sequence[Check]) -> tuple[bool, ...]:
    """Fold one record partition into one accumulator per check."""

    results = [True] * len(checks)
    for record in partition:
        for idx, check in enumerate(checks):
            if results[idx]:
                results[idx] = bool(check.predicate(record))
        if not any(results):
            break
    return tuple(results)


def normalize_feature_shards(feature_shards: Collection[str] | str) -> frozenset[str]:
    """Return the shard identifiers as a set; a bare string is one shard."""

    if isinstance(feature_shards, str):
        return frozenset((feature_shards,))
    return frozenset(feature_shards)


def _bind_tabular_targets(
    checks: Sequence[TabularCheck],
    column_mapping: ColumnNameMapping,
    feature_shards: Collection[str],
    schema: Collection[str],
) -> tuple[tuple[str, ...], ...]:
    """Resolve the physical columns each check reads; an empty tuple means a vacuous pass."""

    targets: list[tuple[str, ...]] = []
    for check in checks:
        if check.role == ColumnRole.FEATURES:
            targets.append(tuple(shard for shard in sorted(feature_shards) if shard in schema))
        else:
            column = column_mapping[check.role]
            targets.append((column,) if column in schema else ())
    return tuple(targets)


def evaluate_tabular_partition(
    partition: pd.DataFrame,
    checks: Sequence[TabularCheck],
    targets: Sequence[Sequence[str]],
) -> tuple[bool, ...]:
    """Fold one DataFrame partition into one accumulator per check.

    ``targets`` holds, per check, the columns to evaluate. A row passes a
    check only when it passes on every target column. Target columns this
    partition does not carry pass for this partition only.
    """

    present = set(partition.columns)
    targets = [tuple(column for column in columns if column in present) for columns in targets]
    results = [True] * len(checks)
    pending = [idx for idx, columns in enumerate(targets) if columns]
    if not pending or partition.empty:
        return tuple(results)

    for row in partition.to_dict(orient="records"):
        for idx in pending:
            if results[idx]:
                check = checks[idx]
                results[idx] = all(check.predicate(row, column) for column in targets[idx])
        if not any(results[idx] for idx in pending):
            break
    return tuple(results)


def _run_partitions(
    partitions: Sequence[PartitionT],
    evaluate: Callable[[PartitionT], tuple[bool, ...]],
    num_checks: int,
    max_workers: int | None,
) -> tuple[bool, ...]:
    seed = (True,) * num_checks
    if not partitions or num_checks == 0:
        return seed

    partials: list[tuple[bool, ...]] = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(evaluate, part): idx for idx, part in enumerate(partitions)}
        for future in concurrent.futures.as_completed(futures):
            result = future.result()
            log_event(LOGGER, "Partition evaluated", logging.DEBUG, partition=futures[future], results=result)
            partials.append(result)
    return reduce(combine_results, partials, seed)


def _failed_messages(checks: Sequence[Any], results: Sequence[bool]) -> list[str]:
    return [check.message for check, passed in zip(checks, results) if not passed]


def evaluate_checks(
    dataset: PartitionedDataset,
    checks: Sequence[Check],
    max_workers: int | None = None,
) -> list[str]:
    """Return the messages of checks that failed on at least one record."""

    checks = tuple(checks)
    results = _run_partitions(
        dataset.partitions,
        lambda part: evaluate_partition(part, checks),
        len(checks),
        max_workers,
    )
    return _failed_messages(checks, results)


def evaluate_tabular_checks(
    dataset: TabularDataset,
    checks: Sequence[TabularCheck],
    column_mapping: ColumnNameMapping,
    feature_shards: Collection[str] | str,
    max_workers: int | None = None,
) -> list[str]:
    """Return the messages of tabular checks that failed on at least one row."""

    checks = tuple(checks)
    shards = normalize_feature_shards(feature_shards)
    targets = _bind_tabular_targets(checks, column_mapping, shards, frozenset(dataset.columns))
    for check, columns in zip(checks, targets):
        if not columns:
            log_event(LOGGER, "Check skipped, column absent", check=check.name, role=check.role.value)

    results = _run_partitions(
        dataset.partitions,
        lambda part: evaluate_tabular_partition(part, checks, targets),
        len(checks),
        max_workers,
    )
    return _failed_messages(checks, results)
