"""Validator sets keyed by training task type."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Any, Callable, Mapping

from sanity import predicates
from sanity.types import (
    NEGATIVE_CLASS_LABEL,
    POSITIVE_CLASS_LABEL,
    ColumnRole,
    LabeledRecord,
    TaskType,
    UnsupportedTaskType,
)

NON_FINITE_LABEL_MESSAGE = "Data contains row(s) with non-finite label(s)"
NON_BINARY_LABEL_MESSAGE = "Data contains row(s) with non-binary label(s)"
NEGATIVE_LABEL_MESSAGE = "Data contains row(s) with negative label(s)"
NON_FINITE_FEATURES_MESSAGE = "Data contains row(s) with non-finite feature(s)"
NON_FINITE_OFFSET_MESSAGE = "Data contains row(s) with non-finite offset(s)"
NON_FINITE_WEIGHT_MESSAGE = "Data contains row(s) with non-finite weight(s)"

RecordPredicate = Callable[[LabeledRecord], bool]
RowPredicate = Callable[[Mapping[str, Any], str], bool]


@dataclass(frozen=True)
class Check:
    """Record predicate paired with its diagnostic message."""

    name: str
    predicate: RecordPredicate
    message: str


@dataclass(frozen=True)
class TabularCheck:
    """Row predicate bound to a logical column role and a diagnostic message."""

    name: str
    predicate: RowPredicate
    role: ColumnRole
    message: str


FINITE_LABEL = Check("finite_label", predicates.finite_label, NON_FINITE_LABEL_MESSAGE)
BINARY_LABEL = Check("binary_label", predicates.binary_label, NON_BINARY_LABEL_MESSAGE)
NON_NEGATIVE_LABEL = Check("non_negative_label", predicates.non_negative_label, NEGATIVE_LABEL_MESSAGE)

BASE_CHECKS: tuple[Check, ...] = (
    Check("finite_features", predicates.finite_features, NON_FINITE_FEATURES_MESSAGE),
    Check("finite_offset", predicates.finite_offset, NON_FINITE_OFFSET_MESSAGE),
    Check("finite_weight", predicates.finite_weight, NON_FINITE_WEIGHT_MESSAGE),
)

_RECORD_CHECKS: Mapping[TaskType, tuple[Check, ...]] = MappingProxyType(
    {
        TaskType.LINEAR_REGRESSION: (FINITE_LABEL, *BASE_CHECKS),
        TaskType.LOGISTIC_REGRESSION: (BINARY_LABEL, *BASE_CHECKS),
        TaskType.POISSON_REGRESSION: (FINITE_LABEL, NON_NEGATIVE_LABEL, *BASE_CHECKS),
        TaskType.SMOOTHED_HINGE_SVM: (BINARY_LABEL, *BASE_CHECKS),
    }
)

TABULAR_FINITE_LABEL = TabularCheck(
    "finite_label", predicates.row_has_finite_label, ColumnRole.LABEL, NON_FINITE_LABEL_MESSAGE
)
TABULAR_BINARY_LABEL = TabularCheck(
    "binary_label", predicates.row_has_binary_label, ColumnRole.LABEL, NON_BINARY_LABEL_MESSAGE
)
TABULAR_NON_NEGATIVE_LABEL = TabularCheck(
    "non_negative_label", predicates.row_has_non_negative_label, ColumnRole.LABEL, NEGATIVE_LABEL_MESSAGE
)

TABULAR_BASE_CHECKS: tuple[TabularCheck, ...] = (
    TabularCheck("finite_features", predicates.row_has_finite_features, ColumnRole.FEATURES, NON_FINITE_FEATURES_MESSAGE),
    TabularCheck("finite_offset", predicates.row_has_finite_offset, ColumnRole.OFFSET, NON_FINITE_OFFSET_MESSAGE),
    TabularCheck("finite_weight", predicates.row_has_finite_weight, ColumnRole.WEIGHT, NON_FINITE_WEIGHT_MESSAGE),
)

_TABULAR_CHECKS: Mapping[TaskType, tuple[TabularCheck, ...]] = MappingProxyType(
    {
        TaskType.LINEAR_REGRESSION: (TABULAR_FINITE_LABEL, *TABULAR_BASE_CHECKS),
        TaskType.LOGISTIC_REGRESSION: (TABULAR_BINARY_LABEL, *TABULAR_BASE_CHECKS),
        TaskType.POISSON_REGRESSION: (TABULAR_FINITE_LABEL, TABULAR_NON_NEGATIVE_LABEL, *TABULAR_BASE_CHECKS),
        TaskType.SMOOTHED_HINGE_SVM: (TABULAR_BINARY_LABEL, *TABULAR_BASE_CHECKS),
    }
)


def _resolve_task_type(task_type: TaskType | str) -> TaskType:
    resolved = TaskType.parse(task_type)
    if resolved not in _RECORD_CHECKS or resolved not in _TABULAR_CHECKS:
        raise UnsupportedTaskType(f"No validators registered for task type: {resolved.value}")
    return resolved


def _uses_default_class_labels(positive_label: float, negative_label: float) -> bool:
    return positive_label == POSITIVE_CLASS_LABEL and negative_label == NEGATIVE_CLASS_LABEL


def checks_for(
    task_type: TaskType | str,
    *,
    positive_label: float = POSITIVE_CLASS_LABEL,
    negative_label: float = NEGATIVE_CLASS_LABEL,
) -> tuple[Check, ...]:
    """Return the ordered record checks for a task type.

    Label checks come first, followed by the feature/offset/weight checks
    shared by every task. Non-default class labels are bound into the
    binary-label predicate.
    """

    checks = _RECORD_CHECKS[_resolve_task_type(task_type)]
    if _uses_default_class_labels(positive_label, negative_label):
        return checks
    return tuple(
        Check(
            check.name,
            partial(predicates.binary_label, positive_label=positive_label, negative_label=negative_label),
            check.message,
        )
        if check is BINARY_LABEL
        else check
        for check in checks
    )


def checks_for_tabular(
    task_type: TaskType | str,
    *,
    positive_label: float = POSITIVE_CLASS_LABEL,
    negative_label: float = NEGATIVE_CLASS_LABEL,
) -> tuple[TabularCheck, ...]:
    """Return the ordered tabular checks for a task type."""

    checks = _TABULAR_CHECKS[_resolve_task_type(task_type)]
    if _uses_default_class_labels(positive_label, negative_label):
        return checks
    return tuple(
        TabularCheck(
            check.name,
            partial(predicates.row_has_binary_label, positive_label=positive_label, negative_label=negative_label),
            check.role,
            check.message,
        )
        if check is TABULAR_BINARY_LABEL
        else check
        for check in checks
    )
