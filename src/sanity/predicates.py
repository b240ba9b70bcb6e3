"""Per-record predicates used by the sanity checks.

Every predicate returns ``True`` when the tested property holds and
``False`` otherwise. Predicates do not raise on well-typed input, which
lets the reduction engine treat ``False`` as the only failure signal.

Two flavors exist:

* record predicates read a fixed field of a :class:`LabeledRecord`;
* row predicates read a named column of a tabular row, because the
  physical column names of tabular input are configurable.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

import numpy as np

from sanity.types import NEGATIVE_CLASS_LABEL, POSITIVE_CLASS_LABEL, LabeledRecord


def _is_finite(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, np.ndarray))


def _vector_values(value: Any) -> np.ndarray:
    """Extract component values from a sparse-vector-like cell."""

    if value is None:
        return np.array([math.nan])
    if isinstance(value, Mapping) and _is_sequence(value.get("values")):
        # struct-encoded vector: {"type", "size", "indices", "values"}
        raw: Iterable[Any] = value["values"]
    elif isinstance(value, Mapping):
        raw = list(value.values())
    elif hasattr(value, "values") and not isinstance(value, np.ndarray):
        # pandas Series and sparse vector types expose stored components here
        raw = value.values() if callable(value.values) else value.values
    elif np.isscalar(value):
        raw = [value]
    else:
        raw = value
    try:
        return np.asarray(raw, dtype=float).ravel()
    except (TypeError, ValueError):
        return np.array([math.nan])


def finite_label(record: LabeledRecord) -> bool:
    """Return True when the record label is neither NaN nor infinite."""

    return _is_finite(record.label)


def binary_label(
    record: LabeledRecord,
    positive_label: float = POSITIVE_CLASS_LABEL,
    negative_label: float = NEGATIVE_CLASS_LABEL,
) -> bool:
    """Return True when the record label is one of the two class labels."""

    return record.label == positive_label or record.label == negative_label


def non_negative_label(record: LabeledRecord) -> bool:
    """Return True when the record label is >= 0."""

    return record.label >= 0


def finite_features(record: LabeledRecord) -> bool:
    """Return True when every feature value is finite; empty features pass."""

    return all(_is_finite(value) for value in record.features.values())


def finite_offset(record: LabeledRecord) -> bool:
    """Return True when the record offset is finite."""

    return _is_finite(record.offset)


def finite_weight(record: LabeledRecord) -> bool:
    """Return True when the record weight is finite."""

    return _is_finite(record.weight)


def row_has_finite_label(row: Mapping[str, Any], column: str) -> bool:
    """Return True when the label column of the row is finite."""

    return _is_finite(_as_float(row[column]))


def row_has_binary_label(
    row: Mapping[str, Any],
    column: str,
    positive_label: float = POSITIVE_CLASS_LABEL,
    negative_label: float = NEGATIVE_CLASS_LABEL,
) -> bool:
    """Return True when the label column holds one of the two class labels."""

    label = _as_float(row[column])
    return label == positive_label or label == negative_label


def row_has_non_negative_label(row: Mapping[str, Any], column: str) -> bool:
    """Return True when the label column is >= 0."""

    return _as_float(row[column]) >= 0


def row_has_finite_features(row: Mapping[str, Any], column: str) -> bool:
    """Return True when every component of the feature column is finite."""

    values = _vector_values(row[column])
    return bool(np.isfinite(values).all())


def row_has_finite_offset(row: Mapping[str, Any], column: str) -> bool:
    """Return True when the offset column of the row is finite."""

    return _is_finite(_as_float(row[column]))


def row_has_finite_weight(row: Mapping[str, Any], column: str) -> bool:
    """Return True when the weight column of the row is finite."""

    return _is_finite(_as_float(row[column]))
