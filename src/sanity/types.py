"""Shared domain types for training-data sanity checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

POSITIVE_CLASS_LABEL = 1.0
NEGATIVE_CLASS_LABEL = 0.0


class UnsupportedTaskType(ValueError):
    """Raised when no validator set is registered for a task type."""


class TaskType(str, Enum):
    """Training task that decides which label constraint applies."""

    LINEAR_REGRESSION = "linear_regression"
    LOGISTIC_REGRESSION = "logistic_regression"
    POISSON_REGRESSION = "poisson_regression"
    SMOOTHED_HINGE_SVM = "smoothed_hinge_svm"

    @classmethod
    def parse(cls, value: TaskType | str) -> TaskType:
        """Resolve an enum member from a member or its string value."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise UnsupportedTaskType(f"Unsupported task type: {value!r}") from exc


class ValidationIntensity(str, Enum):
    """How much of the dataset gets validated."""

    FULL = "full"
    SAMPLED = "sampled"
    DISABLED = "disabled"

    @classmethod
    def parse(cls, value: ValidationIntensity | str) -> ValidationIntensity:
        """Resolve an enum member from a member or its string value."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in cls)
            raise ValueError(f"Unknown validation intensity: {value!r} (expected one of: {allowed})") from exc


class ColumnRole(str, Enum):
    """Logical column roles of a tabular training dataset."""

    LABEL = "label"
    FEATURES = "features"
    OFFSET = "offset"
    WEIGHT = "weight"


DEFAULT_COLUMN_NAMES: Mapping[ColumnRole, str] = MappingProxyType(
    {
        ColumnRole.LABEL: "response",
        ColumnRole.FEATURES: "features",
        ColumnRole.OFFSET: "offset",
        ColumnRole.WEIGHT: "weight",
    }
)


@dataclass(frozen=True)
class LabeledRecord:
    """Single typed training example."""

    label: float
    features: Mapping[int, float] = field(default_factory=dict)
    offset: float = 0.0
    weight: float = 1.0


@dataclass(frozen=True)
class ColumnNameMapping:
    """Logical role to physical column name lookup."""

    names: Mapping[ColumnRole, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # partial overrides are merged over the defaults
        merged = dict(DEFAULT_COLUMN_NAMES)
        for role, column in self.names.items():
            merged[ColumnRole(role)] = column
        for role, column in merged.items():
            if not isinstance(column, str) or not column.strip():
                raise ValueError(f"Column name for role '{role.value}' must be a non-empty string.")
        object.__setattr__(self, "names", MappingProxyType(merged))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> ColumnNameMapping:
        """Build a mapping from a partial role-name dictionary."""

        if not raw:
            return cls()
        overrides: dict[ColumnRole, str] = {}
        for key, value in raw.items():
            try:
                role = ColumnRole(str(key).strip().lower())
            except ValueError as exc:
                allowed = ", ".join(item.value for item in ColumnRole)
                raise ValueError(f"Unknown column role: {key!r} (expected one of: {allowed})") from exc
            overrides[role] = str(value)
        return cls(names=overrides)

    def __getitem__(self, role: ColumnRole | str) -> str:
        return self.names[ColumnRole(role)]

    def to_dict(self) -> dict[str, str]:
        """Serialize as a JSON-ready dictionary."""

        return {role.value: column for role, column in self.names.items()}
