"""Partitioned dataset containers consumed by the reduction engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np
import pandas as pd

from sanity.types import LabeledRecord


@dataclass(frozen=True)
class PartitionedDataset:
    """Typed records split into independently processed partitions."""

    partitions: tuple[tuple[LabeledRecord, ...], ...]

    @classmethod
    def from_partitions(cls, partitions: Iterable[Iterable[LabeledRecord]]) -> PartitionedDataset:
        """Build from an iterable of record partitions."""

        return cls(partitions=tuple(tuple(part) for part in partitions))

    @classmethod
    def from_records(cls, records: Sequence[LabeledRecord], num_partitions: int = 1) -> PartitionedDataset:
        """Split records into contiguous, nearly equal partitions."""

        if num_partitions < 1:
            raise ValueError("num_partitions must be >= 1.")
        bounds = np.linspace(0, len(records), num_partitions + 1).astype(int)
        return cls(
            partitions=tuple(tuple(records[start:stop]) for start, stop in zip(bounds[:-1], bounds[1:]))
        )

    @classmethod
    def empty(cls) -> PartitionedDataset:
        """Return a dataset with no partitions."""

        return cls(partitions=())

    @property
    def num_partitions(self) -> int:
        return len(self.partitions)

    def count(self) -> int:
        """Return the total number of records."""

        return sum(len(part) for part in self.partitions)

    def __iter__(self) -> Iterator[LabeledRecord]:
        for part in self.partitions:
            yield from part

    def sample(self, fraction: float, rng: np.random.Generator) -> PartitionedDataset:
        """Keep each record independently with probability ``fraction``."""

        sampled: list[tuple[LabeledRecord, ...]] = []
        for part in self.partitions:
            keep = rng.random(len(part)) < fraction
            sampled.append(tuple(record for record, kept in zip(part, keep) if kept))
        return PartitionedDataset(partitions=tuple(sampled))


@dataclass(frozen=True)
class TabularDataset:
    """Tabular rows stored as DataFrame partitions; ``columns`` is the union of their columns."""

    partitions: tuple[pd.DataFrame, ...]
    columns: tuple[str, ...]

    @classmethod
    def from_frames(cls, frames: Iterable[pd.DataFrame], columns: Sequence[str] | None = None) -> TabularDataset:
        """Build from DataFrame partitions.

        The schema is the union of all partition columns in first-seen order
        unless given. A partition may lack some schema columns.
        """

        parts = tuple(frames)
        if columns is None:
            seen: dict[str, None] = {}
            for part in parts:
                seen.update((str(col), None) for col in part.columns)
            columns = tuple(seen)
        return cls(partitions=parts, columns=tuple(columns))

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, num_partitions: int = 1) -> TabularDataset:
        """Split one DataFrame into contiguous row partitions."""

        if num_partitions < 1:
            raise ValueError("num_partitions must be >= 1.")
        bounds = np.linspace(0, len(frame), num_partitions + 1).astype(int)
        parts = tuple(
            frame.iloc[start:stop].reset_index(drop=True) for start, stop in zip(bounds[:-1], bounds[1:])
        )
        return cls(partitions=parts, columns=tuple(str(col) for col in frame.columns))

    @property
    def num_partitions(self) -> int:
        return len(self.partitions)

    def count(self) -> int:
        """Return the total number of rows."""

        return sum(len(part) for part in self.partitions)

    def has_column(self, column: str) -> bool:
        return column in self.columns

    def empty(self) -> TabularDataset:
        """Return an empty dataset with this dataset's schema."""

        return TabularDataset(partitions=(), columns=self.columns)

    def sample(self, fraction: float, rng: np.random.Generator) -> TabularDataset:
        """Keep each row independently with probability ``fraction``."""

        sampled = tuple(
            part.loc[rng.random(len(part)) < fraction].reset_index(drop=True) for part in self.partitions
        )
        return TabularDataset(partitions=sampled, columns=self.columns)
