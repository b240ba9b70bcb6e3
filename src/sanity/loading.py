"""Read partition files into a tabular dataset."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Collection, Sequence

import pandas as pd

from core.logging import get_logger, log_event
from core.paths import discover_partition_files
from sanity.partitions import TabularDataset

LOGGER = get_logger(__name__)


def parse_vector_cell(value: Any) -> Any:
    """Decode a JSON list/object written as text into a vector-like value.

    Text that does not decode is returned unchanged so the feature check
    reports it.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text.startswith(("[", "{")):
        return value
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return value


def read_partition(path: Path, feature_shards: Collection[str] = ()) -> pd.DataFrame:
    """Read one parquet or csv partition.

    CSV has no vector type, so text cells of feature-shard columns are
    decoded from their JSON form.
    """
    suffix = path.suffix.lower()
    try:
        if suffix == ".parquet":
            return pd.read_parquet(path)
        if suffix == ".csv":
            frame = pd.read_csv(path)
            for shard in feature_shards:
                if shard in frame.columns and not pd.api.types.is_numeric_dtype(frame[shard]):
                    frame[shard] = frame[shard].map(parse_vector_cell)
            return frame
    except Exception as exc:
        raise RuntimeError(f"Failed to read partition: {path}") from exc
    raise ValueError(f"Unsupported partition format: {path}")


def load_tabular_dataset(
    input_root: Path,
    pattern: str = "**/*",
    feature_shards: Collection[str] = (),
) -> TabularDataset:
    """Load every partition file under ``input_root`` into one dataset."""
    paths = discover_partition_files(input_root, pattern)
    if not paths:
        log_event(LOGGER, "No partition files found", logging.WARNING, input_root=input_root, pattern=pattern)
    return load_partitions(paths, feature_shards)


def load_partitions(paths: Sequence[Path], feature_shards: Collection[str] = ()) -> TabularDataset:
    """Load the given partition files; the schema is the union of their columns."""
    frames = [read_partition(path, feature_shards) for path in paths]
    log_event(LOGGER, "Partitions loaded", files=len(frames), rows=sum(len(frame) for frame in frames))
    return TabularDataset.from_frames(frames)
