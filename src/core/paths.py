"""Discovery of partition files under a dataset root."""

from __future__ import annotations

from pathlib import Path

PARTITION_SUFFIXES = (".parquet", ".csv")
SYSTEM_NAMES = {"thumbs.db", "desktop.ini", "_success"}
SYSTEM_DIRS = {"__macosx"}


def discover_partition_files(input_root: Path, pattern: str = "**/*") -> list[Path]:
    """Return sorted parquet/csv partition files under the input root."""
    if not input_root.exists():
        raise FileNotFoundError(f"Input root does not exist: {input_root}")
    if not input_root.is_dir():
        raise NotADirectoryError(f"Input root is not a directory: {input_root}")

    files = [
        path
        for path in input_root.glob(pattern)
        if path.is_file()
        and path.suffix.lower() in PARTITION_SUFFIXES
        and not _is_hidden_or_system(path, input_root)
    ]
    return sorted(files)


def _is_hidden_or_system(path: Path, input_root: Path) -> bool:
    for part in path.relative_to(input_root).parts:
        lower_part = part.lower()
        if part.startswith((".", "_")) or lower_part in SYSTEM_DIRS or lower_part in SYSTEM_NAMES:
            return True
    return False
