"""CLI entrypoint for training-data sanity validation."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from core.config import load_config
from core.io_atomic import atomic_write_json
from core.logging import get_logger, setup_logging
from sanity.loading import load_tabular_dataset
from sanity.validators import VALIDATOR_VERSION, run_tabular_validation

LOGGER = get_logger(__name__)

REPORT_FILENAME = "sanity_report.json"


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(description="Sanity-check partitioned training data before model training.")
    parser.add_argument("--config", type=Path, required=True, help="Path to YAML validation config.")
    parser.add_argument(
        "--input-root",
        type=Path,
        default=None,
        help="Optional partition root overriding config input_root.",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help=f"Optional report path. Default: <input_root>/{REPORT_FILENAME}",
    )
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level.")
    return parser.parse_args()


def _write_report_best_effort(payload: dict[str, Any], report_path: Path) -> None:
    try:
        atomic_write_json(payload, report_path)
    except RuntimeError as exc:
        LOGGER.info("Validation report write failed (best-effort) | path=%s error=%s", report_path, exc)


def _build_runtime_error_payload(exc: Exception, args: argparse.Namespace) -> dict[str, Any]:
    return {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "validator_version": VALIDATOR_VERSION,
        "config": str(args.config),
        "passed": False,
        "messages": [],
        "error": {"type": type(exc).__name__, "message": str(exc)},
    }


def _fallback_report_path(args: argparse.Namespace) -> Path:
    if args.report is not None:
        return args.report.resolve()
    if args.input_root is not None:
        return args.input_root.resolve() / REPORT_FILENAME
    return args.config.resolve().parent / REPORT_FILENAME


def main() -> int:
    """Run sanity validation and return deterministic exit code."""

    args = parse_args()
    setup_logging(args.log_level)

    report_path = _fallback_report_path(args)
    try:
        config = load_config(args.config.resolve())
        if args.input_root is not None:
            config = dataclasses.replace(config, input_root=args.input_root.resolve())
        if args.report is None:
            report_path = config.input_root / REPORT_FILENAME

        dataset = load_tabular_dataset(config.input_root, config.file_glob, config.feature_shards)
        report = run_tabular_validation(dataset, config)
        _write_report_best_effort(report.to_dict(), report_path)

        exit_code = 0 if report.passed else 2
        LOGGER.info(
            "Sanity validation summary | task=%s intensity=%s partitions=%d rows=%d passed=%s exit_code=%d report=%s",
            report.task_type,
            report.intensity,
            report.total_partitions,
            report.total_rows,
            report.passed,
            exit_code,
            report_path,
        )
        for message in report.messages:
            LOGGER.info("Sanity check failure | %s", message)
        return exit_code
    except Exception as exc:
        _write_report_best_effort(_build_runtime_error_payload(exc, args), report_path)
        LOGGER.info("Sanity validation runtime error | exit_code=3 error=%s report=%s", exc, report_path)
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
