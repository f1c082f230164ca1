"""Command line entry point: convert a SIRF form into YAML and xlsx output.

Reads a PDF (or a pdf2json JSON dump), extracts the form metadata and item
table, and writes the results into a timestamped run directory.
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from .core.processor import DocumentProcessor
from .operations.table_extraction import TableExtractionOperation
from .schemas.config import STRATEGIES, ExtractionConfig, ProcessorConfig
from .schemas.document import ExtractionResult
from .writers.workbook import SirfWorkbookWriter

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_OUTPUT_DIR = Path("runs")

SUPPORTED_SUFFIXES = (".pdf", ".json")

logger = logging.getLogger(__name__)


def setup_logging(log_level: str, log_file: Optional[Path] = None) -> None:
    """Configure the root logger.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR
        log_file: Also write the log here (UTF-8) when given
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def validate_arguments(source_path: Path) -> None:
    """Check the input path before any work starts.

    Raises:
        SystemExit: With code 1 when the path is unusable
    """
    if not source_path.exists():
        _fail(f"input file not found: {source_path}")
    if not source_path.is_file():
        _fail(f"Path is not a file: {source_path}")
    if source_path.suffix.lower() not in SUPPORTED_SUFFIXES:
        _fail(
            f"unsupported input type '{source_path.suffix}' "
            f"(expected {' or '.join(SUPPORTED_SUFFIXES)})"
        )


def create_run_dir(parent_dir: Path) -> Path:
    """Create parent_dir/run_<YYYY-MM-DD_HHMMSS>/ and return it."""
    run_dir = parent_dir / datetime.now().strftime("run_%Y-%m-%d_%H%M%S")
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sirf-reader",
        description="Convert Stock Issue Request Form PDFs into spreadsheet rows",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  sirf-reader form.pdf
  sirf-reader form.pdf -o ./my_runs --strategy dynamic
  sirf-reader form.json --log-level DEBUG

run directory layout (one per invocation, inside --output-dir):
  cache/fragments/page_NNN.json   fragments per page
  results/extraction.yaml         metadata, table rows, projection grids
  workbooks/<input stem>.xlsx     SIRF sheet + one sheet per page
  logs/run.log

Thresholds are read from SIRF_<FIELD> environment variables (a .env file
in the working directory is honoured), e.g. SIRF_ROW_TOLERANCE=0.8.
        """,
    )
    parser.add_argument("source", type=Path, help="PDF file or pdf2json JSON dump")
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=None,
        help=f"where run directories are created (default: $SIRF_OUTPUT_DIR or ./{DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="table strategy (default: $SIRF_STRATEGY or auto)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=LOG_LEVELS,
        help="logging level (default: INFO)",
    )
    parser.add_argument(
        "--no-workbook",
        action="store_true",
        help="do not render the xlsx workbook",
    )
    return parser


def _print_summary(rows: Sequence[Tuple[str, object]]) -> None:
    rule = "=" * 60
    print()
    print(rule)
    print("Conversion completed successfully!")
    print(rule)
    for label, value in rows:
        print(f"{label + ':':<17}{value}")
    print(rule)


def _summary_rows(
    run_dir: Path,
    processor: DocumentProcessor,
    result: ExtractionResult,
    workbook_path: Optional[Path],
    log_file: Path,
) -> List[Tuple[str, object]]:
    found = sum(1 for value in result.metadata.values() if value)
    rows: List[Tuple[str, object]] = [
        ("Run directory", run_dir),
        ("Pages processed", processor.num_pages),
        ("Metadata fields", f"{found}/{len(result.metadata)}"),
        ("Strategy", result.strategy or "none (no table detected)"),
        ("Table rows", len(result.rows)),
        ("Results", run_dir / "results" / "extraction.yaml"),
    ]
    if workbook_path is not None:
        rows.append(("Workbook", workbook_path))
    rows.append(("Log", log_file))
    return rows


def main(argv: Optional[List[str]] = None) -> int:
    """Run one conversion.

    Returns:
        Process exit code: 0 on success, 1 on failure
    """
    args = build_parser().parse_args(argv)

    try:
        load_dotenv()
        validate_arguments(args.source)

        output_dir = args.output_dir or Path(os.getenv("SIRF_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR)
        run_dir = create_run_dir(output_dir)
        log_file = run_dir / "logs" / "run.log"
        setup_logging(args.log_level, log_file)

        logger.info(f"Converting {args.source} into {run_dir}")

        overrides = {"strategy": args.strategy} if args.strategy else {}
        extraction_config = ExtractionConfig.from_env(**overrides)
        logger.info(f"Table strategy: {extraction_config.strategy}")

        processor = DocumentProcessor(
            source=args.source,
            config=ProcessorConfig(state_dir=run_dir, log_level=args.log_level),
        )

        result = TableExtractionOperation(processor, config=extraction_config).execute()

        workbook_path = None
        if not args.no_workbook:
            name = args.source.stem
            processor.state_manager.save_workbook(name, SirfWorkbookWriter().to_bytes(result))
            workbook_path = run_dir / "workbooks" / f"{name}.xlsx"

        _print_summary(_summary_rows(run_dir, processor, result, workbook_path, log_file))
        return 0

    except KeyboardInterrupt:
        print("\nConversion interrupted by user", file=sys.stderr)
        return 1

    except Exception as e:
        logger.exception(f"Conversion failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
