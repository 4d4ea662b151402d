"""Command-line interface for extracting and classifying documents.

Provides subcommands for single files, batch folders with CSV export,
and listing the configured categories.
"""

import argparse
import csv
import json
import sys
import time
from pathlib import Path

from smartdoc.classification.categories import load_categories
from smartdoc.ocr.exceptions import RecognitionModelError
from smartdoc.ocr.models import IMAGE_EXTENSIONS, PDF_EXTENSIONS
from smartdoc.pipeline import DocumentPipeline, DocumentRecord
from smartdoc.utils.config import load_config
from smartdoc.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_CSV_COLUMNS = [
    "filename",
    "status",
    "source",
    "category_id",
    "category",
    "reason",
    "characters",
]


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all supported document files in a directory.

    Args:
        input_dir: Directory to scan for documents.

    Returns:
        Sorted list of document file paths.
    """
    supported = PDF_EXTENSIONS | IMAGE_EXTENSIONS
    return sorted(
        p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() in supported
    )


def _category_names(pipeline: DocumentPipeline) -> dict[int, str]:
    return {c.id: c.name for c in pipeline.categories.list_all()}


def _record_to_row(record: DocumentRecord, names: dict[int, str]) -> dict[str, object]:
    return {
        "filename": record.filename,
        "status": record.status.value,
        "source": record.source.value,
        "category_id": record.category_id,
        "category": names.get(record.category_id),
        "reason": record.reason,
        "characters": len(record.extracted_text),
    }


def process_folder(
    input_dir: Path,
    output_csv: Path,
    pipeline: DocumentPipeline,
    verbose: bool = False,
) -> dict[str, int]:
    """Process all documents in a folder and export results to CSV.

    Args:
        input_dir: Directory containing document files.
        output_csv: Path for the output CSV file.
        pipeline: Configured extraction and classification pipeline.
        verbose: Whether to print per-file outcomes.

    Returns:
        Summary counts: total, successful, empty, failed, recognized.
    """
    files = _find_documents(input_dir)
    if not files:
        logger.warning("No documents found in %s", input_dir)
        return {"total": 0, "successful": 0, "empty": 0, "failed": 0, "recognized": 0}

    logger.info("Found %d documents to process", len(files))
    start_time = time.time()
    records = pipeline.process_many(files)
    logger.info("Batch finished in %.2fs", time.time() - start_time)

    names = _category_names(pipeline)
    rows = [_record_to_row(r, names) for r in records]
    if verbose:
        for row in rows:
            print(f"{row['filename']}: {row['status']} -> {row['category'] or '-'}")

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    statuses = [r.status.value for r in records]
    summary = {
        "total": len(records),
        "successful": statuses.count("success"),
        "empty": statuses.count("empty_no_text"),
        "failed": statuses.count("failed"),
        "recognized": sum(1 for r in records if r.category_id is not None),
    }
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write result rows to a CSV file.

    Args:
        rows: One dictionary per processed document.
        output_path: Path for the output CSV file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout."""
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:        {summary['total']}")
    print(f"Successful:   {summary['successful']}")
    print(f"No text:      {summary['empty']}")
    print(f"Failed:       {summary['failed']}")
    print(f"Recognized:   {summary['recognized']}")
    print(f"Unrecognized: {summary['total'] - summary['recognized']}")
    print(f"Output:       {output_csv}")


def extract_single(file_path: Path, pipeline: DocumentPipeline) -> dict[str, object]:
    """Process a single document and return a JSON-ready result.

    Args:
        file_path: Path to the document file.
        pipeline: Configured extraction and classification pipeline.

    Returns:
        Dictionary with filename, status, category, and text.
    """
    record = pipeline.process(file_path)
    result = _record_to_row(record, _category_names(pipeline))
    del result["characters"]
    result["text"] = record.extracted_text
    return result


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="SmartDoc OCR: extract text and classify documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="Path to config YAML"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of documents")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with documents"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-w", "--workers", type=int, default=None, help="Concurrent documents"
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    single_parser = subparsers.add_parser("extract", help="Process a single document")
    single_parser.add_argument("file", type=Path, help="Document file to process")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    subparsers.add_parser("categories", help="List configured categories")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command == "batch" and not args.input_dir.is_dir():
        print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
        sys.exit(1)
    if args.command == "extract" and not args.file.exists():
        print(f"Error: {args.file} does not exist", file=sys.stderr)
        sys.exit(1)

    if args.command == "categories":
        store = load_categories(Path(config.classification.categories_path))
        for category in store.list_all():
            print(f"{category.id}\t{category.name}")
        return

    try:
        pipeline = DocumentPipeline.from_config(config)
    except RecognitionModelError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.command == "batch":
        if args.workers:
            pipeline.max_workers = args.workers
        process_folder(args.input_dir, args.output, pipeline, args.verbose)
    elif args.command == "extract":
        result = extract_single(args.file, pipeline)
        output_str = json.dumps(result, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)


if __name__ == "__main__":
    main()
