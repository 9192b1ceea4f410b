"""Command-line interface for certificate mapping and warranty extraction.

Subcommands map Document AI JSON exports to onboarding data, one file or
a whole folder at a time (with CSV export), read warranty documents, and
check a field mapping profile against its example values.
"""

import argparse
import csv
import json
import mimetypes
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from fleetops.ai.providers import ChatProvider
from fleetops.ai.warranty_ai import WarrantyAIExtractor
from fleetops.documents.text_reader import DocumentTextReader
from fleetops.extraction.warranty import extract_yacht_fields
from fleetops.mapping.field_mappings import FieldMappingSet
from fleetops.mapping.onboarding import OnboardingMappingService
from fleetops.mapping.yacht_mapper import GoogleDocumentAIYachtMapper
from fleetops.utils.config import load_config
from fleetops.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_META_COLUMNS = [
    "filename",
    "status",
    "field_count",
    "completion_percentage",
    "validation_passed",
    "error",
]


def _load_fields(path: Path) -> dict[str, Any]:
    """Read Document AI fields from a JSON export.

    Accepts either a flat ``{label: value}`` object or one wrapped in a
    ``fields`` key.
    """
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} does not contain a JSON object")
    fields = data.get("fields", data)
    if not isinstance(fields, dict):
        raise ValueError(f"{path.name} has a non-object 'fields' entry")
    return fields


def map_file(path: Path) -> dict[str, Any]:
    """Map one Document AI JSON export to onboarding sections.

    Args:
        path: JSON file with certificate fields.

    Returns:
        ``basic_info`` and ``specifications`` sections.
    """
    result = GoogleDocumentAIYachtMapper().map_fields(_load_fields(path))
    return {"basic_info": result.basic_info, "specifications": result.specifications}


def process_folder(input_dir: Path, output_csv: Path, verbose: bool = False) -> dict[str, int]:
    """Map every JSON export in a folder and write one CSV row per file.

    A file that cannot be read or mapped gets a ``failed`` row; the rest
    of the batch continues.

    Args:
        input_dir: Directory containing ``*.json`` exports.
        output_csv: Path for the output CSV file.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    config = load_config()
    mapper = GoogleDocumentAIYachtMapper()
    onboarding = OnboardingMappingService(config.mapping)

    files = sorted(input_dir.glob("*.json"))
    if not files:
        logger.warning("No JSON files found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d certificate exports to map", len(files))

    rows: list[dict[str, Any]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Mapping [{i}/{len(files)}]: {file_path.name}")
        try:
            result = mapper.map_fields(_load_fields(file_path))
        except (OSError, ValueError) as exc:
            logger.error("Failed to map %s: %s", file_path.name, exc)
            rows.append({"filename": file_path.name, "status": "failed", "error": str(exc)})
            failed += 1
            continue

        record = result.onboarding_record()
        validation = onboarding.validate(record)
        row: dict[str, Any] = {
            "filename": file_path.name,
            "status": "success",
            "field_count": result.field_count,
            "completion_percentage": onboarding.completion_percentage(list(record)),
            "validation_passed": validation.is_valid,
            "error": None,
        }
        row.update(record)
        rows.append(row)
        successful += 1

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, Any]], output_path: Path) -> None:
    if not rows:
        return

    all_keys: set[str] = set()
    for r in rows:
        all_keys.update(r.keys())

    field_columns = sorted(all_keys - set(_META_COLUMNS))
    columns = [c for c in _META_COLUMNS if c in all_keys] + field_columns

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Mapping Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def read_warranty(file_path: Path) -> dict[str, Any]:
    """Read a warranty document and extract warranty and yacht details.

    Args:
        file_path: PDF, image or text file.

    Returns:
        Dictionary with filename, warranty_data and yacht_data.
    """
    config = load_config()
    content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    read = DocumentTextReader(config).read(
        file_path.read_bytes(), content_type, file_path.name
    )
    extractor = WarrantyAIExtractor(ChatProvider.from_config("openai", config.ai))
    return {
        "filename": file_path.name,
        "warranty_data": extractor.extract(read.text),
        "yacht_data": extract_yacht_fields(read.text),
    }


def check_mappings(
    profile: Path | None = None,
    disable: list[str] | None = None,
    enable: list[str] | None = None,
    remove: list[str] | None = None,
) -> dict[str, Any]:
    """Run every mapping's examples through its conversion.

    Mappings named in ``disable``, ``enable`` or ``remove`` are changed
    first and the edited profile is saved back before the check.

    Args:
        profile: Mapping profile YAML; defaults to the configured one.
        disable: Mapping ids to switch off.
        enable: Mapping ids to switch on.
        remove: Mapping ids to delete.

    Returns:
        Mapping id to example results, the active source-to-target map, and
        the number of failing mappings.
    """
    path = profile or Path(load_config().mapping.field_mappings_path)
    mapping_set = FieldMappingSet(path)

    by_id = {m.id: m for m in mapping_set.mappings}
    toggles = [(i, False) for i in disable or []] + [(i, True) for i in enable or []]
    for mapping_id, active in toggles:
        if mapping_id not in by_id:
            raise ValueError(f"Unknown mapping: {mapping_id}")
        mapping_set.upsert(replace(by_id[mapping_id], is_active=active))
    for mapping_id in remove or []:
        if not mapping_set.remove(mapping_id):
            raise ValueError(f"Unknown mapping: {mapping_id}")
    if toggles or remove:
        mapping_set.save(path)

    results: dict[str, list[dict[str, Any]]] = {}
    failing = 0
    for mapping in mapping_set.mappings:
        samples = FieldMappingSet.test_mapping(mapping)
        results[mapping.id] = [
            {"input": s.input, "output": s.output, "valid": s.valid} for s in samples
        ]
        if not all(s.valid for s in samples):
            failing += 1
    return {
        "mappings": results,
        "active": mapping_set.runtime_mapping(),
        "failing": failing,
    }


def _emit(result: dict[str, Any], output: Path | None) -> None:
    output_str = json.dumps(result, indent=2, default=str)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(output_str)
        print(f"Output written to {output}")
    else:
        print(output_str)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Fleet operations document tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    map_parser = subparsers.add_parser(
        "map", help="Map a Document AI JSON export to onboarding data"
    )
    map_parser.add_argument("file", type=Path, help="Document AI JSON file")
    map_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    batch_parser = subparsers.add_parser(
        "batch", help="Map a folder of Document AI JSON exports to CSV"
    )
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with JSON exports"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    warranty_parser = subparsers.add_parser(
        "warranty", help="Extract warranty data from a document"
    )
    warranty_parser.add_argument("file", type=Path, help="PDF, image or text file")
    warranty_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    mappings_parser = subparsers.add_parser(
        "mappings", help="Test a field mapping profile against its examples"
    )
    mappings_parser.add_argument(
        "-p", "--profile", type=Path, help="Mapping profile YAML (default: from config)"
    )
    for flag, verb in (
        ("--disable", "Switch off"),
        ("--enable", "Switch on"),
        ("--remove", "Delete"),
    ):
        mappings_parser.add_argument(
            flag,
            action="append",
            metavar="ID",
            help=f"{verb} a mapping and save the profile",
        )
    mappings_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.verbose)
    elif args.command in ("map", "warranty"):
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        if args.command == "map":
            result = map_file(args.file)
        else:
            result = read_warranty(args.file)
        _emit(result, args.output)
    elif args.command == "mappings":
        try:
            result = check_mappings(args.profile, args.disable, args.enable, args.remove)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        _emit(result, args.output)
        if result["failing"]:
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
