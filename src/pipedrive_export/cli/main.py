"""Main CLI entry point."""

import argparse
import logging
from pathlib import Path

from pipedrive_export.models.object_type import ObjectType


def main(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="pipedrive-export", description="Export Pipedrive CRM records to CSV")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # export
    export_parser = subparsers.add_parser("export", help="Export object types to CSV files")
    export_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to job config YAML (company_domain, api_token, object_types, export_dir)",
    )
    export_parser.add_argument(
        "--domain",
        type=str,
        default=None,
        help="Pipedrive company domain (default: $PIPEDRIVE_COMPANY_DOMAIN)",
    )
    export_parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Pipedrive API token (default: $PIPEDRIVE_API_TOKEN)",
    )
    export_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for CSV files (default: export_data)",
    )
    export_parser.add_argument(
        "--types",
        nargs="+",
        default=None,
        metavar="TYPE",
        help=f"Object types to export (default: all). Choices: {', '.join(t.value for t in ObjectType)}",
    )
    export_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress at INFO level",
    )

    # types
    subparsers.add_parser("types", help="List exportable object types")

    args = parser.parse_args(argv)

    if args.command == "export":
        _run_export(args)
    elif args.command == "types":
        _run_types()
    else:
        parser.print_help()


def _load_job(args: argparse.Namespace):
    """Build the export job from config file, environment and flags (flags win)."""
    from pipedrive_export.models.job import ExportJob

    overrides = {
        "company_domain": args.domain,
        "api_token": args.token,
        "object_types": args.types,
        "export_dir": args.output_dir,
    }
    try:
        if args.config:
            job = ExportJob.from_yaml(args.config, **overrides)
        else:
            job = ExportJob.from_env(**overrides)
    except (OSError, ValueError) as e:
        raise SystemExit(f"Invalid export configuration: {e}")
    return job


def _run_export(args: argparse.Namespace) -> None:
    """Run export command."""
    from pipedrive_export.connectors.pipedrive import PipedriveConnector
    from pipedrive_export.export import CsvExporter

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs full request URLs, which carry the API token
    logging.getLogger("httpx").setLevel(logging.WARNING)
    job = _load_job(args)

    connector = PipedriveConnector(job.connection)
    try:
        exporter = CsvExporter(connector, job.export_dir)
        results = exporter.export_all(job.object_types)
    finally:
        connector.close()

    for files in results.values():
        for result in files:
            print(f"Wrote {result.rows} rows to {result.path}")


def _run_types() -> None:
    """Run types command."""
    from pipedrive_export.connectors.pipedrive.constants import ENDPOINTS, PRICES_FILE_STEM

    for object_type, descriptor in ENDPOINTS.items():
        files = f"{descriptor.file_stem}.csv"
        if object_type is ObjectType.PRODUCT:
            files += f", {PRICES_FILE_STEM}.csv"
        print(f"  {object_type.value:<10} {descriptor.path:<12} -> {files}")


if __name__ == "__main__":
    main()
