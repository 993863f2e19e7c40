from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

from . import __version__
from .config import ConfigManager
from .core import InMemoryJobStore, TransferWorker, journal_path_for, summarize_journal, validate_journal
from .models import Job
from .providers import default_registry, local_photos
from .utils.logger import configure_logging


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    print(f"portability-copier v{__version__}")
    try:
        config = ConfigManager(Path(args.config) if args.config else None)
    except (OSError, ValueError) as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        sys.exit(2)
    errors = config.validate_config()
    if errors:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        sys.exit(2)

    log_file = args.log_file or config.get("logging.log_file")
    configure_logging(
        level=args.log_level or config.get("logging.level", "INFO"),
        log_file=Path(log_file) if log_file else None,
    )

    if args.command == "services":
        sys.exit(_run_services(args))
    elif args.command == "copy":
        sys.exit(_run_copy(args, config))
    elif args.command == "status":
        sys.exit(_run_status(args, config))
    elif args.command == "config":
        sys.exit(_run_config(args, config))
    parser.print_help()
    sys.exit(2)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portability_copier")
    parser.add_argument("--config", help="Path to config file", default=None)
    parser.add_argument("--log-file", help="Write warnings and errors to this file", default=None)
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR", default=None)

    subparsers = parser.add_subparsers(dest="command")

    services = subparsers.add_parser("services", help="List export/import services")
    services.add_argument("--data-type", default=None, help="Only this data type, e.g. photos")

    copy = subparsers.add_parser("copy", help="Copy photos from one folder tree to another")
    copy.add_argument("--source", required=True, help="Source folder")
    copy.add_argument("--dest", required=True, help="Destination folder")
    copy.add_argument("--job-id", default=None, help="Reuse a job id to resume it")
    copy.add_argument("--report", default=None, help="Write the copy report as JSON")

    status = subparsers.add_parser("status", help="Show a job's import journal")
    status.add_argument("--job-id", required=True, help="Job id")

    show_config = subparsers.add_parser("config", help="Show the effective configuration")
    show_config.add_argument("--save", default=None, help="Write the non-default settings to this file")

    return parser


def _run_services(args: argparse.Namespace) -> int:
    registry = default_registry()
    data_types = [args.data_type] if args.data_type else registry.data_types()
    for data_type in data_types:
        export_services, import_services = registry.list_services(data_type)
        print(f"{data_type}:")
        print(f"  export: {', '.join(export_services) or '-'}")
        print(f"  import: {', '.join(import_services) or '-'}")
    return 0


def _run_copy(args: argparse.Namespace, config: ConfigManager) -> int:
    job_id = args.job_id or f"job_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    job = Job(
        job_id=job_id,
        data_type=local_photos.DATA_TYPE,
        export_service=local_photos.SERVICE_NAME,
        import_service=local_photos.SERVICE_NAME,
        export_options={"root": args.source},
        import_options={"root": args.dest},
    )
    job_store = InMemoryJobStore()
    job_store.create_job(job)

    print(f"Job: {job_id}")
    worker = TransferWorker(job_store, default_registry(), config)
    try:
        report = worker.run(job_id)
    except KeyboardInterrupt:
        print("Interrupted; rerun with --job-id to resume.", file=sys.stderr)
        return 130

    print(report.summary())
    for failure in report.branch_failures + report.item_failures:
        print(f"  [{failure.code}] {failure.resource_id}: {failure.message}")
    if args.report:
        report_path = Path(args.report)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(json.dumps(report.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"Report: {report_path}")
    return 0 if report.succeeded and not report.item_failures else 1


def _run_status(args: argparse.Namespace, config: ConfigManager) -> int:
    path = journal_path_for(Path(config.get("cache.journal_dir", ".transfer_jobs")), args.job_id)
    validation = validate_journal(path)
    if not validation.is_valid:
        for error in validation.errors:
            print(f"Journal error: {error}", file=sys.stderr)
        return 1

    summary = summarize_journal(path)
    print(f"Job: {summary.job_id}")
    print(f"Imported: {summary.succeeded}, Failed: {summary.failed}")
    for key in summary.pending_keys:
        print(f"  pending: {key}")
    return 0


def _run_config(args: argparse.Namespace, config: ConfigManager) -> int:
    print(json.dumps(config.to_dict(), ensure_ascii=False, indent=2))
    if args.save:
        config.save_user_config(Path(args.save))
        print(f"Saved: {args.save}")
    return 0
