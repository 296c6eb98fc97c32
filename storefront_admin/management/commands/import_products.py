"""
Management command that runs a product import inline.
"""

import json
import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from storefront_admin.extensions.importing.services import (
    build_preview,
    commit_job,
    create_job,
    get_errors,
    get_import_limits,
    parse_import_settings,
    parse_selected_rows,
    parse_uploaded_file,
    select_records,
    summarize_job,
)
from storefront_admin.extensions.importing.services.errors import ImportServiceError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Import products from a CSV or XLSX file without going through HTTP.
    """

    help = "Import catalog products from a CSV or XLSX file."

    def add_arguments(self, parser):
        parser.add_argument("path", type=str, help="Path to the CSV or XLSX file")
        parser.add_argument(
            "--format",
            choices=["csv", "xlsx"],
            default=None,
            help="File format (inferred from the extension when omitted)",
        )
        parser.add_argument(
            "--settings-json",
            type=str,
            default=None,
            help='Import settings as JSON, e.g. \'{"updateExisting": true}\'',
        )
        parser.add_argument(
            "--rows",
            type=str,
            default=None,
            help="Comma separated 1-based row numbers to import",
        )
        parser.add_argument(
            "--preview",
            action="store_true",
            help="Only print the preview and validation warnings",
        )

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.is_file():
            raise CommandError(f"File not found: {path}")

        try:
            settings = parse_import_settings(options["settings_json"])
            with path.open("rb") as handle:
                parsed = parse_uploaded_file(
                    handle,
                    limits=get_import_limits(),
                    file_format=options["format"],
                    file_name=path.name,
                )
        except ImportServiceError as exc:
            raise CommandError(f"{exc.code}: {exc.message}") from exc

        if options["preview"]:
            preview = build_preview(parsed, settings)
            self.stdout.write(json.dumps(preview, indent=2, default=str))
            return

        records = select_records(parsed, parse_selected_rows(options["rows"]))
        job = create_job(
            parsed.file_name,
            len(records),
            file_format=parsed.file_format,
            settings=settings,
        )
        self.stdout.write(f"Created import job {job.pk} with {len(records)} rows")

        job_id = job.pk
        job = commit_job(job_id, records)
        if job is None:
            raise CommandError(f"Import job {job_id} disappeared before it could run")
        summary = summarize_job(job)
        for row_error in get_errors(job.pk):
            self.stderr.write(f"Row {row_error.row_number}: [{row_error.code}] {row_error.error_message}")
        self.stdout.write(json.dumps(summary, indent=2))
        if job.error_message:
            raise CommandError(f"Import job {job.pk} failed: {job.error_message}")
        self.stdout.write(self.style.SUCCESS(f"Import job {job.pk} {job.status}"))
