import csv
import io
import json

import pytest
from openpyxl import load_workbook

from storefront_admin.extensions.importing.field_map import PRODUCT_COLUMNS
from storefront_admin.extensions.importing.models import ImportJobStatus, ImportRowError
from storefront_admin.extensions.importing.services import (
    begin_processing,
    build_import_template,
    create_job,
    get_errors,
    get_status,
    record_row_outcome,
    render_error_report,
    serialize_job,
)
from storefront_admin.extensions.importing.services.errors import FormatError, JobNotFound

pytestmark = [pytest.mark.unit, pytest.mark.django_db]


def _job_with_errors():
    job = create_job("products.csv", 3)
    begin_processing(job.pk)
    for row_number, message, data in (
        (3, "Required field 'price' is missing", {"price": "", "name": "Cup"}),
        (1, "Category 'Garden' does not exist", {"name": "Rake", "category": "Garden"}),
    ):
        ImportRowError.objects.create(
            import_job=job,
            row_number=row_number,
            code="REQUIRED_FIELD_MISSING",
            error_message=message,
            row_data=data,
        )
        record_row_outcome(job.pk, False)
    return get_status(job.pk)


def test_serialize_job_reports_live_counters():
    job = create_job("products.csv", 4)
    begin_processing(job.pk)
    record_row_outcome(job.pk, True)

    payload = serialize_job(get_status(job.pk))

    assert payload["id"] == str(job.pk)
    assert payload["status"] == ImportJobStatus.PROCESSING
    assert payload["totalRows"] == 4
    assert payload["processedRows"] == 1
    assert payload["successfulRows"] == 1
    assert payload["failedRows"] == 0
    assert payload["progressPercent"] == 25
    assert payload["isTerminal"] is False
    assert payload["completedAt"] is None
    json.dumps(payload)


def test_get_errors_orders_by_row_number():
    job = _job_with_errors()
    assert [error.row_number for error in get_errors(job.pk)] == [1, 3]

    with pytest.raises(JobNotFound):
        get_errors("00000000-0000-0000-0000-000000000000")


def test_error_report_has_one_line_per_failed_row():
    job = _job_with_errors()
    rows = list(csv.reader(io.StringIO(render_error_report(job))))

    assert rows[0] == ["rowNumber", "errorMessage", "rowData"]
    assert [row[0] for row in rows[1:]] == ["1", "3"]
    assert rows[2][1] == "Required field 'price' is missing"
    assert rows[2][2] == '{"name":"Cup","price":""}'


def test_error_report_for_clean_job_is_header_only():
    job = create_job("clean.csv", 0)
    assert render_error_report(job).strip() == "rowNumber,errorMessage,rowData"


def test_csv_template_has_bom_and_canonical_headers():
    content, content_type, file_name = build_import_template("csv")

    assert content.startswith(b"\xef\xbb\xbf")
    assert content_type.startswith("text/csv")
    assert file_name.endswith(".csv")
    rows = list(csv.reader(io.StringIO(content.decode("utf-8-sig"))))
    assert tuple(rows[0]) == PRODUCT_COLUMNS
    assert len(rows) == 3


def test_xlsx_template_round_trips_through_openpyxl():
    content, _content_type, file_name = build_import_template("xlsx")

    workbook = load_workbook(io.BytesIO(content))
    worksheet = workbook.active
    header = [cell.value for cell in worksheet[1]]
    assert tuple(header) == PRODUCT_COLUMNS
    assert worksheet.max_row == 3
    assert file_name.endswith(".xlsx")


def test_template_rejects_unknown_format():
    with pytest.raises(FormatError):
        build_import_template("pdf")
