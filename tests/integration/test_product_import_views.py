"""
Integration tests for the product import HTTP endpoints.
"""

import csv
import io
import json
import logging

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from storefront_admin.catalog.models import Product
from storefront_admin.extensions.importing.models import ImportJob, ImportJobStatus
from storefront_admin.extensions.importing.services import begin_processing, create_job

pytestmark = [pytest.mark.integration, pytest.mark.django_db]

CSV_CONTENT = b"name,sku,price\nMug,M-1,4.50\nBowl,B-1,\nPlate,P-1,6\n"


@pytest.fixture
def admin_client(client, staff_user):
    client.force_login(staff_user)
    return client


def test_preview_returns_structure_without_creating_a_job(admin_client):
    response = admin_client.post(
        reverse("product_import_preview"),
        {"file": SimpleUploadedFile("products.csv", CSV_CONTENT)},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["headers"] == ["name", "sku", "price"]
    assert payload["totalRows"] == 3
    assert len(payload["sampleRecords"]) == 3
    assert payload["perSectionSummary"][0]["sectionLabel"] is None
    assert payload["validationWarnings"] == [
        {"row": 2, "field": "price", "warning": "Required field 'price' is missing"}
    ]
    assert not ImportJob.objects.exists()


def test_preview_is_audited_without_a_job(admin_client, staff_user, caplog):
    caplog.set_level(logging.INFO, logger="storefront_admin.extensions.importing.services.audit_log")

    response = admin_client.post(
        reverse("product_import_preview"),
        {"file": SimpleUploadedFile("products.csv", CSV_CONTENT)},
    )

    assert response.status_code == 200
    events = [record.getMessage() for record in caplog.records if "'preview'" in record.getMessage()]
    assert len(events) == 1
    assert "'job_id': None" in events[0]
    assert f"'user_id': '{staff_user.pk}'" in events[0]
    assert "'total_rows': 3" in events[0]
    assert "'warnings': 1" in events[0]


def test_preview_rejects_unreadable_upload(admin_client):
    response = admin_client.post(
        reverse("product_import_preview"),
        {"file": SimpleUploadedFile("products.xlsx", b"not a workbook")},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_FILE_FORMAT"
    assert not ImportJob.objects.exists()


def test_preview_requires_a_file(admin_client):
    response = admin_client.post(reverse("product_import_preview"), {})
    assert response.status_code == 400


def test_submit_then_poll_until_terminal(admin_client):
    response = admin_client.post(
        reverse("product_import_submit"),
        {
            "file": SimpleUploadedFile("products.csv", CSV_CONTENT),
            "settings": json.dumps({"requiredFields": ["name", "price"]}),
        },
    )
    assert response.status_code == 202
    import_id = response.json()["importId"]

    status = admin_client.get(reverse("import_job_status", args=[import_id])).json()
    assert status["status"] == ImportJobStatus.COMPLETED
    assert status["totalRows"] == 3
    assert status["successfulRows"] == 2
    assert status["failedRows"] == 1
    assert status["isTerminal"] is True

    errors = admin_client.get(reverse("import_job_errors", args=[import_id])).json()["errors"]
    assert [error["rowNumber"] for error in errors] == [2]
    assert errors[0]["rowData"]["name"] == "Bowl"

    report = admin_client.get(reverse("import_job_error_report", args=[import_id]))
    assert report["Content-Type"].startswith("text/csv")
    rows = list(csv.reader(io.StringIO(report.content.decode("utf-8"))))
    assert rows[0] == ["rowNumber", "errorMessage", "rowData"]
    assert rows[1][0] == "2"


def test_submit_with_invalid_settings_creates_no_job(admin_client):
    response = admin_client.post(
        reverse("product_import_submit"),
        {"file": SimpleUploadedFile("products.csv", CSV_CONTENT), "settings": "[true]"},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SETTINGS"
    assert not ImportJob.objects.exists()
    assert not Product.objects.exists()


def test_submit_with_selected_rows(admin_client):
    response = admin_client.post(
        reverse("product_import_submit"),
        {
            "file": SimpleUploadedFile("products.csv", CSV_CONTENT),
            "selectedRows": "[1, 3]",
        },
    )

    job = ImportJob.objects.get(pk=response.json()["importId"])
    assert job.total_rows == 2
    assert job.failed_rows == 0


def test_unknown_job_is_404(admin_client):
    response = admin_client.get(
        reverse("import_job_status", args=["0b4f8c57-8f76-4d0e-9c36-2a5a4c1f0d11"])
    )
    assert response.status_code == 404
    assert response.json()["code"] == "JOB_NOT_FOUND"


def test_job_history_lists_newest_first(admin_client):
    create_job("older.csv", 1)
    create_job("newer.csv", 1)

    response = admin_client.get(reverse("import_job_list"), {"perPage": 1})

    payload = response.json()
    assert payload["total"] == 2
    assert payload["perPage"] == 1
    assert len(payload["results"]) == 1


def test_job_history_rejects_unknown_status(admin_client):
    response = admin_client.get(reverse("import_job_list"), {"status": "exploded"})
    assert response.status_code == 400


def test_cancel_processing_job(admin_client):
    job = create_job("slow.csv", 10)
    begin_processing(job.pk)

    response = admin_client.post(
        reverse("import_job_cancel", args=[job.pk]), {"reason": "wrong supplier"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == ImportJobStatus.FAILED
    assert response.json()["errorMessage"] == "Cancelled by operator: wrong supplier"


def test_cancel_pending_job_conflicts(admin_client):
    job = create_job("queued.csv", 10)

    response = admin_client.post(reverse("import_job_cancel", args=[job.pk]))

    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_TRANSITION"


def test_template_download(admin_client):
    response = admin_client.get(reverse("import_template_download"), {"format": "xlsx"})

    assert response.status_code == 200
    assert "spreadsheetml" in response["Content-Type"]
    assert 'filename="product-import-template.xlsx"' in response["Content-Disposition"]


def test_template_download_rejects_unknown_format(admin_client):
    response = admin_client.get(reverse("import_template_download"), {"format": "pdf"})
    assert response.status_code == 400


def test_non_staff_users_are_forbidden(client, plain_user):
    client.force_login(plain_user)

    assert client.get(reverse("import_job_list")).status_code == 403
    response = client.post(
        reverse("product_import_submit"),
        {"file": SimpleUploadedFile("products.csv", CSV_CONTENT)},
    )
    assert response.status_code == 403
    assert not ImportJob.objects.exists()
