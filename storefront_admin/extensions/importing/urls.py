"""URL patterns for the importing extension."""

from django.urls import path

from .views import (
    ImportJobCancelView,
    ImportJobErrorReportView,
    ImportJobErrorsView,
    ImportJobListView,
    ImportJobStatusView,
    ImportTemplateDownloadView,
    ProductImportPreviewView,
    ProductImportSubmitView,
)


def importing_urlpatterns():
    return [
        path(
            "import/products/preview/",
            ProductImportPreviewView.as_view(),
            name="product_import_preview",
        ),
        path(
            "import/products/",
            ProductImportSubmitView.as_view(),
            name="product_import_submit",
        ),
        path("import/jobs/", ImportJobListView.as_view(), name="import_job_list"),
        path(
            "import/jobs/<uuid:job_id>/",
            ImportJobStatusView.as_view(),
            name="import_job_status",
        ),
        path(
            "import/jobs/<uuid:job_id>/errors/",
            ImportJobErrorsView.as_view(),
            name="import_job_errors",
        ),
        path(
            "import/jobs/<uuid:job_id>/errors.csv",
            ImportJobErrorReportView.as_view(),
            name="import_job_error_report",
        ),
        path(
            "import/jobs/<uuid:job_id>/cancel/",
            ImportJobCancelView.as_view(),
            name="import_job_cancel",
        ),
        path(
            "import/template/",
            ImportTemplateDownloadView.as_view(),
            name="import_template_download",
        ),
    ]


__all__ = ["importing_urlpatterns"]
