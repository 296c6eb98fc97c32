"""Downloadable import templates with the canonical product columns."""

from __future__ import annotations

import csv
import io

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..field_map import PRODUCT_COLUMNS
from ..models import ImportFileFormat
from .errors import FormatError

SAMPLE_ROWS: tuple[dict[str, object], ...] = (
    {
        "name": "Ceramic Pour-Over Set",
        "sku": "KIT-POUR-001",
        "price": "34.99",
        "description": "<p>Hand-glazed dripper with matching carafe.</p>",
        "short_description": "Dripper and carafe",
        "category": "Kitchen",
        "stock_quantity": 25,
        "compare_at_price": "39.99",
        "is_active": "true",
        "is_featured": "false",
    },
    {
        "name": "Bamboo Bath Mat",
        "sku": "BATH-MAT-014",
        "price": "19.50",
        "description": "<p>Quick-drying slatted mat.</p>",
        "short_description": "Slatted bamboo mat",
        "category": "Bath",
        "stock_quantity": 40,
        "compare_at_price": "",
        "is_active": "true",
        "is_featured": "true",
    },
)

CONTENT_TYPES = {
    ImportFileFormat.CSV: "text/csv; charset=utf-8",
    ImportFileFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _csv_template() -> bytes:
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer)
    writer.writerow(PRODUCT_COLUMNS)
    for sample in SAMPLE_ROWS:
        writer.writerow([sample.get(column, "") for column in PRODUCT_COLUMNS])
    # BOM so spreadsheet apps detect UTF-8
    return buffer.getvalue().encode("utf-8-sig")


def _xlsx_template() -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Products"
    worksheet.append(list(PRODUCT_COLUMNS))
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="305496", end_color="305496", fill_type="solid")
    for column_index, column in enumerate(PRODUCT_COLUMNS, start=1):
        cell = worksheet.cell(row=1, column=column_index)
        cell.font = header_font
        cell.fill = header_fill
        worksheet.column_dimensions[get_column_letter(column_index)].width = max(14, len(column) + 4)
    for sample in SAMPLE_ROWS:
        worksheet.append([sample.get(column, "") for column in PRODUCT_COLUMNS])
    worksheet.freeze_panes = "A2"

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def build_import_template(file_format: str = ImportFileFormat.CSV) -> tuple[bytes, str, str]:
    """Return ``(content, content_type, filename)`` for the requested format."""
    normalized = str(file_format or ImportFileFormat.CSV).strip().upper()
    if normalized == ImportFileFormat.CSV:
        return _csv_template(), CONTENT_TYPES[ImportFileFormat.CSV], "product-import-template.csv"
    if normalized == ImportFileFormat.XLSX:
        return _xlsx_template(), CONTENT_TYPES[ImportFileFormat.XLSX], "product-import-template.xlsx"
    raise FormatError(f"Unsupported template format '{file_format}'.")
