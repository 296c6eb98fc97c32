import io

import pytest
from django.contrib.auth import get_user_model
from openpyxl import Workbook


def build_csv(rows, headers=("name", "sku", "price")) -> bytes:
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join("" if value is None else str(value) for value in row))
    return ("\n".join(lines) + "\n").encode("utf-8")


def build_xlsx(sheets: dict) -> bytes:
    """Build a workbook from ``{sheet_title: [header_row, *data_rows]}``."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sheets.items():
        worksheet = workbook.create_sheet(title=title)
        for row in rows:
            worksheet.append(list(row))
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


@pytest.fixture
def limits():
    from storefront_admin.extensions.importing.services import get_import_limits

    return get_import_limits()


@pytest.fixture
def staff_user(db):
    User = get_user_model()
    return User.objects.create_user(username="catalog_admin", password="pass12345", is_staff=True)


@pytest.fixture
def plain_user(db):
    User = get_user_model()
    return User.objects.create_user(username="shopper", password="pass12345")


@pytest.fixture
def kitchen_bath_workbook() -> bytes:
    header = ("name", "sku", "price", "stock_quantity")
    return build_xlsx(
        {
            "Kitchen": [
                header,
                ("Chef Knife", "K-001", 49.99, 10),
                ("Cutting Board", "K-002", 24.5, 15),
                ("Colander", "K-003", 12, 30),
                ("Whisk", "K-004", 6.75, 40),
                ("Ladle", "K-005", 8, 22),
            ],
            "Bath": [
                header,
                ("Towel Set", "B-001", 35, 12),
                ("Soap Dish", "B-002", 9.99, 50),
                ("Shower Caddy", "B-003", 27.25, 8),
            ],
        }
    )


@pytest.fixture
def make_csv():
    return build_csv


@pytest.fixture
def make_xlsx():
    return build_xlsx
