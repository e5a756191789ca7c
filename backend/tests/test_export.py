import os
from datetime import datetime
from decimal import Decimal

import fitz
import pytest

from zee_ordering.config import settings
from zee_ordering.schemas.order_schema import OrderExportIn, OrderLineIn
from zee_ordering.services.export_service import (
    ExportService,
    ExportServiceException,
    fit_text,
    order_total,
    plan_pages,
)
from zee_ordering.utils.numbers import format_inr


def _items(n, price="10.00", qty=1):
    return [
        {"sku": f"SKU-{i}", "name": f"Item {i}", "unitPrice": price, "qty": qty}
        for i in range(n)
    ]


def _pdf_text(content):
    with fitz.open(stream=content, filetype="pdf") as doc:
        return doc.page_count, [page.get_text() for page in doc]


def test_plan_pages_twelve_per_page():
    assert plan_pages(1, 12).page_count == 1
    assert plan_pages(12, 12).page_count == 1
    plan = plan_pages(13, 12)
    assert plan.page_count == 2
    assert plan.chunks == [(0, 12), (12, 13)]
    assert plan.summary_page == 1
    assert plan_pages(25, 12).page_count == 3


def test_plan_pages_moves_total_to_new_page_when_full():
    plan = plan_pages(13, 13)
    assert plan.chunks == [(0, 13)]
    assert plan.summary_page == 1
    assert plan.page_count == 2


def test_plan_pages_requires_items():
    with pytest.raises(ExportServiceException):
        plan_pages(0, 12)


def test_order_total_is_exact():
    items = [
        OrderLineIn(name="a", unit_price=Decimal("0.10"), qty=3),
        OrderLineIn(name="b", unit_price=Decimal("1299.99"), qty=7),
        OrderLineIn(name="c", unit_price=Decimal("0"), qty=4),
    ]
    assert order_total(items) == Decimal("9100.23")


def test_format_inr_groups_digits_the_indian_way():
    assert format_inr(Decimal("0")) == "0.00"
    assert format_inr(Decimal("999.5")) == "999.50"
    assert format_inr(Decimal("1000")) == "1,000.00"
    assert format_inr(Decimal("123456.789")) == "1,23,456.79"
    assert format_inr(Decimal("12345678")) == "1,23,45,678.00"


def test_fit_text_truncates_long_names():
    long_name = "Extra Long Product Name " * 10
    short = fit_text(long_name, 190, "hebo", 9)
    assert short.endswith("...")
    assert fitz.get_text_length(short, fontname="hebo", fontsize=9) <= 190
    assert fit_text("Tea", 190, "hebo", 9) == "Tea"


def test_render_thirteen_items_spans_two_pages():
    order = OrderExportIn(order_number="42", customer_name="Acme Stores", items=_items(13, "12.50", 2))
    svc = ExportService(clock=lambda: datetime(2026, 10, 18, 15, 4))
    exported = svc.render_order(order)

    assert exported.reference == "ZeeReOrder-42"
    assert exported.filename == "ZeeReOrder-42.pdf"
    assert exported.page_count == 2
    assert exported.grand_total == Decimal("325.00")

    pages, texts = _pdf_text(exported.content)
    assert pages == 2
    assert "PAGE 1 OF 2" in texts[0]
    assert "PAGE 2 OF 2" in texts[1]
    assert "ACME STORES" in texts[0]
    assert "18 Oct 2026, 03:04 PM" in texts[0]
    assert "Item 12" in texts[1]
    assert "Item 12" not in texts[0]
    assert "325.00" in texts[1]
    assert "GRAND TOTAL (INR)" in texts[1]


def test_printed_total_matches_sum():
    items = [
        {"name": "Tea", "unitPrice": "1299.99", "qty": 7, "comment": "urgent"},
        {"name": "Sugar", "unitPrice": 45, "qty": 3, "brand": "Madhur"},
        {"name": "Salt", "unitPrice": "0.10", "qty": 3},
    ]
    order = OrderExportIn(items=items)
    exported = ExportService().render_order(order)
    expected = Decimal("1299.99") * 7 + Decimal("45") * 3 + Decimal("0.10") * 3
    assert exported.grand_total == expected

    _, texts = _pdf_text(exported.content)
    assert format_inr(expected) in texts[0]
    assert "Note: urgent" in texts[0]
    assert "Brand: Madhur" in texts[0]
    assert "ZeeReOrder-TEMP" in texts[0]


def test_missing_and_unsafe_images_render_placeholder(tmp_path):
    local = settings.model_copy(update={"PUBLIC_DIR": str(tmp_path)})
    svc = ExportService(settings=local)
    assert svc.resolve_image("/uploads/missing.png") is None
    assert svc.resolve_image("/../../etc/passwd") is None
    assert svc.resolve_image("https://cdn.example.com/a.png") is None

    order = OrderExportIn(items=[{"name": "Tea", "unitPrice": 1, "qty": 1, "imageUrl": "/uploads/missing.png"}])
    _, texts = _pdf_text(svc.render_order(order).content)
    assert "NO IMAGE" in texts[0]


def test_local_image_is_embedded(tmp_path):
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 8, 8), False)
    pix.clear_with(200)
    pix.save(str(uploads / "1-1.png"))

    local = settings.model_copy(update={"PUBLIC_DIR": str(tmp_path)})
    svc = ExportService(settings=local)
    assert svc.resolve_image("/uploads/1-1.png") == os.path.realpath(str(uploads / "1-1.png"))

    order = OrderExportIn(items=[{"name": "Tea", "unitPrice": 1, "qty": 1, "imageUrl": "/uploads/1-1.png"}])
    content = svc.render_order(order).content
    with fitz.open(stream=content, filetype="pdf") as doc:
        assert len(doc[0].get_images()) == 1
        assert "NO IMAGE" not in doc[0].get_text()


def test_corrupt_image_renders_error_placeholder(tmp_path, auth_client, override_settings):
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    (uploads / "1-1.png").write_bytes(b"not really a png")

    local = settings.model_copy(update={"PUBLIC_DIR": str(tmp_path)})
    order = OrderExportIn(
        items=[
            {"name": "Tea", "unitPrice": 1, "qty": 1, "imageUrl": "/uploads/1-1.png"},
            {"name": "Coffee", "unitPrice": 2, "qty": 1},
        ]
    )
    pages, texts = _pdf_text(ExportService(settings=local).render_order(order).content)
    assert pages == 1
    assert "IMG ERR" in texts[0]
    assert "Coffee" in texts[0]

    override_settings(PUBLIC_DIR=str(tmp_path))
    res = auth_client.post("/api/export/order", json={"items": order.model_dump(by_alias=True, mode="json")["items"]})
    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"


def test_export_endpoint_returns_pdf(auth_client):
    res = auth_client.post(
        "/api/export/order",
        json={"orderNumber": "7", "customerName": "Zed", "items": _items(3, "5.00", 2)},
    )
    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert 'filename="ZeeReOrder-7.pdf"' in res.headers["content-disposition"]
    pages, texts = _pdf_text(res.content)
    assert pages == 1
    assert "30.00" in texts[0]


def test_export_endpoint_rejects_empty_or_invalid_orders(auth_client):
    res = auth_client.post("/api/export/order", json={"items": []})
    assert res.status_code == 400
    assert res.json()["detail"] == "No items to export"

    res = auth_client.post("/api/export/order", json={"items": [{"name": "x", "unitPrice": 1, "qty": 0}]})
    assert res.status_code == 400
