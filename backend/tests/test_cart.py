from decimal import Decimal

import pytest

from zee_ordering.schemas.product_schema import ProductOut
from zee_ordering.services.cart_service import OrderCart, to_title_case


def _product(pid, price="10.00", name="assam TEA 100G", **kw):
    return ProductOut(id=pid, sku=f"SKU-{pid}", name=name, price=price, **kw)


@pytest.mark.parametrize(
    "raw,expected",
    [("assam TEA 100G", "Assam Tea 100g"), ("", ""), ("x-ray  box", "X-ray  Box")],
)
def test_to_title_case(raw, expected):
    assert to_title_case(raw) == expected


def test_update_qty_adds_replaces_and_removes():
    cart = OrderCart()
    tea = _product(1)
    cart.update_qty(tea, 2)
    cart.update_qty(tea, 5)
    assert len(cart) == 1
    assert cart.get(1).qty == 5

    cart.update_qty(_product(2), 1)
    assert [ln.product.id for ln in cart.lines] == [1, 2]

    assert cart.update_qty(tea, 0) is None
    assert [ln.product.id for ln in cart.lines] == [2]
    cart.update_qty(_product(3), -1)
    assert len(cart) == 1


def test_comment_and_clear():
    cart = OrderCart()
    cart.update_qty(_product(1), 1)
    cart.update_comment(1, "deliver monday")
    cart.update_comment(42, "ignored")
    assert cart.get(1).comment == "deliver monday"
    cart.clear()
    assert len(cart) == 0
    assert cart.total == Decimal("0")


def test_total_uses_exact_decimals_and_tolerates_missing_price():
    cart = OrderCart()
    cart.update_qty(_product(1, price="0.10"), 3)
    cart.update_qty(_product(2, price=None), 4)
    cart.update_qty(_product(3, price="19.99"), 1)
    assert cart.total == Decimal("20.29")


def test_to_export_request_carries_lines():
    cart = OrderCart(currency="INR")
    cart.update_qty(_product(1, price="12.50", brand="Tetley", image_url="/uploads/1-1.png"), 2)
    cart.update_comment(1, "urgent")

    req = cart.to_export_request(order_number="77", customer_name="Acme Stores")
    assert req.order_number == "77"
    assert req.customer_name == "Acme Stores"
    [line] = req.items
    assert line.name == "Assam Tea 100g"
    assert line.sku == "SKU-1"
    assert line.brand == "Tetley"
    assert line.image_url == "/uploads/1-1.png"
    assert line.unit_price == Decimal("12.50")
    assert line.qty == 2
    assert line.comment == "urgent"
    assert line.currency == "INR"
    assert line.subtotal == Decimal("25.00")
