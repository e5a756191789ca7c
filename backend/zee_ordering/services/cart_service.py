import re
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from zee_ordering.schemas.order_schema import OrderExportIn, OrderLineIn
from zee_ordering.schemas.product_schema import ProductOut

_WORD = re.compile(r"\w\S*")


def to_title_case(value: str) -> str:
    """'RED tea 100G' -> 'Red Tea 100g'."""
    return _WORD.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), value)


@dataclass
class CartLine:
    product: ProductOut
    qty: int
    comment: str = ""

    @property
    def unit_price(self) -> Decimal:
        try:
            return Decimal(self.product.price) if self.product.price else Decimal("0")
        except ArithmeticError:
            return Decimal("0")

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.qty


class OrderCart:
    """
    Ephemeral order being assembled for one export. Nothing here is
    persisted; a new cart starts empty.
    """

    def __init__(self, currency: str = "INR"):
        self.currency = currency
        self._lines: List[CartLine] = []

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, product_id: int) -> Optional[CartLine]:
        return next((ln for ln in self._lines if ln.product.id == product_id), None)

    def update_qty(self, product: ProductOut, qty: int) -> Optional[CartLine]:
        if qty <= 0:
            self._lines = [ln for ln in self._lines if ln.product.id != product.id]
            return None
        line = self.get(product.id)
        if line:
            line.qty = qty
            return line
        line = CartLine(product=product, qty=qty)
        self._lines.append(line)
        return line

    def update_comment(self, product_id: int, comment: str) -> None:
        line = self.get(product_id)
        if line:
            line.comment = comment

    def clear(self) -> None:
        self._lines = []

    @property
    def total(self) -> Decimal:
        return sum((ln.subtotal for ln in self._lines), Decimal("0"))

    def __len__(self):
        return len(self._lines)

    def to_export_request(
        self,
        order_number: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_address: Optional[str] = None,
    ) -> OrderExportIn:
        items = [
            OrderLineIn(
                sku=ln.product.sku,
                name=to_title_case(ln.product.name),
                brand=ln.product.brand,
                image_url=ln.product.image_url,
                unit_price=ln.unit_price,
                qty=ln.qty,
                comment=ln.comment,
                currency=self.currency,
            )
            for ln in self._lines
        ]
        return OrderExportIn(
            order_number=order_number,
            customer_name=customer_name,
            customer_address=customer_address,
            items=items,
        )
