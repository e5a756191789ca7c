#!/usr/bin/env python3
"""
Build an order from SKUs in the catalog and write the PDF order sheet.

Usage:
    python scripts/export_order.py --item TEA-100:3 --item "COF-200:1:ground fine" \
        --order-number 42 --customer "Acme Stores" --out order.pdf
"""
import argparse
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from zee_ordering.config import settings
from zee_ordering.db import SessionLocal, init_db
from zee_ordering.repositories.product_repo import ProductRepository
from zee_ordering.schemas.product_schema import ProductOut
from zee_ordering.services.cart_service import OrderCart
from zee_ordering.services.export_service import ExportService, ExportServiceException


def parse_item(value):
    """'SKU:QTY[:comment]' -> (sku, qty, comment)"""
    parts = value.split(":", 2)
    if len(parts) < 2:
        raise argparse.ArgumentTypeError(f"expected SKU:QTY[:comment], got {value!r}")
    try:
        qty = int(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"quantity must be an integer in {value!r}")
    return parts[0], qty, parts[2] if len(parts) > 2 else ""


def main(argv=None):
    parser = argparse.ArgumentParser(description="Export an order sheet PDF")
    parser.add_argument("--item", action="append", type=parse_item, required=True)
    parser.add_argument("--order-number", default=None)
    parser.add_argument("--customer", default=None)
    parser.add_argument("--address", default=None)
    parser.add_argument("--out", default=None, help="output path (default: <reference>.pdf)")
    args = parser.parse_args(argv)

    init_db()
    db = SessionLocal()
    cart = OrderCart(currency=settings.CURRENCY)
    try:
        repo = ProductRepository(db)
        for sku, qty, comment in args.item:
            product = repo.get_by_sku(sku)
            if not product:
                print(f"Unknown SKU: {sku}", file=sys.stderr)
                return 1
            snapshot = ProductOut.model_validate(product)
            cart.update_qty(snapshot, qty)
            if comment:
                cart.update_comment(snapshot.id, comment)
    finally:
        db.close()

    request = cart.to_export_request(
        order_number=args.order_number,
        customer_name=args.customer,
        customer_address=args.address,
    )
    try:
        exported = ExportService(settings=settings).render_order(request)
    except ExportServiceException as e:
        print(f"Export failed: {e}", file=sys.stderr)
        return 1

    out = args.out or exported.filename
    with open(out, "wb") as fh:
        fh.write(exported.content)
    print(f"Wrote {out}: {exported.page_count} page(s), total {exported.grand_total}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
