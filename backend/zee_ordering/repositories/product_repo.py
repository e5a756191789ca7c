from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from zee_ordering.models.product import Product

SEARCH_COLUMNS = (
    Product.sku,
    Product.name,
    Product.brand,
    Product.code,
    Product.item_name,
)


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.sku == sku).first()

    def list(
        self,
        q: Optional[str] = None,
        brand: Optional[str] = None,
        page: int = 1,
        size: int = 50,
    ) -> Tuple[List[Product], int]:
        """
        Substring search over sku/name/brand/code/item_name plus an exact
        (case-insensitive) brand filter, newest updates first.
        """
        query = self.db.query(Product)
        if q:
            query = query.filter(
                or_(*[col.icontains(q, autoescape=True) for col in SEARCH_COLUMNS])
            )
        if brand:
            query = query.filter(func.lower(Product.brand) == brand.lower())
        total = query.with_entities(func.count(Product.id)).scalar() or 0
        items = (
            query.order_by(Product.updated_at.desc(), Product.id.desc())
            .offset((page - 1) * size)
            .limit(size)
            .all()
        )
        return items, total

    def distinct_brands(self) -> List[str]:
        rows = (
            self.db.query(Product.brand)
            .filter(Product.brand.isnot(None), Product.brand != "")
            .distinct()
            .order_by(Product.brand)
            .all()
        )
        return [r[0] for r in rows]

    def upsert_many(self, records: Iterable[Tuple[str, Dict]]) -> int:
        """
        Insert-or-update by sku. ``records`` yields ``(sku, fields)`` pairs;
        only the keys present in ``fields`` are written on update.
        Flushes but does not commit.
        """
        records = list(records)
        skus = {sku for sku, _ in records}
        existing = {
            p.sku: p for p in self.db.query(Product).filter(Product.sku.in_(skus)).all()
        }
        now = datetime.now(timezone.utc)
        for sku, fields in records:
            p = existing.get(sku)
            if p is None:
                p = Product(sku=sku, created_at=now)
                self.db.add(p)
                existing[sku] = p
            for key, value in fields.items():
                setattr(p, key, value)
            p.updated_at = now
        self.db.flush()
        return len(records)

    def set_image(self, product: Product, image_url: str) -> Product:
        product.image_url = image_url
        product.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return product
