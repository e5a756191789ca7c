from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from zee_ordering.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(128), unique=True, index=True, nullable=False)
    name = Column(String(512), nullable=False)
    brand = Column(String(256), nullable=True, index=True)
    category = Column(String(256), nullable=True)
    # legacy columns carried over from the supplier sheet
    code = Column(String(128), nullable=True)
    item_name = Column(String(512), nullable=True)
    supplier_name = Column(String(256), nullable=True)
    price = Column(Numeric(12, 2), nullable=True)
    stock = Column(Integer, nullable=True)
    min_qty = Column(Integer, nullable=True)
    image_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False, index=True
    )

    def __repr__(self):
        return f"<Product sku={self.sku} name={self.name}>"
