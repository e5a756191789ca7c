from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class ProductOut(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )
    id: int
    sku: str
    name: str
    brand: Optional[str] = None
    category: Optional[str] = None
    code: Optional[str] = None
    item_name: Optional[str] = None
    supplier_name: Optional[str] = None
    price: Optional[str] = None
    stock: Optional[int] = None
    min_qty: Optional[int] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_string(cls, v):
        # Numeric columns come back as Decimal; the wire format is a string
        if isinstance(v, (Decimal, int, float)):
            return str(v)
        return v


class ProductPage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    items: List[ProductOut]
    total: int
    page: int
    page_size: int


class BrandList(BaseModel):
    brands: List[str]
