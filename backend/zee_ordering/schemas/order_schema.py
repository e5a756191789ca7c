from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class OrderLineIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    sku: Optional[str] = None
    name: str = ""
    brand: Optional[str] = None
    image_url: Optional[str] = None
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    qty: int = Field(..., gt=0)
    comment: Optional[str] = None
    currency: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.qty


class OrderExportIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[OrderLineIn] = []

    @field_validator("order_number", mode="before")
    @classmethod
    def _order_number_as_string(cls, v):
        if isinstance(v, int):
            return str(v)
        return v
