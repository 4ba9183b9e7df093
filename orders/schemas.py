"""Request and response bodies of the orders API.

Field names are camelCase on the wire and snake_case in Python. Money is a
``Decimal`` in Python and a JSON number on the wire.
"""

from decimal import Decimal
from typing import Annotated, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Largest value a 32-bit INTEGER column holds
MAX_QUANTITY = 2**31 - 1

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductIn(CamelModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=0, le=MAX_QUANTITY)


class CreateOrderIn(CamelModel):
    customer_name: str = Field(min_length=1)
    products: List[ProductIn] = Field(default_factory=list)


class UpdateOrderIn(CamelModel):
    # Checked against OrderStatus by the service so a bad value is a 400 with a clear message
    status: str


class ProductOut(CamelModel):
    product_id: UUID
    name: str
    price: Money
    quantity: int


class OrderOut(CamelModel):
    order_id: UUID
    customer_name: str
    status: str
    total_price: Money
    products: List[ProductOut]


def order_to_out(o) -> OrderOut:
    return OrderOut(
        order_id=o.id,
        customer_name=o.customer_name,
        status=o.status,
        total_price=o.total_price,
        products=[
            ProductOut(product_id=p.id, name=p.name, price=p.price, quantity=p.quantity)
            for p in o.products
        ],
    )
