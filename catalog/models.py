# catalog/models.py
from typing import Annotated

from pydantic import BaseModel, Field, StrictFloat, StrictInt

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1

# ids and quantities on the wire are 32-bit ints; no bool/str coercion
Int32 = Annotated[StrictInt, Field(ge=INT32_MIN, le=INT32_MAX)]


class Category(BaseModel):
    id: Int32
    name: str


class Product(BaseModel):
    id: Int32
    name: str
    description: str
    price: StrictFloat
    # add-stock has no upper bound, so stored stock may outgrow Int32
    stockQuantity: StrictInt
    categoryId: Int32


class ProductIn(Product):
    stockQuantity: Int32


class StockUpdateRequest(BaseModel):
    # same field for add-stock and reduce-stock
    quantityToAdd: Int32
