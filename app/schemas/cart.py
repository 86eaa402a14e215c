from pydantic import Field
from typing import List, Optional
import uuid

from app.schemas.base import CamelModel


class CartAdd(CamelModel):
    menu_item_id: str
    quantity: int = Field(1, ge=1)
    replace: bool = False  # drop items from another restaurant instead of failing


class CartQuantityUpdate(CamelModel):
    quantity: int = Field(ge=1)


class CartLine(CamelModel):
    id: str
    menu_item_id: str
    name: str
    price: float
    quantity: int
    line_total: float
    is_available: bool


class CartRead(CamelModel):
    restaurant_id: Optional[uuid.UUID] = None
    items: List[CartLine] = []
    total: float = 0.0
