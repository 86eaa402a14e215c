from pydantic import Field
from typing import List, Optional
from datetime import datetime
import uuid

from app.schemas.base import CamelModel


class WishlistItemIn(CamelModel):
    menu_item_id: str
    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    quantity: int = Field(1, ge=1)


class WishlistCreate(CamelModel):
    name: str = Field(min_length=1)
    restaurant_id: uuid.UUID
    items: List[WishlistItemIn] = []


class WishlistRename(CamelModel):
    name: str = Field(min_length=1)


class WishlistItemQuantity(CamelModel):
    quantity: int = Field(ge=1)


class WishlistItemRead(CamelModel):
    id: str
    menu_item_id: str
    name: Optional[str] = None
    price: Optional[float] = None
    quantity: int


class WishlistRead(CamelModel):
    id: str
    name: str
    restaurant_id: uuid.UUID
    items: List[WishlistItemRead] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
