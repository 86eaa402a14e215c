from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid

from app.models.menu.menu_item import MenuCategory, Cuisine, SubCategory
from app.schemas.base import CamelModel


class MenuItemBase(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    price: float = Field(ge=0)
    category: MenuCategory
    cuisine: Cuisine
    sub_category: Optional[SubCategory] = None
    image: str = Field(min_length=1)
    is_veg: bool = True
    is_available: bool = True


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[MenuCategory] = None
    cuisine: Optional[Cuisine] = None
    sub_category: Optional[SubCategory] = None
    image: Optional[str] = None
    is_veg: Optional[bool] = None
    is_available: Optional[bool] = None


class MenuItemRead(MenuItemBase):
    id: str
    restaurant_id: uuid.UUID
    restaurant_latitude: Optional[float] = None
    restaurant_longitude: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
