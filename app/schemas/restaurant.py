from pydantic import Field
from typing import List, Optional
import uuid

from app.models.menu.menu_item import Cuisine
from app.schemas.base import CamelModel
from app.schemas.menu_item import MenuItemRead
from app.schemas.rating import RatingSummary


class AddressRead(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class RestaurantProfileUpdate(CamelModel):
    kitchen_name: Optional[str] = None
    cuisine: Optional[List[Cuisine]] = None
    description: Optional[str] = None
    business_license: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class RestaurantProfileRead(AddressRead):
    account_id: uuid.UUID
    kitchen_name: Optional[str] = None
    cuisine: List[str] = []
    description: Optional[str] = None
    business_license: Optional[str] = None
    is_verified: bool
    is_kitchen_open: bool
    rating_average: float
    rating_count: int


class RestaurantListing(CamelModel):
    id: uuid.UUID
    name: str
    avatar: str = ""
    cuisine: List[str] = []
    description: str = ""
    address: AddressRead
    is_kitchen_open: bool
    rating: RatingSummary
    menu_items: List[MenuItemRead] = []
    menu_count: int
    distance_km: Optional[float] = None
