from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid

from app.schemas.base import CamelModel


class AvailabilityUpdate(CamelModel):
    is_available: bool


class LocationUpdate(CamelModel):
    latitude: float
    longitude: float


class RiderProfileUpdate(CamelModel):
    vehicle_type: Optional[str] = None
    vehicle_number: Optional[str] = None
    license_number: Optional[str] = None


class RiderProfileRead(CamelModel):
    account_id: uuid.UUID
    vehicle_type: Optional[str] = None
    vehicle_number: Optional[str] = None
    license_number: Optional[str] = None
    is_verified: bool
    is_available: bool
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    location_updated_at: Optional[datetime] = None
    total_deliveries: int
    total_earnings: float
    today_earnings: float
    rating_average: float = Field(ge=0, le=5)
    rating_count: int


class RiderStats(CamelModel):
    total_deliveries: int
    total_earnings: float
    today_earnings: float
    rating: float
    rating_count: int
    active_orders: int
