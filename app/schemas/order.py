from pydantic import Field
from typing import List, Optional
from datetime import datetime
import uuid

from app.core.order_flow import OrderStatus
from app.schemas.base import CamelModel


class OrderLineIn(CamelModel):
    menu_item_id: str
    quantity: int = Field(1, ge=1)


class OrderCreate(CamelModel):
    restaurant_id: uuid.UUID
    items: List[OrderLineIn] = []
    delivery_address: Optional[str] = None


class CheckoutRequest(CamelModel):
    delivery_address: Optional[str] = None


class OrderStatusUpdate(CamelModel):
    status: OrderStatus
    rider_id: Optional[uuid.UUID] = None  # required when status is rider_assigned
    reason: Optional[str] = None  # cancellation note


class OrderItemRead(CamelModel):
    id: str
    menu_item_id: Optional[str] = None
    item_name: str
    price_at_time_of_order: float
    quantity: int


class OrderRead(CamelModel):
    id: str
    customer_id: uuid.UUID
    restaurant_id: uuid.UUID
    rider_id: Optional[uuid.UUID] = None
    status: OrderStatus
    items: List[OrderItemRead] = []
    subtotal: float
    delivery_fee: float
    total_amount: float
    delivery_address: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    restaurant_rating: Optional[int] = None
    restaurant_review: Optional[str] = None
    restaurant_rated_at: Optional[datetime] = None
    rider_rating: Optional[int] = None
    rider_review: Optional[str] = None
    rider_rated_at: Optional[datetime] = None
