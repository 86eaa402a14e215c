from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, Text, Enum, Index, CheckConstraint
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from datetime import datetime
from app.core.order_flow import OrderStatus
from app.models.base import Base
import uuid


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_id = Column(GUID, ForeignKey("accounts.id"), nullable=False)
    restaurant_id = Column(GUID, ForeignKey("accounts.id"), nullable=False)
    rider_id = Column(GUID, ForeignKey("accounts.id"), nullable=True)

    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False)

    # Pricing (computed server-side from menu prices at time of order)
    subtotal = Column(Float, nullable=False, default=0.0)
    delivery_fee = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)

    delivery_address = Column(Text, nullable=True)
    cancel_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)
    delivered_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    # Ratings (only once delivered)
    restaurant_rating = Column(Integer, nullable=True)
    restaurant_review = Column(Text, nullable=True)
    restaurant_rated_at = Column(DateTime, nullable=True)
    rider_rating = Column(Integer, nullable=True)
    rider_review = Column(Text, nullable=True)
    rider_rated_at = Column(DateTime, nullable=True)

    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", lazy="selectin"
    )

    __table_args__ = (
        Index("idx_orders_restaurant_status", "restaurant_id", "status"),
        Index("idx_orders_rider_status", "rider_id", "status"),
        Index("idx_orders_customer", "customer_id"),
        CheckConstraint(
            "restaurant_rating IS NULL OR (restaurant_rating >= 1 AND restaurant_rating <= 5)",
            name="ck_orders_restaurant_rating_range",
        ),
        CheckConstraint(
            "rider_rating IS NULL OR (rider_rating >= 1 AND rider_rating <= 5)",
            name="ck_orders_rider_rating_range",
        ),
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    menu_item_id = Column(String, ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)

    # Snapshot pricing and name at time of order
    price_at_time_of_order = Column(Float, nullable=False)
    item_name = Column(String, nullable=False)

    order = relationship("Order", back_populates="items")
