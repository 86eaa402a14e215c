from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from datetime import datetime
from app.models.base import Base
import uuid


class Wishlist(Base):
    """Named, restaurant-scoped list of items a customer wants to order again"""
    __tablename__ = "wishlists"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(GUID, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    restaurant_id = Column(GUID, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    items = relationship(
        "WishlistItem",
        back_populates="wishlist",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="WishlistItem.added_at",
    )

    __table_args__ = (
        Index("idx_wishlists_account", "account_id"),
        Index("idx_wishlists_account_restaurant", "account_id", "restaurant_id"),
    )


class WishlistItem(Base):
    __tablename__ = "wishlist_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    wishlist_id = Column(String, ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False)
    menu_item_id = Column(String, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=True)
    price = Column(Float, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime, default=datetime.utcnow)

    wishlist = relationship("Wishlist", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_wishlist_items_quantity_min"),
    )
