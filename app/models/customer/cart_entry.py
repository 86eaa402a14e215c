from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from datetime import datetime
from app.models.base import Base
import uuid


class CartEntry(Base):
    """One line of a customer's cart; a cart only ever holds one restaurant's items"""
    __tablename__ = "cart_entries"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(GUID, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(String, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    restaurant_id = Column(GUID, ForeignKey("accounts.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime, default=datetime.utcnow)

    menu_item = relationship("MenuItem", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("account_id", "menu_item_id", name="uq_cart_account_item"),
        CheckConstraint("quantity >= 1", name="ck_cart_entries_quantity_min"),
    )
