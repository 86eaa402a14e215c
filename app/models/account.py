from sqlalchemy import Column, String, Float, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, relationship
from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTableUUID, SQLAlchemyBaseOAuthAccountTableUUID
from fastapi_users_db_sqlalchemy.generics import GUID
from datetime import datetime
from typing import List
from app.models.base import Base
import enum


class AccountRole(str, enum.Enum):
    CUSTOMER = "customer"
    RIDER = "rider"
    RESTAURANT = "restaurant"
    ADMIN = "admin"


class AuthProvider(str, enum.Enum):
    LOCAL = "local"
    GOOGLE = "google"


def _name_from_email(context):
    # OAuth sign-ups arrive without a display name
    email = context.get_current_parameters().get("email") or ""
    return email.split("@")[0] or "user"


class OAuthAccount(SQLAlchemyBaseOAuthAccountTableUUID, Base):
    __tablename__ = "oauth_accounts"

    user_id = Column(GUID, ForeignKey("accounts.id", ondelete="cascade"), nullable=False)


class Account(SQLAlchemyBaseUserTableUUID, Base):
    """Every login: customers, riders, restaurants and admins."""
    __tablename__ = "accounts"

    name = Column(String(50), nullable=False, default=_name_from_email)
    phone = Column(String(10), nullable=True)
    role = Column(Enum(AccountRole), nullable=False, default=AccountRole.CUSTOMER)
    avatar = Column(String, nullable=False, default="")
    auth_provider = Column(Enum(AuthProvider), nullable=False, default=AuthProvider.LOCAL)

    # Delivery address (customers)
    street = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    oauth_accounts: Mapped[List[OAuthAccount]] = relationship("OAuthAccount", lazy="joined")
    restaurant_profile = relationship(
        "RestaurantProfile", back_populates="account", uselist=False, cascade="all, delete-orphan"
    )
    rider_profile = relationship(
        "RiderProfile", back_populates="account", uselist=False, cascade="all, delete-orphan"
    )
