from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, Text, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from datetime import datetime
from app.models.base import Base
import uuid


class RestaurantProfile(Base):
    """Kitchen details for an account with role=restaurant"""
    __tablename__ = "restaurant_profiles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(GUID, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)

    kitchen_name = Column(String, nullable=True)
    cuisine = Column(JSON, nullable=False, default=list)  # ["Indian", "Chinese"]
    description = Column(Text, nullable=True)
    business_license = Column(String, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_kitchen_open = Column(Boolean, default=True, nullable=False)

    street = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    rating_average = Column(Float, default=0.0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)

    account = relationship("Account", back_populates="restaurant_profile")

    __table_args__ = (
        CheckConstraint(
            "rating_average >= 0 AND rating_average <= 5",
            name="ck_restaurant_profiles_rating_range",
        ),
    )


class RiderProfile(Base):
    """Vehicle, availability, location and earnings for an account with role=rider"""
    __tablename__ = "rider_profiles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(GUID, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)

    vehicle_type = Column(String, nullable=True)
    vehicle_number = Column(String, nullable=True)
    license_number = Column(String, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_available = Column(Boolean, default=False, nullable=False)

    current_latitude = Column(Float, nullable=True)
    current_longitude = Column(Float, nullable=True)
    location_updated_at = Column(DateTime, nullable=True)

    total_deliveries = Column(Integer, default=0, nullable=False)
    total_earnings = Column(Float, default=0.0, nullable=False)
    today_earnings = Column(Float, default=0.0, nullable=False)
    last_earnings_reset = Column(DateTime, default=datetime.utcnow, nullable=False)

    rating_average = Column(Float, default=2.5, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)

    account = relationship("Account", back_populates="rider_profile")

    __table_args__ = (
        CheckConstraint(
            "rating_average >= 0 AND rating_average <= 5",
            name="ck_rider_profiles_rating_range",
        ),
    )
