from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey, Text, Enum, Index, CheckConstraint
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from datetime import datetime
from app.models.base import Base
import uuid, enum


class MenuCategory(str, enum.Enum):
    STARTER = "Starter"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"
    BEVERAGE = "Beverage"
    SNACKS = "Snacks"


class Cuisine(str, enum.Enum):
    INDIAN = "Indian"
    CHINESE = "Chinese"
    ITALIAN = "Italian"
    MEXICAN = "Mexican"
    THAI = "Thai"
    JAPANESE = "Japanese"
    FRENCH = "French"
    MEDITERRANEAN = "Mediterranean"
    AMERICAN = "American"
    KOREAN = "Korean"
    MIDDLE_EASTERN = "Middle Eastern"
    CONTINENTAL = "Continental"


class SubCategory(str, enum.Enum):
    PIZZA = "Pizza"
    BURGER = "Burger"
    PASTA = "Pasta"
    NOODLES = "Noodles"
    RICE = "Rice"
    SANDWICH = "Sandwich"
    SALAD = "Salad"
    SOUP = "Soup"
    CURRY = "Curry"
    BIRYANI = "Biryani"
    KEBAB = "Kebab"
    MEAL = "Meal"
    CAKE = "Cake"
    DESSERT = "Dessert"
    JUICE = "Juice"
    COFFEE = "Coffee"
    TEA = "Tea"


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    restaurant_id = Column(GUID, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(Enum(MenuCategory), nullable=False)
    cuisine = Column(Enum(Cuisine), nullable=False)
    sub_category = Column(Enum(SubCategory), nullable=True)
    image = Column(String, nullable=False)
    is_veg = Column(Boolean, default=True, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    # Copied from the restaurant profile so listings can filter by distance
    restaurant_latitude = Column(Float, nullable=True)
    restaurant_longitude = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    restaurant = relationship("Account")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_menu_items_price_nonneg"),
        Index("idx_menu_items_restaurant_category", "restaurant_id", "category"),
        Index("idx_menu_items_restaurant_available", "restaurant_id", "is_available"),
    )
