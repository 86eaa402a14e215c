# app/core/config.py
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load environment (.env when running locally)
load_dotenv()


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./food_delivery.db"
    sql_echo: bool = False

    frontend_url: Optional[str] = None  # CORS origin, "*" when unset
    log_level: str = "INFO"

    # Restaurant listing radius when the caller does not pass maxDistance (km)
    default_max_distance_km: float = 25.0

    # Flat fee added to every order total and credited to the rider on delivery
    delivery_fee: float = 0.0

    # When enabled, assignment marks the rider busy and a terminal order frees them again.
    # Off by default: riders toggle their own availability.
    release_rider_on_completion: bool = False

    # Optional admin account created on startup
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None


settings = Settings()
