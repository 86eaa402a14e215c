from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional
import uuid

from app.core.errors import NotFoundError
from app.models.account import Account, AccountRole
from app.models.profiles import RestaurantProfile, RiderProfile


async def get_account(db: AsyncSession, account_id: uuid.UUID, role: Optional[AccountRole] = None):
    """Loads an account, optionally requiring a role; None when absent or role differs."""
    account = await db.get(Account, account_id)
    if not account:
        return None
    if role is not None and account.role != role:
        return None
    return account


async def get_restaurant_profile(db: AsyncSession, restaurant_id: uuid.UUID) -> Optional[RestaurantProfile]:
    result = await db.execute(
        select(RestaurantProfile).where(RestaurantProfile.account_id == restaurant_id)
    )
    return result.scalar_one_or_none()


async def get_rider_profile(db: AsyncSession, rider_id: uuid.UUID) -> Optional[RiderProfile]:
    result = await db.execute(
        select(RiderProfile).where(RiderProfile.account_id == rider_id)
    )
    return result.scalar_one_or_none()


async def ensure_restaurant_profile(db: AsyncSession, restaurant: Account) -> RestaurantProfile:
    """Returns the restaurant's profile, creating an empty one the first time."""
    profile = await get_restaurant_profile(db, restaurant.id)
    if profile is None:
        profile = RestaurantProfile(account_id=restaurant.id, kitchen_name=restaurant.name)
        db.add(profile)
        await db.flush()
    return profile


async def ensure_rider_profile(db: AsyncSession, rider: Account) -> RiderProfile:
    profile = await get_rider_profile(db, rider.id)
    if profile is None:
        profile = RiderProfile(account_id=rider.id)
        db.add(profile)
        await db.flush()
    return profile


async def require_rider(db: AsyncSession, rider_id: uuid.UUID) -> Account:
    rider = await get_account(db, rider_id, AccountRole.RIDER)
    if not rider:
        raise NotFoundError("Rider not found")
    return rider


async def require_restaurant(db: AsyncSession, restaurant_id: uuid.UUID) -> Account:
    restaurant = await get_account(db, restaurant_id, AccountRole.RESTAURANT)
    if not restaurant:
        raise NotFoundError("Restaurant not found")
    return restaurant
