from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, update
from collections import defaultdict
from typing import Dict, List, Optional
import logging
import uuid

from app.auth.dependencies import AuthContext
from app.core.errors import ConflictError
from app.core.order_flow import OPEN_STATUSES
from app.crud.account import ensure_restaurant_profile
from app.models.account import Account, AccountRole
from app.models.menu.menu_item import MenuItem
from app.models.orders import Order
from app.models.profiles import RestaurantProfile
from app.schemas.menu_item import MenuItemRead
from app.schemas.rating import RatingSummary
from app.schemas.restaurant import AddressRead, RestaurantListing, RestaurantProfileUpdate
from app.utils.geo import distance_if_within

log = logging.getLogger(__name__)


async def count_open_orders(db: AsyncSession, restaurant_id: uuid.UUID) -> int:
    """Orders that still need the kitchen (anything neither delivered nor cancelled)."""
    result = await db.execute(
        select(func.count(Order.id)).where(
            Order.restaurant_id == restaurant_id,
            Order.status.in_(OPEN_STATUSES),
        )
    )
    return result.scalar_one()


async def set_kitchen_open(db: AsyncSession, ctx: AuthContext, is_open: bool) -> bool:
    profile = await ensure_restaurant_profile(db, ctx.account)

    if not is_open and profile.is_kitchen_open:
        active_orders = await count_open_orders(db, ctx.id)
        if active_orders > 0:
            log.warning("kitchen close refused: restaurant=%s active=%s", ctx.id, active_orders)
            raise ConflictError(
                f"Cannot close kitchen. You have {active_orders} active order(s). "
                "Please complete all orders before closing.",
                activeOrders=active_orders,
            )

    profile.is_kitchen_open = is_open
    await db.commit()
    log.info("kitchen %s: restaurant=%s", "opened" if is_open else "closed", ctx.id)
    return is_open


async def toggle_kitchen(db: AsyncSession, ctx: AuthContext) -> bool:
    profile = await ensure_restaurant_profile(db, ctx.account)
    return await set_kitchen_open(db, ctx, not profile.is_kitchen_open)


async def update_profile(db: AsyncSession, ctx: AuthContext, updates: RestaurantProfileUpdate) -> RestaurantProfile:
    profile = await ensure_restaurant_profile(db, ctx.account)
    data = updates.model_dump(exclude_unset=True)
    if data.get("cuisine") is not None:
        data["cuisine"] = [c.value for c in data["cuisine"]]

    for field, value in data.items():
        setattr(profile, field, value)

    # Keep the denormalized coordinates on menu items in step
    if "latitude" in data or "longitude" in data:
        await db.execute(
            update(MenuItem)
            .where(MenuItem.restaurant_id == ctx.id)
            .values(restaurant_latitude=profile.latitude, restaurant_longitude=profile.longitude)
            .execution_options(synchronize_session="fetch")
        )

    await db.commit()
    await db.refresh(profile)
    return profile


def _listing(account: Account, profile: Optional[RestaurantProfile], items: List[MenuItem]) -> RestaurantListing:
    if profile is None:
        return RestaurantListing(
            id=account.id,
            name=account.name,
            avatar=account.avatar or "",
            address=AddressRead(),
            is_kitchen_open=True,
            rating=RatingSummary(average=0, count=0),
            menu_items=[MenuItemRead.model_validate(i) for i in items],
            menu_count=len(items),
        )

    return RestaurantListing(
        id=account.id,
        name=profile.kitchen_name or account.name,
        avatar=account.avatar or "",
        cuisine=profile.cuisine or [],
        description=profile.description or "",
        address=AddressRead.model_validate(profile),
        is_kitchen_open=profile.is_kitchen_open,
        rating=RatingSummary(average=profile.rating_average, count=profile.rating_count),
        menu_items=[MenuItemRead.model_validate(i) for i in items],
        menu_count=len(items),
    )


async def list_restaurants(
    db: AsyncSession,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    max_distance_km: float = 25.0,
) -> List[RestaurantListing]:
    """
    Restaurants that have at least one available menu item.
    When both coordinates are given, only those within max_distance_km are kept,
    nearest first; restaurants without coordinates are skipped.
    """
    res = await db.execute(
        select(Account, RestaurantProfile)
        .outerjoin(RestaurantProfile, RestaurantProfile.account_id == Account.id)
        .where(Account.role == AccountRole.RESTAURANT, Account.is_active == True)
        .order_by(Account.created_at)
    )
    rows = res.unique().all()

    items_res = await db.execute(
        select(MenuItem)
        .where(MenuItem.is_available == True)
        .order_by(MenuItem.created_at.desc())
    )
    items_by_restaurant: Dict[uuid.UUID, List[MenuItem]] = defaultdict(list)
    for item in items_res.scalars().all():
        items_by_restaurant[item.restaurant_id].append(item)

    listings = []
    for account, profile in rows:
        items = items_by_restaurant.get(account.id, [])
        if not items:
            continue
        listings.append(_listing(account, profile, items))

    if latitude is None or longitude is None:
        return listings

    nearby = []
    for listing in listings:
        distance = distance_if_within(
            latitude, longitude,
            listing.address.latitude, listing.address.longitude,
            max_distance_km,
        )
        if distance is None:
            continue
        listing.distance_km = round(distance, 2)
        nearby.append(listing)

    nearby.sort(key=lambda r: r.distance_km)
    log.info("restaurants within %skm of (%s, %s): %s", max_distance_km, latitude, longitude, len(nearby))
    return nearby
