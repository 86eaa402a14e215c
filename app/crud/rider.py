from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
import logging
import uuid

from app.auth.dependencies import AuthContext
from app.crud.account import ensure_rider_profile, require_rider
from app.crud.order import count_active_orders_for_rider
from app.models.profiles import RiderProfile
from app.schemas.rider import RiderProfileUpdate, RiderStats

log = logging.getLogger(__name__)


async def get_profile(db: AsyncSession, ctx: AuthContext) -> RiderProfile:
    profile = await ensure_rider_profile(db, ctx.account)
    await db.commit()
    return profile


async def update_profile(db: AsyncSession, ctx: AuthContext, updates: RiderProfileUpdate) -> RiderProfile:
    profile = await ensure_rider_profile(db, ctx.account)
    for field, value in updates.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    await db.commit()
    return profile


async def set_availability(db: AsyncSession, ctx: AuthContext, is_available: bool) -> bool:
    # No guard: a rider may go offline while still carrying an order
    profile = await ensure_rider_profile(db, ctx.account)
    profile.is_available = is_available
    await db.commit()
    log.info("rider %s is now %s", ctx.id, "available" if is_available else "unavailable")
    return is_available


async def update_location(db: AsyncSession, ctx: AuthContext, latitude: float, longitude: float) -> RiderProfile:
    profile = await ensure_rider_profile(db, ctx.account)
    profile.current_latitude = latitude
    profile.current_longitude = longitude
    profile.location_updated_at = datetime.utcnow()
    await db.commit()
    return profile


async def get_stats(db: AsyncSession, rider_id: uuid.UUID) -> RiderStats:
    rider = await require_rider(db, rider_id)
    profile = await ensure_rider_profile(db, rider)

    today_earnings = profile.today_earnings or 0
    if profile.last_earnings_reset and profile.last_earnings_reset.date() < datetime.utcnow().date():
        today_earnings = 0

    active_orders = await count_active_orders_for_rider(db, rider.id)
    await db.commit()

    return RiderStats(
        total_deliveries=profile.total_deliveries or 0,
        total_earnings=profile.total_earnings or 0,
        today_earnings=today_earnings,
        rating=profile.rating_average if profile.rating_average is not None else 2.5,
        rating_count=profile.rating_count or 0,
        active_orders=active_orders,
    )
