from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple
import logging
import uuid

from app.auth.dependencies import AuthContext
from app.core.errors import ValidationError, ConflictError, ForbiddenError, NotFoundError
from app.core.order_flow import OrderStatus
from app.crud.account import get_account, ensure_restaurant_profile, ensure_rider_profile
from app.crud.order import get_order
from app.models.account import AccountRole
from app.models.orders import Order
from app.schemas.rating import RatingSubmit

log = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def running_average(old_avg: float, old_count: int, new_rating: int) -> Tuple[float, int]:
    """Folds one rating into an average, rounded half-up to one decimal."""
    old_count = old_count or 0
    total = Decimal(str(old_avg or 0)) * old_count + Decimal(new_rating)
    new_count = old_count + 1
    new_avg = (total / new_count).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return float(new_avg), new_count


async def submit_order_rating(
    db: AsyncSession, ctx: AuthContext, order_id: str, rating: RatingSubmit
) -> Order:
    """
    Rates the restaurant and/or rider of a delivered order.

    The order's rating fields and both running averages are written in one
    commit. Each side of an order can be rated once.
    """
    order = await get_order(db, order_id)

    if not ctx.is_admin and order.customer_id != ctx.id:
        raise ForbiddenError("Only the customer who placed the order can rate it")

    if order.status != OrderStatus.DELIVERED:
        raise ValidationError("Can only rate delivered orders")

    rate_restaurant = rating.restaurant_rating is not None
    rate_rider = rating.rider_rating is not None and order.rider_id is not None
    if not rate_restaurant and not rate_rider:
        raise ValidationError("Provide a restaurant or rider rating")

    if rate_restaurant and order.restaurant_rating is not None:
        raise ConflictError("Restaurant has already been rated for this order")
    if rate_rider and order.rider_rating is not None:
        raise ConflictError("Rider has already been rated for this order")

    now = datetime.utcnow()

    if rate_restaurant:
        order.restaurant_rating = rating.restaurant_rating
        order.restaurant_review = rating.restaurant_review or ""
        order.restaurant_rated_at = now

        restaurant = await get_account(db, order.restaurant_id, AccountRole.RESTAURANT)
        if restaurant:
            profile = await ensure_restaurant_profile(db, restaurant)
            profile.rating_average, profile.rating_count = running_average(
                profile.rating_average, profile.rating_count, rating.restaurant_rating
            )

    if rate_rider:
        order.rider_rating = rating.rider_rating
        order.rider_review = rating.rider_review or ""
        order.rider_rated_at = now

        rider = await get_account(db, order.rider_id, AccountRole.RIDER)
        if rider:
            profile = await ensure_rider_profile(db, rider)
            profile.rating_average, profile.rating_count = running_average(
                profile.rating_average, profile.rating_count, rating.rider_rating
            )

    order.updated_at = now
    await db.commit()
    log.info(
        "order %s rated: restaurant=%s rider=%s",
        order.id, rating.restaurant_rating if rate_restaurant else "-", rating.rider_rating if rate_rider else "-",
    )
    return order


async def get_restaurant_rating(db: AsyncSession, restaurant_id: uuid.UUID):
    restaurant = await get_account(db, restaurant_id, AccountRole.RESTAURANT)
    if not restaurant:
        raise NotFoundError("Restaurant not found")
    profile = await ensure_restaurant_profile(db, restaurant)
    await db.commit()
    return profile.rating_average, profile.rating_count
