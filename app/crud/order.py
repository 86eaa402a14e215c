"""
Order lifecycle

Creates orders from a cart snapshot or an explicit item list, advances them
through the status machine in app.core.order_flow, binds riders, and keeps
rider delivery statistics in step with completed orders.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from datetime import datetime
from typing import List, Optional, Sequence
import logging
import uuid

from app.auth.dependencies import AuthContext
from app.core.config import settings
from app.core.errors import ValidationError, NotFoundError, ForbiddenError
from app.core.order_flow import (
    Actor,
    OrderStatus,
    ACTIVE_STATUSES,
    IN_TRANSIT_STATUSES,
    TERMINAL_STATUSES,
    check_transition,
)
from app.crud.account import (
    get_account,
    ensure_restaurant_profile,
    ensure_rider_profile,
    require_rider,
)
from app.models.account import AccountRole
from app.models.customer.cart_entry import CartEntry
from app.models.menu.menu_item import MenuItem
from app.models.orders import Order, OrderItem
from app.schemas.order import OrderLineIn

log = logging.getLogger(__name__)


# ==================== CREATE ====================

async def create_order(
    db: AsyncSession,
    ctx: AuthContext,
    restaurant_id: uuid.UUID,
    items: Sequence[OrderLineIn],
    delivery_address: Optional[str] = None,
    commit: bool = True,
) -> Order:
    """
    Creates a pending order. Prices come from the menu, never from the client.
    Nothing is written unless every line validates.
    """
    if not items:
        raise ValidationError("Order must contain at least one item")

    restaurant = await get_account(db, restaurant_id, AccountRole.RESTAURANT)
    if not restaurant:
        raise ValidationError("Restaurant not found")

    profile = await ensure_restaurant_profile(db, restaurant)
    if not profile.is_kitchen_open:
        raise ValidationError("Restaurant kitchen is currently closed")

    # Merge repeated lines for the same item
    quantities = {}
    for line in items:
        if line.quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        quantities[line.menu_item_id] = quantities.get(line.menu_item_id, 0) + line.quantity

    res = await db.execute(select(MenuItem).where(MenuItem.id.in_(list(quantities))))
    menu_items = {it.id: it for it in res.scalars().all()}

    order_items = []
    subtotal = 0.0
    for item_id, qty in quantities.items():
        menu_item = menu_items.get(item_id)
        if not menu_item or menu_item.restaurant_id != restaurant.id:
            raise ValidationError(f"Menu item {item_id} not found for this restaurant")
        if not menu_item.is_available:
            raise ValidationError(f"{menu_item.name} is currently unavailable")

        price = float(menu_item.price)
        subtotal += price * qty
        order_items.append(
            OrderItem(
                menu_item_id=menu_item.id,
                quantity=qty,
                price_at_time_of_order=price,
                item_name=menu_item.name,
            )
        )

    subtotal = round(subtotal, 2)
    fee = round(float(settings.delivery_fee), 2)
    now = datetime.utcnow()

    order = Order(
        id=str(uuid.uuid4()),
        customer_id=ctx.id,
        restaurant_id=restaurant.id,
        status=OrderStatus.PENDING,
        subtotal=subtotal,
        delivery_fee=fee,
        total_amount=round(subtotal + fee, 2),
        delivery_address=(delivery_address or "").strip() or None,
        created_at=now,
        updated_at=now,
        items=order_items,
    )
    db.add(order)

    if commit:
        await db.commit()
    log.info("order created: %s customer=%s restaurant=%s total=%s", order.id, ctx.id, restaurant.id, order.total_amount)
    return order


async def create_order_from_cart(
    db: AsyncSession, ctx: AuthContext, delivery_address: Optional[str] = None
) -> Order:
    """Checkout: turns the caller's cart into an order and empties the cart."""
    res = await db.execute(
        select(CartEntry).where(CartEntry.account_id == ctx.id).order_by(CartEntry.added_at)
    )
    entries = res.scalars().all()
    if not entries:
        raise ValidationError("Cart is empty")

    restaurant_ids = {e.restaurant_id for e in entries}
    if len(restaurant_ids) > 1:
        raise ValidationError("Cart contains items from more than one restaurant")

    lines = [OrderLineIn(menu_item_id=e.menu_item_id, quantity=e.quantity) for e in entries]
    order = await create_order(
        db, ctx, restaurant_ids.pop(), lines, delivery_address=delivery_address, commit=False
    )

    for e in entries:
        await db.delete(e)

    await db.commit()
    return order


# ==================== READ ====================

async def get_order(db: AsyncSession, order_id: str) -> Order:
    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if not order:
        raise NotFoundError("Order not found")
    return order


def _can_view(ctx: AuthContext, order: Order) -> bool:
    if ctx.is_admin:
        return True
    return ctx.id in (order.customer_id, order.restaurant_id, order.rider_id)


async def get_order_for(db: AsyncSession, ctx: AuthContext, order_id: str) -> Order:
    order = await get_order(db, order_id)
    if not _can_view(ctx, order):
        raise ForbiddenError("Access denied. This order does not belong to you.")
    return order


async def list_orders_for(
    db: AsyncSession, ctx: AuthContext, status: Optional[OrderStatus] = None
) -> List[Order]:
    """Orders visible to the caller: placed (customer), received (restaurant), carried (rider)."""
    query = select(Order)
    if ctx.role == AccountRole.CUSTOMER:
        query = query.where(Order.customer_id == ctx.id)
    elif ctx.role == AccountRole.RESTAURANT:
        query = query.where(Order.restaurant_id == ctx.id)
    elif ctx.role == AccountRole.RIDER:
        query = query.where(Order.rider_id == ctx.id)

    if status is not None:
        query = query.where(Order.status == status)

    result = await db.execute(query.order_by(Order.created_at.desc()))
    return result.scalars().all()


async def list_unassigned_orders(db: AsyncSession) -> List[Order]:
    """Accepted orders still waiting for a rider"""
    result = await db.execute(
        select(Order)
        .where(Order.status == OrderStatus.ACCEPTED, Order.rider_id.is_(None))
        .order_by(Order.created_at)
    )
    return result.scalars().all()


async def count_active_orders_for_rider(db: AsyncSession, rider_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(Order.id)).where(
            Order.rider_id == rider_id,
            Order.status.in_(ACTIVE_STATUSES),
        )
    )
    return result.scalar_one()


async def list_in_transit_order_ids(db: AsyncSession, rider_id: uuid.UUID) -> List[str]:
    result = await db.execute(
        select(Order.id).where(
            Order.rider_id == rider_id,
            Order.status.in_(IN_TRANSIT_STATUSES),
        )
    )
    return list(result.scalars().all())


# ==================== TRANSITIONS ====================

def _actor_for(ctx: AuthContext, order: Order) -> Actor:
    """Maps the caller onto the state machine, enforcing ownership of the order."""
    if ctx.is_admin:
        return Actor.ADMIN
    if ctx.role == AccountRole.RESTAURANT and order.restaurant_id == ctx.id:
        return Actor.RESTAURANT
    if ctx.role == AccountRole.RIDER and order.rider_id == ctx.id:
        return Actor.RIDER
    if ctx.role == AccountRole.CUSTOMER and order.customer_id == ctx.id:
        return Actor.CUSTOMER
    raise ForbiddenError("Access denied. You cannot update this order.")


def _reset_today_if_stale(profile, now: datetime) -> None:
    if profile.last_earnings_reset is None or profile.last_earnings_reset.date() < now.date():
        profile.today_earnings = 0.0
        profile.last_earnings_reset = now


async def _release_rider(db: AsyncSession, order: Order) -> None:
    if not order.rider_id or not settings.release_rider_on_completion:
        return
    rider = await get_account(db, order.rider_id, AccountRole.RIDER)
    if rider:
        profile = await ensure_rider_profile(db, rider)
        profile.is_available = True


async def _record_delivery(db: AsyncSession, order: Order, now: datetime) -> None:
    rider = await get_account(db, order.rider_id, AccountRole.RIDER) if order.rider_id else None
    if not rider:
        return
    profile = await ensure_rider_profile(db, rider)
    _reset_today_if_stale(profile, now)
    profile.total_deliveries = (profile.total_deliveries or 0) + 1
    profile.total_earnings = round((profile.total_earnings or 0) + order.delivery_fee, 2)
    profile.today_earnings = round((profile.today_earnings or 0) + order.delivery_fee, 2)


async def update_order_status(
    db: AsyncSession,
    ctx: AuthContext,
    order_id: str,
    target: OrderStatus,
    rider_id: Optional[uuid.UUID] = None,
    reason: Optional[str] = None,
) -> Order:
    order = await get_order(db, order_id)

    if target == OrderStatus.RIDER_ASSIGNED:
        check_transition(Actor.DISPATCH, order.status, target)
        if rider_id is None:
            raise ValidationError("riderId is required to assign a rider")
        return await assign_rider(db, ctx, order_id, rider_id)

    actor = _actor_for(ctx, order)
    current = order.status
    check_transition(actor, current, target)

    now = datetime.utcnow()
    order.status = target
    order.updated_at = now

    if target == OrderStatus.DELIVERED:
        order.delivered_at = now
        await _record_delivery(db, order, now)
    elif target == OrderStatus.CANCELLED:
        order.cancelled_at = now
        order.cancel_reason = (reason or "").strip() or None

    if target in TERMINAL_STATUSES:
        await _release_rider(db, order)

    await db.commit()
    log.info("order %s: %s -> %s by %s %s", order.id, current.value, target.value, actor.value, ctx.id)
    return order


async def assign_rider(
    db: AsyncSession, ctx: AuthContext, order_id: str, rider_id: uuid.UUID
) -> Order:
    """
    Binds an available rider to an accepted order. The owning restaurant or an
    admin may assign anyone; a rider may only take the order for themselves.
    """
    order = await get_order(db, order_id)

    if ctx.role == AccountRole.RIDER:
        if rider_id != ctx.id:
            raise ForbiddenError("Riders can only assign orders to themselves")
    elif not (ctx.is_admin or (ctx.role == AccountRole.RESTAURANT and order.restaurant_id == ctx.id)):
        raise ForbiddenError("Access denied. You cannot assign a rider to this order.")

    check_transition(Actor.DISPATCH, order.status, OrderStatus.RIDER_ASSIGNED)

    rider = await require_rider(db, rider_id)
    profile = await ensure_rider_profile(db, rider)
    if not profile.is_available:
        log.warning("assignment refused: rider %s unavailable for order %s", rider_id, order.id)
        raise ValidationError("Rider is not available")

    now = datetime.utcnow()
    order.rider_id = rider.id
    order.status = OrderStatus.RIDER_ASSIGNED
    order.updated_at = now
    if settings.release_rider_on_completion:
        profile.is_available = False

    await db.commit()
    log.info("order %s: rider %s assigned by %s", order.id, rider.id, ctx.id)
    return order
