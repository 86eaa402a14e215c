from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from typing import List
import logging

from app.auth.dependencies import AuthContext
from app.core.errors import ValidationError, NotFoundError
from app.models.customer.cart_entry import CartEntry
from app.models.menu.menu_item import MenuItem
from app.schemas.cart import CartLine, CartRead

log = logging.getLogger(__name__)


async def _entries(db: AsyncSession, ctx: AuthContext) -> List[CartEntry]:
    result = await db.execute(
        select(CartEntry)
        .where(CartEntry.account_id == ctx.id)
        .order_by(CartEntry.added_at)
    )
    return result.scalars().all()


def _summarize(entries: List[CartEntry]) -> CartRead:
    lines = []
    total = 0.0
    for e in entries:
        item = e.menu_item
        line_total = round(float(item.price) * e.quantity, 2)
        total += line_total
        lines.append(
            CartLine(
                id=e.id,
                menu_item_id=item.id,
                name=item.name,
                price=float(item.price),
                quantity=e.quantity,
                line_total=line_total,
                is_available=item.is_available,
            )
        )
    return CartRead(
        restaurant_id=entries[0].restaurant_id if entries else None,
        items=lines,
        total=round(total, 2),
    )


async def get_cart(db: AsyncSession, ctx: AuthContext) -> CartRead:
    return _summarize(await _entries(db, ctx))


async def add_to_cart(
    db: AsyncSession, ctx: AuthContext, menu_item_id: str, quantity: int = 1, replace: bool = False
) -> CartRead:
    item = await db.get(MenuItem, menu_item_id)
    if not item:
        raise NotFoundError("Menu item not found")
    if not item.is_available:
        raise ValidationError(f"{item.name} is currently unavailable")

    entries = await _entries(db, ctx)
    other_restaurant = [e for e in entries if e.restaurant_id != item.restaurant_id]
    if other_restaurant:
        if not replace:
            raise ValidationError(
                "Your cart has items from another restaurant. Clear it or add with replace=true."
            )
        for e in other_restaurant:
            await db.delete(e)

    existing = next((e for e in entries if e.menu_item_id == item.id), None)
    if existing:
        existing.quantity += quantity
    else:
        db.add(
            CartEntry(
                account_id=ctx.id,
                menu_item=item,
                restaurant_id=item.restaurant_id,
                quantity=quantity,
            )
        )

    await db.commit()
    return await get_cart(db, ctx)


async def _get_entry(db: AsyncSession, ctx: AuthContext, entry_id: str) -> CartEntry:
    result = await db.execute(
        select(CartEntry).where(CartEntry.id == entry_id, CartEntry.account_id == ctx.id)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise NotFoundError("Item not found in cart")
    return entry


async def update_quantity(db: AsyncSession, ctx: AuthContext, entry_id: str, quantity: int) -> CartRead:
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    entry = await _get_entry(db, ctx, entry_id)
    entry.quantity = quantity
    await db.commit()
    return await get_cart(db, ctx)


async def remove_entry(db: AsyncSession, ctx: AuthContext, entry_id: str) -> CartRead:
    entry = await _get_entry(db, ctx, entry_id)
    await db.delete(entry)
    await db.commit()
    return await get_cart(db, ctx)


async def clear_cart(db: AsyncSession, ctx: AuthContext) -> None:
    await db.execute(delete(CartEntry).where(CartEntry.account_id == ctx.id))
    await db.commit()
    log.info("cart cleared for %s", ctx.id)
