from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from datetime import datetime
from typing import Dict, Iterable, List
import logging

from app.auth.dependencies import AuthContext
from app.core.errors import ValidationError, NotFoundError
from app.crud.account import require_restaurant
from app.models.customer.wishlist import Wishlist, WishlistItem
from app.models.menu.menu_item import MenuItem
from app.schemas.wishlist import WishlistCreate, WishlistItemIn

log = logging.getLogger(__name__)


async def _menu_items_of_restaurant(db: AsyncSession, wishlist: Wishlist, item_ids: Iterable[str]) -> Dict[str, MenuItem]:
    """Loads the referenced menu items; every one must belong to the wishlist's restaurant."""
    ids = list(set(item_ids))
    res = await db.execute(select(MenuItem).where(MenuItem.id.in_(ids)))
    found = {it.id: it for it in res.scalars().all()}
    for item_id in ids:
        item = found.get(item_id)
        if not item or item.restaurant_id != wishlist.restaurant_id:
            raise ValidationError("Item must be from the same restaurant")
    return found


def _new_item(line: WishlistItemIn, menu_item: MenuItem) -> WishlistItem:
    return WishlistItem(
        menu_item_id=menu_item.id,
        name=line.name or menu_item.name,
        price=line.price if line.price is not None else float(menu_item.price),
        quantity=line.quantity,
    )


async def list_wishlists(db: AsyncSession, ctx: AuthContext) -> List[Wishlist]:
    result = await db.execute(
        select(Wishlist)
        .where(Wishlist.account_id == ctx.id)
        .order_by(Wishlist.created_at.desc())
    )
    return result.scalars().all()


async def get_wishlist(db: AsyncSession, ctx: AuthContext, wishlist_id: str) -> Wishlist:
    result = await db.execute(
        select(Wishlist).where(Wishlist.id == wishlist_id, Wishlist.account_id == ctx.id)
    )
    wishlist = result.scalar_one_or_none()
    if not wishlist:
        raise NotFoundError("Wishlist not found")
    return wishlist


async def create_wishlist(db: AsyncSession, ctx: AuthContext, data: WishlistCreate) -> Wishlist:
    name = data.name.strip()
    if not name or not data.items:
        raise ValidationError("Name, restaurant ID, and items are required")

    restaurant = await require_restaurant(db, data.restaurant_id)

    now = datetime.utcnow()
    wishlist = Wishlist(account_id=ctx.id, restaurant_id=restaurant.id, name=name, created_at=now, updated_at=now)
    menu_items = await _menu_items_of_restaurant(db, wishlist, (line.menu_item_id for line in data.items))

    items = []
    for line in data.items:
        existing = next((i for i in items if i.menu_item_id == line.menu_item_id), None)
        if existing:
            existing.quantity += line.quantity
        else:
            items.append(_new_item(line, menu_items[line.menu_item_id]))
    wishlist.items = items

    db.add(wishlist)
    await db.commit()
    log.info("wishlist created: %s for %s", wishlist.id, ctx.id)
    return wishlist


async def rename_wishlist(db: AsyncSession, ctx: AuthContext, wishlist_id: str, name: str) -> Wishlist:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    wishlist = await get_wishlist(db, ctx, wishlist_id)
    wishlist.name = name
    wishlist.updated_at = datetime.utcnow()
    await db.commit()
    return wishlist


async def add_item(db: AsyncSession, ctx: AuthContext, wishlist_id: str, line: WishlistItemIn) -> Wishlist:
    wishlist = await get_wishlist(db, ctx, wishlist_id)
    menu_items = await _menu_items_of_restaurant(db, wishlist, [line.menu_item_id])

    existing = next((i for i in wishlist.items if i.menu_item_id == line.menu_item_id), None)
    if existing:
        existing.quantity += line.quantity
    else:
        wishlist.items.append(_new_item(line, menu_items[line.menu_item_id]))

    wishlist.updated_at = datetime.utcnow()
    await db.commit()
    return wishlist


def _find_item(wishlist: Wishlist, item_id: str) -> WishlistItem:
    item = next((i for i in wishlist.items if i.id == item_id), None)
    if not item:
        raise NotFoundError("Item not found in wishlist")
    return item


async def update_item_quantity(db: AsyncSession, ctx: AuthContext, wishlist_id: str, item_id: str, quantity: int) -> Wishlist:
    if quantity < 1:
        raise ValidationError("Valid quantity is required")
    wishlist = await get_wishlist(db, ctx, wishlist_id)
    item = _find_item(wishlist, item_id)
    item.quantity = quantity
    wishlist.updated_at = datetime.utcnow()
    await db.commit()
    return wishlist


async def remove_item(db: AsyncSession, ctx: AuthContext, wishlist_id: str, item_id: str) -> Wishlist:
    wishlist = await get_wishlist(db, ctx, wishlist_id)
    item = _find_item(wishlist, item_id)
    wishlist.items.remove(item)
    wishlist.updated_at = datetime.utcnow()
    await db.commit()
    return wishlist


async def delete_wishlist(db: AsyncSession, ctx: AuthContext, wishlist_id: str) -> None:
    wishlist = await get_wishlist(db, ctx, wishlist_id)
    await db.delete(wishlist)
    await db.commit()
    log.info("wishlist deleted: %s", wishlist_id)
