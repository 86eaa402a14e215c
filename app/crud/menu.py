from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from datetime import datetime
from typing import List
import logging

from app.auth.dependencies import AuthContext
from app.core.errors import ForbiddenError, NotFoundError
from app.crud.account import ensure_restaurant_profile
from app.models.menu.menu_item import MenuItem
from app.schemas.menu_item import MenuItemCreate, MenuItemUpdate

log = logging.getLogger(__name__)


async def list_menu_items(db: AsyncSession, ctx: AuthContext) -> List[MenuItem]:
    """All items of the calling restaurant, newest first"""
    result = await db.execute(
        select(MenuItem)
        .where(MenuItem.restaurant_id == ctx.id)
        .order_by(MenuItem.created_at.desc())
    )
    return result.scalars().all()


async def create_menu_item(db: AsyncSession, ctx: AuthContext, data: MenuItemCreate) -> MenuItem:
    profile = await ensure_restaurant_profile(db, ctx.account)

    item = MenuItem(
        restaurant_id=ctx.id,
        name=data.name.strip(),
        description=data.description.strip(),
        price=float(data.price),
        category=data.category,
        cuisine=data.cuisine,
        sub_category=data.sub_category,
        image=data.image,
        is_veg=data.is_veg,
        is_available=data.is_available,
        restaurant_latitude=profile.latitude,
        restaurant_longitude=profile.longitude,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    log.info("menu item created: restaurant=%s item=%s", ctx.id, item.id)
    return item


async def _get_owned_item(db: AsyncSession, ctx: AuthContext, item_id: str) -> MenuItem:
    item = await db.get(MenuItem, item_id)
    if not item:
        raise NotFoundError("Menu item not found")
    if item.restaurant_id != ctx.id:
        raise ForbiddenError("Access denied. You can only manage your own menu items.")
    return item


async def update_menu_item(db: AsyncSession, ctx: AuthContext, item_id: str, updates: MenuItemUpdate) -> MenuItem:
    item = await _get_owned_item(db, ctx, item_id)

    # Only fields the caller sent; sub_category may be cleared with an explicit null
    data = updates.model_dump(exclude_unset=True)
    for field, value in data.items():
        if value is None and field != "sub_category":
            continue
        setattr(item, field, value)
    item.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(item)
    return item


async def delete_menu_item(db: AsyncSession, ctx: AuthContext, item_id: str) -> None:
    item = await _get_owned_item(db, ctx, item_id)
    await db.delete(item)
    await db.commit()
    log.info("menu item deleted: restaurant=%s item=%s", ctx.id, item_id)
