from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.db import get_db
from app.auth.dependencies import AuthContext, get_restaurant_context
from app.core.config import settings
from app.crud import menu as menu_crud
from app.crud import restaurant as restaurant_crud
from app.crud.account import ensure_restaurant_profile
from app.schemas.menu_item import MenuItemCreate, MenuItemRead, MenuItemUpdate
from app.schemas.restaurant import RestaurantProfileRead, RestaurantProfileUpdate

router = APIRouter(prefix="/api/restaurant", tags=["restaurant"])


# ==================== MENU ====================

@router.get("/menu")
async def list_menu(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_restaurant_context),
):
    items = await menu_crud.list_menu_items(db, ctx)
    return {
        "success": True,
        "count": len(items),
        "data": [MenuItemRead.model_validate(i) for i in items],
    }


@router.post("/menu", status_code=201)
async def create_menu_item(
    body: MenuItemCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_restaurant_context),
):
    item = await menu_crud.create_menu_item(db, ctx, body)
    return {
        "success": True,
        "message": "Menu item created successfully",
        "data": MenuItemRead.model_validate(item),
    }


@router.put("/menu/{item_id}")
async def update_menu_item(
    item_id: str,
    body: MenuItemUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_restaurant_context),
):
    item = await menu_crud.update_menu_item(db, ctx, item_id, body)
    return {
        "success": True,
        "message": "Menu item updated successfully",
        "data": MenuItemRead.model_validate(item),
    }


@router.delete("/menu/{item_id}")
async def delete_menu_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_restaurant_context),
):
    await menu_crud.delete_menu_item(db, ctx, item_id)
    return {"success": True, "message": "Menu item deleted successfully"}


# ==================== KITCHEN / PROFILE ====================

@router.put("/toggle-kitchen")
async def toggle_kitchen(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_restaurant_context),
):
    is_open = await restaurant_crud.toggle_kitchen(db, ctx)
    return {
        "success": True,
        "message": f"Kitchen {'opened' if is_open else 'closed'} successfully",
        "isKitchenOpen": is_open,
    }


@router.get("/profile")
async def restaurant_profile(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_restaurant_context),
):
    profile = await ensure_restaurant_profile(db, ctx.account)
    await db.commit()
    return {"success": True, "data": RestaurantProfileRead.model_validate(profile)}


@router.put("/profile")
async def update_restaurant_profile(
    body: RestaurantProfileUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_restaurant_context),
):
    profile = await restaurant_crud.update_profile(db, ctx, body)
    return {
        "success": True,
        "message": "Profile updated",
        "data": RestaurantProfileRead.model_validate(profile),
    }


# ==================== PUBLIC LISTING ====================

@router.get("/all")
async def all_restaurants(
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    max_distance: Optional[float] = Query(None, alias="maxDistance", gt=0),
    db: AsyncSession = Depends(get_db),
):
    """Restaurants with their available menu, optionally limited to a radius (km)"""
    restaurants = await restaurant_crud.list_restaurants(
        db,
        latitude=latitude,
        longitude=longitude,
        max_distance_km=max_distance or settings.default_max_distance_km,
    )
    return {"success": True, "count": len(restaurants), "data": restaurants}
