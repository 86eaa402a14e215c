from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.auth.dependencies import AuthContext, get_auth_context
from app.crud import wishlist as wishlist_crud
from app.schemas.wishlist import (
    WishlistCreate,
    WishlistItemIn,
    WishlistItemQuantity,
    WishlistRead,
    WishlistRename,
)

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("")
async def list_wishlists(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    wishlists = await wishlist_crud.list_wishlists(db, ctx)
    return {
        "success": True,
        "count": len(wishlists),
        "data": [WishlistRead.model_validate(w) for w in wishlists],
    }


@router.post("", status_code=201)
async def create_wishlist(
    body: WishlistCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    wishlist = await wishlist_crud.create_wishlist(db, ctx, body)
    return {
        "success": True,
        "message": "Wishlist created successfully",
        "data": WishlistRead.model_validate(wishlist),
    }


@router.get("/{wishlist_id}")
async def get_wishlist(
    wishlist_id: str,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    wishlist = await wishlist_crud.get_wishlist(db, ctx, wishlist_id)
    return {"success": True, "data": WishlistRead.model_validate(wishlist)}


@router.patch("/{wishlist_id}/name")
async def rename_wishlist(
    wishlist_id: str,
    body: WishlistRename,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    wishlist = await wishlist_crud.rename_wishlist(db, ctx, wishlist_id, body.name)
    return {
        "success": True,
        "message": "Wishlist name updated",
        "data": WishlistRead.model_validate(wishlist),
    }


@router.post("/{wishlist_id}/items")
async def add_wishlist_item(
    wishlist_id: str,
    body: WishlistItemIn,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    wishlist = await wishlist_crud.add_item(db, ctx, wishlist_id, body)
    return {
        "success": True,
        "message": "Item added to wishlist",
        "data": WishlistRead.model_validate(wishlist),
    }


@router.patch("/{wishlist_id}/items/{item_id}")
async def update_wishlist_item(
    wishlist_id: str,
    item_id: str,
    body: WishlistItemQuantity,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    wishlist = await wishlist_crud.update_item_quantity(db, ctx, wishlist_id, item_id, body.quantity)
    return {
        "success": True,
        "message": "Item quantity updated",
        "data": WishlistRead.model_validate(wishlist),
    }


@router.delete("/{wishlist_id}/items/{item_id}")
async def remove_wishlist_item(
    wishlist_id: str,
    item_id: str,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    wishlist = await wishlist_crud.remove_item(db, ctx, wishlist_id, item_id)
    return {
        "success": True,
        "message": "Item removed from wishlist",
        "data": WishlistRead.model_validate(wishlist),
    }


@router.delete("/{wishlist_id}")
async def delete_wishlist(
    wishlist_id: str,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    await wishlist_crud.delete_wishlist(db, ctx, wishlist_id)
    return {"success": True, "message": "Wishlist deleted successfully"}
