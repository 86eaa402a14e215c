from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.auth.dependencies import AuthContext, get_customer_context
from app.crud import cart as cart_crud
from app.crud.order import create_order_from_cart
from app.schemas.cart import CartAdd, CartQuantityUpdate
from app.schemas.order import CheckoutRequest, OrderRead

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("")
async def view_cart(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_customer_context),
):
    return {"success": True, "data": await cart_crud.get_cart(db, ctx)}


@router.post("")
async def add_item(
    body: CartAdd,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_customer_context),
):
    cart = await cart_crud.add_to_cart(db, ctx, body.menu_item_id, body.quantity, body.replace)
    return {"success": True, "message": "Item added to cart", "data": cart}


@router.patch("/{entry_id}")
async def update_item(
    entry_id: str,
    body: CartQuantityUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_customer_context),
):
    cart = await cart_crud.update_quantity(db, ctx, entry_id, body.quantity)
    return {"success": True, "message": "Cart updated", "data": cart}


@router.delete("/{entry_id}")
async def remove_item(
    entry_id: str,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_customer_context),
):
    cart = await cart_crud.remove_entry(db, ctx, entry_id)
    return {"success": True, "message": "Item removed from cart", "data": cart}


@router.delete("")
async def clear(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_customer_context),
):
    await cart_crud.clear_cart(db, ctx)
    return {"success": True, "message": "Cart cleared"}


@router.post("/checkout", status_code=201)
async def checkout(
    body: CheckoutRequest,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_customer_context),
):
    order = await create_order_from_cart(db, ctx, delivery_address=body.delivery_address)
    return {
        "success": True,
        "message": "Order placed successfully",
        "data": OrderRead.model_validate(order),
    }
