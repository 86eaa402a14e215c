from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.db import get_db
from app.auth.dependencies import AuthContext, get_auth_context, get_customer_context, get_rider_context
from app.core.order_flow import OrderStatus
from app.crud import order as order_crud
from app.models.orders import Order
from app.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate
from app.services.realtime import hub, order_group, user_group, rider_group

router = APIRouter(prefix="/api/orders", tags=["orders"])


async def _announce_status(order: Order) -> None:
    payload = {"orderId": order.id, "status": order.status.value}
    await hub.publish(order_group(order.id), "order_status", payload)
    await hub.publish(user_group(order.customer_id), "order_status", payload)
    if order.rider_id:
        await hub.publish(rider_group(order.rider_id), "order_status", payload)


@router.post("", status_code=201)
async def place_order(
    body: OrderCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_customer_context),
):
    order = await order_crud.create_order(
        db, ctx, body.restaurant_id, body.items, delivery_address=body.delivery_address
    )
    return {
        "success": True,
        "message": "Order placed successfully",
        "data": OrderRead.model_validate(order),
    }


@router.get("")
async def my_orders(
    status: Optional[OrderStatus] = None,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    orders = await order_crud.list_orders_for(db, ctx, status)
    return {
        "success": True,
        "count": len(orders),
        "data": [OrderRead.model_validate(o) for o in orders],
    }


@router.get("/available")
async def orders_waiting_for_rider(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    orders = await order_crud.list_unassigned_orders(db)
    return {
        "success": True,
        "count": len(orders),
        "data": [OrderRead.model_validate(o) for o in orders],
    }


@router.get("/{order_id}")
async def order_detail(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    order = await order_crud.get_order_for(db, ctx, order_id)
    return {"success": True, "data": OrderRead.model_validate(order)}


@router.patch("/{order_id}/status")
async def change_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    order = await order_crud.update_order_status(
        db, ctx, order_id, body.status, rider_id=body.rider_id, reason=body.reason
    )
    await _announce_status(order)
    return {
        "success": True,
        "message": f"Order status updated to {order.status.value}",
        "data": OrderRead.model_validate(order),
    }


@router.post("/{order_id}/accept-delivery")
async def accept_delivery(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    """An available rider takes an accepted order for themselves"""
    order = await order_crud.assign_rider(db, ctx, order_id, ctx.id)
    await _announce_status(order)
    return {
        "success": True,
        "message": "Order assigned to you",
        "data": OrderRead.model_validate(order),
    }
