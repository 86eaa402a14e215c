from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.db import get_db
from app.auth.dependencies import AuthContext, get_auth_context
from app.crud import rating as rating_crud
from app.schemas.order import OrderRead
from app.schemas.rating import RatingSubmit, RatingSummary

router = APIRouter(prefix="/api/rating", tags=["rating"])


@router.post("/order/{order_id}")
async def rate_order(
    order_id: str,
    body: RatingSubmit,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    """Rate restaurant and rider after delivery"""
    order = await rating_crud.submit_order_rating(db, ctx, order_id, body)
    return {
        "success": True,
        "message": "Ratings submitted successfully",
        "data": OrderRead.model_validate(order),
    }


@router.get("/restaurant/{restaurant_id}")
async def restaurant_rating(restaurant_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    average, count = await rating_crud.get_restaurant_rating(db, restaurant_id)
    return {"success": True, "data": RatingSummary(average=average, count=count)}
