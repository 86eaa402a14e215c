from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.db import get_db
from app.auth.dependencies import AuthContext, get_rider_context
from app.crud import rider as rider_crud
from app.crud.order import list_in_transit_order_ids
from app.schemas.rider import AvailabilityUpdate, LocationUpdate, RiderProfileRead, RiderProfileUpdate
from app.services.realtime import hub, order_group

router = APIRouter(prefix="/api/rider", tags=["rider"])


@router.get("/profile")
async def rider_profile(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    profile = await rider_crud.get_profile(db, ctx)
    return {"success": True, "data": RiderProfileRead.model_validate(profile)}


@router.put("/profile")
async def update_rider_profile(
    body: RiderProfileUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    profile = await rider_crud.update_profile(db, ctx, body)
    return {
        "success": True,
        "message": "Profile updated",
        "data": RiderProfileRead.model_validate(profile),
    }


@router.get("/stats")
async def my_stats(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    stats = await rider_crud.get_stats(db, ctx.id)
    return {"success": True, "data": stats}


# Public
@router.get("/stats/{rider_id}")
async def rider_stats(rider_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    stats = await rider_crud.get_stats(db, rider_id)
    return {"success": True, "data": stats}


@router.get("/availability")
async def get_availability(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    profile = await rider_crud.get_profile(db, ctx)
    return {"success": True, "data": {"isAvailable": profile.is_available}}


@router.patch("/availability")
async def set_availability(
    body: AvailabilityUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    is_available = await rider_crud.set_availability(db, ctx, body.is_available)
    return {
        "success": True,
        "message": f"Rider is now {'available' if is_available else 'unavailable'}",
        "data": {"isAvailable": is_available},
    }


@router.patch("/location")
async def update_location(
    body: LocationUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_rider_context),
):
    profile = await rider_crud.update_location(db, ctx, body.latitude, body.longitude)

    # Push to customers tracking orders this rider is carrying
    location = {
        "latitude": profile.current_latitude,
        "longitude": profile.current_longitude,
        "lastUpdated": profile.location_updated_at.isoformat(),
    }
    for order_id in await list_in_transit_order_ids(db, ctx.id):
        await hub.publish(order_group(order_id), "rider_location", location)

    return {
        "success": True,
        "message": "Location updated successfully",
        "data": {"latitude": body.latitude, "longitude": body.longitude},
    }
