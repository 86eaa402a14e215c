from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["public"])


@router.get("/health")
async def health():
    return {"success": True, "message": "Server is running"}
