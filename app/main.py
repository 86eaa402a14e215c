import logging

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import AppError, InternalError, ValidationError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

from app.auth.config import auth_config
from app.auth.routes import auth_backend, fastapi_users, google_oauth_client, current_account
from app.auth.seed import seed_admin
from app.schemas.account import AccountRead, AccountCreate, AccountUpdate
from app.api import (
    cart_routes,
    order_routes,
    public_routes,
    rating_routes,
    realtime_routes,
    restaurant_routes,
    rider_routes,
    wishlist_routes,
)
from app.db import create_db_and_tables
import app.models  # registers all models via models/__init__.py
from sqlalchemy.orm import configure_mappers
configure_mappers()


# Create the FastAPI app
app = FastAPI()

# Swagger Bearer token support for "Authorize" button
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Food Delivery API",
        version="1.0.0",
        description="Orders, riders, restaurants and live tracking for food delivery.",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }
    for path in openapi_schema["paths"].values():
        for operation in path.values():
            operation["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


# ==================== ERRORS ====================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    err = ValidationError(first.get("msg", "Invalid request"), errors=jsonable_errors(exc))
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    err = InternalError()
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]


# ==================== AUTH ====================

app.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/auth/jwt",
    tags=["auth"]
)

app.include_router(
    fastapi_users.get_register_router(AccountRead, AccountCreate),
    prefix="/auth",
    tags=["auth"]
)

app.include_router(
    fastapi_users.get_reset_password_router(),
    prefix="/auth",
    tags=["auth"]
)

app.include_router(
    fastapi_users.get_users_router(AccountRead, AccountUpdate),
    prefix="/auth/users",
    tags=["auth"]
)

if google_oauth_client is not None:
    app.include_router(
        fastapi_users.get_oauth_router(
            google_oauth_client,
            auth_backend,
            auth_config.secret,
            redirect_url=f"{settings.frontend_url}/auth/google/callback" if settings.frontend_url else None,
            associate_by_email=True,
        ),
        prefix="/auth/google",
        tags=["auth"],
    )

# Allow frontend (CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url] if settings.frontend_url else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/whoami")
async def whoami(account=Depends(current_account)):
    return {"success": True, "data": AccountRead.model_validate(account)}


@app.on_event("startup")
async def on_startup():
    log.info("starting DB setup")
    await create_db_and_tables()
    log.info("DB schema ready")
    await seed_admin(settings.admin_email, settings.admin_password)


# Core app routers
app.include_router(public_routes.router)
app.include_router(order_routes.router)
app.include_router(rider_routes.router)
app.include_router(rating_routes.router)
app.include_router(restaurant_routes.router)
app.include_router(cart_routes.router)
app.include_router(wishlist_routes.router)
app.include_router(realtime_routes.router)
