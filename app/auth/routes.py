from fastapi import Depends
from fastapi_users import FastAPIUsers
from fastapi_users.authentication import AuthenticationBackend, JWTStrategy, BearerTransport
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from httpx_oauth.clients.google import GoogleOAuth2
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.models.account import Account, OAuthAccount
from app.auth.manager import AccountManager
from app.auth.config import auth_config
from app.db import get_db

bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=auth_config.secret,
        lifetime_seconds=auth_config.jwt_lifetime_seconds,
        token_audience=[auth_config.jwt_audience],  # ✅ MUST match JWT aud
        algorithm=auth_config.jwt_algorithm,
    )

# Local email/password credentials
auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# External identity (Google); only mounted when configured
google_oauth_client = (
    GoogleOAuth2(auth_config.google_client_id, auth_config.google_client_secret)
    if auth_config.google_enabled
    else None
)

# Dependency to get User DB
async def get_user_db(session: AsyncSession = Depends(get_db)):
    yield SQLAlchemyUserDatabase(session, Account, OAuthAccount)

# Dependency to get AccountManager
async def get_user_manager(user_db=Depends(get_user_db)):
    yield AccountManager(user_db)

fastapi_users = FastAPIUsers[Account, uuid.UUID](
    get_user_manager,
    [auth_backend],
)

# Export user dependencies
current_account = fastapi_users.current_user(active=True)
