# app/auth/seed.py
import contextlib
import logging
from typing import Optional

from fastapi_users.exceptions import UserAlreadyExists

from app.auth.routes import get_user_db, get_user_manager
from app.db import get_db
from app.models.account import Account, AccountRole
from app.schemas.account import AccountCreate

log = logging.getLogger(__name__)

get_db_context = contextlib.asynccontextmanager(get_db)
get_user_db_context = contextlib.asynccontextmanager(get_user_db)
get_user_manager_context = contextlib.asynccontextmanager(get_user_manager)


async def create_account(
    email: str,
    password: str,
    name: str,
    role: AccountRole = AccountRole.CUSTOMER,
    is_superuser: bool = False,
) -> Optional[Account]:
    """
    Registers an account outside a request, through the same manager the
    /auth/register route uses. Returns None when the email is taken.
    """
    async with get_db_context() as session:
        async with get_user_db_context(session) as user_db:
            async with get_user_manager_context(user_db) as manager:
                # AccountCreate refuses the admin role, so build it as a customer first
                data = AccountCreate(email=email, password=password, name=name)
                try:
                    account = await manager.create(data)
                except UserAlreadyExists:
                    log.info("account %s already exists, skipping", email)
                    return None
                if role != AccountRole.CUSTOMER or is_superuser:
                    account = await user_db.update(account, {"role": role, "is_superuser": is_superuser})
                    if role in (AccountRole.RESTAURANT, AccountRole.RIDER):
                        await manager.on_after_register(account)
                log.info("seeded %s account %s", role.value, email)
                return account


async def seed_admin(email: Optional[str], password: Optional[str]) -> None:
    if not email or not password:
        log.info("no admin credentials configured, skipping admin seed")
        return
    await create_account(email, password, "Admin", role=AccountRole.ADMIN, is_superuser=True)
