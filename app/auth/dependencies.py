# auth/dependencies.py
import uuid
from dataclasses import dataclass

from fastapi import Depends

from app.auth.routes import current_account
from app.core.errors import ForbiddenError
from app.models.account import Account, AccountRole


@dataclass(frozen=True)
class AuthContext:
    """Who is making the request; passed explicitly into crud functions."""
    account: Account

    @property
    def id(self) -> uuid.UUID:
        return self.account.id

    @property
    def role(self) -> AccountRole:
        return self.account.role

    @property
    def is_admin(self) -> bool:
        return self.account.role == AccountRole.ADMIN


async def get_auth_context(account: Account = Depends(current_account)) -> AuthContext:
    return AuthContext(account=account)


def require_roles(*roles: AccountRole):
    allowed = ", ".join(r.value for r in roles)

    async def _dep(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if ctx.role not in roles:
            raise ForbiddenError(f"Access denied. Only {allowed} accounts can do this.")
        return ctx
    return _dep


get_customer_context = require_roles(AccountRole.CUSTOMER)
get_rider_context = require_roles(AccountRole.RIDER)
get_restaurant_context = require_roles(AccountRole.RESTAURANT)
