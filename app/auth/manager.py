import logging
import uuid
from typing import Optional, Union

from fastapi import Request
from fastapi_users import BaseUserManager, UUIDIDMixin, InvalidPasswordException

from app.auth.config import auth_config
from app.models.account import Account, AccountRole, AuthProvider
from app.models.profiles import RestaurantProfile, RiderProfile
from app.schemas.account import AccountCreate

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AccountManager(UUIDIDMixin, BaseUserManager[Account, uuid.UUID]):
    reset_password_token_secret = auth_config.secret
    verification_token_secret = auth_config.secret

    async def validate_password(
        self, password: str, user: Union[AccountCreate, Account]
    ) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordException(
                reason=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if user.email and user.email.lower() in password.lower():
            raise InvalidPasswordException(reason="Password should not contain e-mail")

    async def on_after_register(self, user: Account, request: Optional[Request] = None):
        # Role-specific payload lives in its own table
        session = self.user_db.session
        if user.role == AccountRole.RESTAURANT:
            session.add(RestaurantProfile(account_id=user.id, kitchen_name=user.name))
        elif user.role == AccountRole.RIDER:
            session.add(RiderProfile(account_id=user.id))
        else:
            log.info("account registered: %s (%s)", user.email, user.role.value)
            return
        await session.commit()
        log.info("account registered: %s (%s) with profile", user.email, user.role.value)

    async def oauth_callback(self, *args, **kwargs) -> Account:
        user = await super().oauth_callback(*args, **kwargs)
        if user.auth_provider != AuthProvider.GOOGLE:
            user = await self.user_db.update(user, {"auth_provider": AuthProvider.GOOGLE})
        return user

    async def on_after_forgot_password(
        self, user: Account, token: str, request: Optional[Request] = None
    ):
        log.info("password reset requested for %s", user.email)
