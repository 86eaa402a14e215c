from fastapi_users import schemas
from pydantic import Field, field_validator
from typing import Optional
import uuid

from app.models.account import AccountRole, AuthProvider

PHONE_PATTERN = r"^[0-9]{10}$"


class AccountRead(schemas.BaseUser[uuid.UUID]):
    name: str
    phone: Optional[str] = None
    role: AccountRole
    avatar: str = ""
    auth_provider: AuthProvider = AuthProvider.LOCAL
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class AccountCreate(schemas.BaseUserCreate):
    name: str = Field(min_length=2, max_length=50)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: AccountRole = AccountRole.CUSTOMER

    @field_validator("role")
    @classmethod
    def no_self_service_admin(cls, v: AccountRole) -> AccountRole:
        if v == AccountRole.ADMIN:
            raise ValueError("Role must be either customer, rider, or restaurant")
        return v


class AccountUpdate(schemas.BaseUserUpdate):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    avatar: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
