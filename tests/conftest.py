import uuid

import pytest
from fastapi import HTTPException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # registers all models
from app.auth.routes import current_account
from app.db import get_db
from app.main import app as fastapi_app
from app.models.account import Account, AccountRole
from app.models.base import Base
from app.models.menu.menu_item import MenuItem, MenuCategory, Cuisine
from app.models.profiles import RestaurantProfile, RiderProfile


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_account(db):
    async def _make(role=AccountRole.CUSTOMER, name=None, **fields):
        suffix = uuid.uuid4().hex[:8]
        account = Account(
            id=uuid.uuid4(),
            email=f"{role.value}-{suffix}@example.com",
            hashed_password="not-a-real-hash",
            is_active=True,
            is_superuser=role == AccountRole.ADMIN,
            is_verified=True,
            name=name or f"{role.value.title()} {suffix}",
            role=role,
            **fields,
        )
        db.add(account)
        await db.commit()
        return account
    return _make


@pytest.fixture
def make_restaurant(db, make_account):
    async def _make(latitude=None, longitude=None, is_kitchen_open=True, name=None):
        account = await make_account(AccountRole.RESTAURANT, name=name)
        db.add(
            RestaurantProfile(
                account_id=account.id,
                kitchen_name=account.name,
                latitude=latitude,
                longitude=longitude,
                is_kitchen_open=is_kitchen_open,
            )
        )
        await db.commit()
        return account
    return _make


@pytest.fixture
def make_rider(db, make_account):
    async def _make(is_available=True):
        account = await make_account(AccountRole.RIDER)
        db.add(RiderProfile(account_id=account.id, is_available=is_available))
        await db.commit()
        return account
    return _make


@pytest.fixture
def make_menu_item(db):
    async def _make(restaurant, name="Paneer Tikka", price=10.0, is_available=True):
        item = MenuItem(
            restaurant_id=restaurant.id,
            name=name,
            description=f"{name} from the tandoor",
            price=price,
            category=MenuCategory.MAIN_COURSE,
            cuisine=Cuisine.INDIAN,
            image="https://img.example.com/dish.jpg",
            is_available=is_available,
        )
        db.add(item)
        await db.commit()
        return item
    return _make


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app; set `client.account` to act as someone."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _current_account():
        if client.account is None:
            raise HTTPException(status_code=401, detail="Unauthorized")
        return client.account

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[current_account] = _current_account

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        client.account = None
        yield client

    fastapi_app.dependency_overrides.clear()
