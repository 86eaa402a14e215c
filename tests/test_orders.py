import pytest
from sqlalchemy import func
from sqlalchemy.future import select

from app.auth.dependencies import AuthContext
from app.core.config import settings
from app.core.errors import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.core.order_flow import OrderStatus
from app.crud import order as order_crud
from app.crud import rider as rider_crud
from app.models.account import AccountRole
from app.models.orders import Order, OrderItem
from app.models.profiles import RiderProfile
from app.schemas.order import OrderLineIn


async def count(db, model):
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.fixture
async def shop(make_account, make_restaurant, make_menu_item):
    customer = await make_account(AccountRole.CUSTOMER)
    restaurant = await make_restaurant()
    tikka = await make_menu_item(restaurant, "Paneer Tikka", 10.0)
    naan = await make_menu_item(restaurant, "Garlic Naan", 2.5)
    return customer, restaurant, tikka, naan


async def place(db, customer, restaurant, *lines):
    return await order_crud.create_order(
        db,
        AuthContext(customer),
        restaurant.id,
        [OrderLineIn(menu_item_id=item.id, quantity=qty) for item, qty in lines],
    )


async def advance(db, order, *steps):
    for account, status in steps:
        order = await order_crud.update_order_status(db, AuthContext(account), order.id, status)
    return order


# ==================== CREATE ====================

async def test_create_order_snapshots_prices(db, shop):
    customer, restaurant, tikka, naan = shop
    order = await place(db, customer, restaurant, (tikka, 2), (naan, 3))

    assert order.status == OrderStatus.PENDING
    assert order.subtotal == 27.5
    assert order.total_amount == 27.5 + settings.delivery_fee
    assert {i.item_name: i.price_at_time_of_order for i in order.items} == {
        "Paneer Tikka": 10.0,
        "Garlic Naan": 2.5,
    }

    # Later price changes do not touch the order
    tikka.price = 99.0
    await db.commit()
    stored = await order_crud.get_order(db, order.id)
    assert stored.subtotal == 27.5


async def test_repeated_lines_are_merged(db, shop):
    customer, restaurant, tikka, _ = shop
    order = await place(db, customer, restaurant, (tikka, 1), (tikka, 2))
    assert len(order.items) == 1
    assert order.items[0].quantity == 3


async def test_empty_order_persists_nothing(db, shop):
    customer, restaurant, _, _ = shop
    with pytest.raises(ValidationError):
        await order_crud.create_order(db, AuthContext(customer), restaurant.id, [])
    assert await count(db, Order) == 0
    assert await count(db, OrderItem) == 0


async def test_unknown_item_rejects_whole_order(db, shop):
    customer, restaurant, tikka, _ = shop
    lines = [
        OrderLineIn(menu_item_id=tikka.id, quantity=1),
        OrderLineIn(menu_item_id="does-not-exist", quantity=1),
    ]
    with pytest.raises(ValidationError):
        await order_crud.create_order(db, AuthContext(customer), restaurant.id, lines)
    assert await count(db, Order) == 0


async def test_item_from_another_restaurant_is_rejected(db, shop, make_restaurant, make_menu_item):
    customer, restaurant, _, _ = shop
    other = await make_restaurant()
    foreign = await make_menu_item(other, "Dosa", 4.0)
    with pytest.raises(ValidationError):
        await place(db, customer, restaurant, (foreign, 1))


async def test_unavailable_item_is_rejected(db, shop, make_menu_item):
    customer, restaurant, _, _ = shop
    sold_out = await make_menu_item(restaurant, "Kulfi", 3.0, is_available=False)
    with pytest.raises(ValidationError):
        await place(db, customer, restaurant, (sold_out, 1))


async def test_closed_kitchen_takes_no_orders(db, make_account, make_restaurant, make_menu_item):
    customer = await make_account(AccountRole.CUSTOMER)
    restaurant = await make_restaurant(is_kitchen_open=False)
    item = await make_menu_item(restaurant)
    with pytest.raises(ValidationError):
        await place(db, customer, restaurant, (item, 1))


async def test_non_restaurant_target_is_rejected(db, shop, make_account):
    customer, _, tikka, _ = shop
    not_a_kitchen = await make_account(AccountRole.CUSTOMER)
    with pytest.raises(ValidationError):
        await place(db, customer, not_a_kitchen, (tikka, 1))


# ==================== READ ====================

async def test_visibility(db, shop, make_account):
    customer, restaurant, tikka, _ = shop
    order = await place(db, customer, restaurant, (tikka, 1))
    stranger = await make_account(AccountRole.CUSTOMER)
    admin = await make_account(AccountRole.ADMIN)

    assert (await order_crud.get_order_for(db, AuthContext(restaurant), order.id)).id == order.id
    assert (await order_crud.get_order_for(db, AuthContext(admin), order.id)).id == order.id
    with pytest.raises(ForbiddenError):
        await order_crud.get_order_for(db, AuthContext(stranger), order.id)
    with pytest.raises(NotFoundError):
        await order_crud.get_order(db, "missing")

    assert len(await order_crud.list_orders_for(db, AuthContext(customer))) == 1
    assert await order_crud.list_orders_for(db, AuthContext(stranger)) == []
    assert await order_crud.list_orders_for(db, AuthContext(restaurant), OrderStatus.DELIVERED) == []


# ==================== TRANSITIONS ====================

async def test_full_lifecycle_updates_rider_stats(db, shop, make_rider, monkeypatch):
    monkeypatch.setattr(settings, "delivery_fee", 3.0)
    customer, restaurant, tikka, _ = shop
    rider = await make_rider()
    order = await place(db, customer, restaurant, (tikka, 1))
    assert order.total_amount == 13.0

    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    assert [o.id for o in await order_crud.list_unassigned_orders(db)] == [order.id]

    order = await order_crud.assign_rider(db, AuthContext(rider), order.id, rider.id)
    assert order.status == OrderStatus.RIDER_ASSIGNED
    assert order.rider_id == rider.id
    assert await order_crud.list_unassigned_orders(db) == []

    order = await advance(
        db, order,
        (restaurant, OrderStatus.PREPARING),
        (restaurant, OrderStatus.READY),
        (rider, OrderStatus.PICKED_UP),
    )
    assert await order_crud.list_in_transit_order_ids(db, rider.id) == [order.id]

    order = await advance(db, order, (rider, OrderStatus.ON_THE_WAY), (rider, OrderStatus.DELIVERED))
    assert order.delivered_at is not None

    stats = await rider_crud.get_stats(db, rider.id)
    assert stats.total_deliveries == 1
    assert stats.total_earnings == 3.0
    assert stats.today_earnings == 3.0
    assert stats.active_orders == 0


async def test_out_of_order_step_leaves_order_unchanged(db, shop):
    customer, restaurant, tikka, _ = shop
    order = await place(db, customer, restaurant, (tikka, 1))
    with pytest.raises(InvalidTransitionError):
        await advance(db, order, (restaurant, OrderStatus.READY))
    stored = await order_crud.get_order(db, order.id)
    assert stored.status == OrderStatus.PENDING


async def test_strangers_cannot_move_orders(db, shop, make_account, make_rider):
    customer, restaurant, tikka, _ = shop
    order = await place(db, customer, restaurant, (tikka, 1))
    other_kitchen = await make_account(AccountRole.RESTAURANT)
    with pytest.raises(ForbiddenError):
        await advance(db, order, (other_kitchen, OrderStatus.ACCEPTED))
    # Not the order's rider yet
    rider = await make_rider()
    with pytest.raises(ForbiddenError):
        await advance(db, order, (rider, OrderStatus.PICKED_UP))


async def test_customer_cancels_before_pickup(db, shop):
    customer, restaurant, tikka, _ = shop
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    order = await order_crud.update_order_status(
        db, AuthContext(customer), order.id, OrderStatus.CANCELLED, reason="  changed my mind "
    )
    assert order.status == OrderStatus.CANCELLED
    assert order.cancel_reason == "changed my mind"
    assert order.cancelled_at is not None

    with pytest.raises(InvalidTransitionError):
        await advance(db, order, (restaurant, OrderStatus.ACCEPTED))


async def test_rider_assigned_via_status_update_needs_rider_id(db, shop):
    customer, restaurant, tikka, _ = shop
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    with pytest.raises(ValidationError):
        await order_crud.update_order_status(db, AuthContext(restaurant), order.id, OrderStatus.RIDER_ASSIGNED)


@pytest.mark.parametrize("final", [OrderStatus.CANCELLED, OrderStatus.DELIVERED])
async def test_rider_assigned_on_finished_order_is_invalid_transition(db, shop, make_rider, final):
    customer, restaurant, tikka, _ = shop
    rider = await make_rider()
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    if final == OrderStatus.CANCELLED:
        order = await advance(db, order, (customer, OrderStatus.CANCELLED))
    else:
        await order_crud.assign_rider(db, AuthContext(restaurant), order.id, rider.id)
        order = await advance(
            db,
            order,
            (restaurant, OrderStatus.PREPARING),
            (restaurant, OrderStatus.READY),
            (rider, OrderStatus.PICKED_UP),
            (rider, OrderStatus.ON_THE_WAY),
            (rider, OrderStatus.DELIVERED),
        )

    with pytest.raises(InvalidTransitionError):
        await order_crud.update_order_status(db, AuthContext(restaurant), order.id, OrderStatus.RIDER_ASSIGNED)
    with pytest.raises(InvalidTransitionError):
        await order_crud.update_order_status(
            db, AuthContext(restaurant), order.id, OrderStatus.RIDER_ASSIGNED, rider_id=rider.id
        )
    assert (await order_crud.get_order(db, order.id)).status == final


# ==================== ASSIGNMENT ====================

async def test_unavailable_rider_is_refused(db, shop, make_rider):
    customer, restaurant, tikka, _ = shop
    rider = await make_rider(is_available=False)
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))

    with pytest.raises(ValidationError, match="Rider is not available"):
        await order_crud.assign_rider(db, AuthContext(restaurant), order.id, rider.id)
    stored = await order_crud.get_order(db, order.id)
    assert stored.status == OrderStatus.ACCEPTED
    assert stored.rider_id is None


async def test_unknown_rider_is_not_found(db, shop, make_account):
    customer, restaurant, tikka, _ = shop
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    with pytest.raises(NotFoundError):
        await order_crud.assign_rider(db, AuthContext(restaurant), order.id, customer.id)


async def test_assignment_only_from_accepted(db, shop, make_rider):
    customer, restaurant, tikka, _ = shop
    rider = await make_rider()
    order = await place(db, customer, restaurant, (tikka, 1))
    with pytest.raises(InvalidTransitionError):
        await order_crud.assign_rider(db, AuthContext(restaurant), order.id, rider.id)


async def test_rider_cannot_assign_someone_else(db, shop, make_rider):
    customer, restaurant, tikka, _ = shop
    rider, other = await make_rider(), await make_rider()
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    with pytest.raises(ForbiddenError):
        await order_crud.assign_rider(db, AuthContext(rider), order.id, other.id)


async def test_release_setting_occupies_and_frees_rider(db, shop, make_rider, monkeypatch):
    monkeypatch.setattr(settings, "release_rider_on_completion", True)
    customer, restaurant, tikka, _ = shop
    rider = await make_rider()
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    order = await order_crud.assign_rider(db, AuthContext(restaurant), order.id, rider.id)

    profile = (await db.execute(select(RiderProfile).where(RiderProfile.account_id == rider.id))).scalar_one()
    assert profile.is_available is False

    await order_crud.update_order_status(db, AuthContext(restaurant), order.id, OrderStatus.CANCELLED)
    await db.refresh(profile)
    assert profile.is_available is True


async def test_riders_stay_available_by_default(db, shop, make_rider):
    customer, restaurant, tikka, _ = shop
    rider = await make_rider()
    order = await place(db, customer, restaurant, (tikka, 1))
    order = await advance(db, order, (restaurant, OrderStatus.ACCEPTED))
    await order_crud.assign_rider(db, AuthContext(restaurant), order.id, rider.id)

    profile = (await db.execute(select(RiderProfile).where(RiderProfile.account_id == rider.id))).scalar_one()
    assert profile.is_available is True
    assert (await rider_crud.get_stats(db, rider.id)).active_orders == 1
