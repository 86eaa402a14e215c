import pytest
from sqlalchemy import func
from sqlalchemy.future import select

from app.auth.dependencies import AuthContext
from app.core.errors import NotFoundError, ValidationError
from app.core.order_flow import OrderStatus
from app.crud import cart as cart_crud
from app.crud.order import create_order_from_cart
from app.models.account import AccountRole
from app.models.customer.cart_entry import CartEntry


@pytest.fixture
async def setup(make_account, make_restaurant, make_menu_item):
    customer = await make_account(AccountRole.CUSTOMER)
    restaurant = await make_restaurant()
    burger = await make_menu_item(restaurant, "Burger", 6.0)
    fries = await make_menu_item(restaurant, "Fries", 2.0)
    return AuthContext(customer), restaurant, burger, fries


async def test_adding_the_same_item_bumps_quantity(db, setup):
    ctx, restaurant, burger, fries = setup
    await cart_crud.add_to_cart(db, ctx, burger.id)
    await cart_crud.add_to_cart(db, ctx, burger.id, 2)
    cart = await cart_crud.add_to_cart(db, ctx, fries.id)

    assert cart.restaurant_id == restaurant.id
    assert {line.name: line.quantity for line in cart.items} == {"Burger": 3, "Fries": 1}
    assert cart.total == 20.0


async def test_cart_holds_one_restaurant(db, setup, make_restaurant, make_menu_item):
    ctx, _, burger, _ = setup
    other = await make_restaurant()
    dosa = await make_menu_item(other, "Dosa", 4.0)

    await cart_crud.add_to_cart(db, ctx, burger.id)
    with pytest.raises(ValidationError):
        await cart_crud.add_to_cart(db, ctx, dosa.id)

    cart = await cart_crud.add_to_cart(db, ctx, dosa.id, replace=True)
    assert [line.name for line in cart.items] == ["Dosa"]
    assert cart.restaurant_id == other.id


async def test_update_remove_and_clear(db, setup):
    ctx, _, burger, fries = setup
    cart = await cart_crud.add_to_cart(db, ctx, burger.id)
    entry_id = cart.items[0].id

    cart = await cart_crud.update_quantity(db, ctx, entry_id, 4)
    assert cart.items[0].quantity == 4
    with pytest.raises(ValidationError):
        await cart_crud.update_quantity(db, ctx, entry_id, 0)

    cart = await cart_crud.remove_entry(db, ctx, entry_id)
    assert cart.items == []
    with pytest.raises(NotFoundError):
        await cart_crud.remove_entry(db, ctx, entry_id)

    await cart_crud.add_to_cart(db, ctx, fries.id)
    await cart_crud.clear_cart(db, ctx)
    assert (await cart_crud.get_cart(db, ctx)).items == []


async def test_checkout_turns_cart_into_order(db, setup):
    ctx, restaurant, burger, fries = setup
    await cart_crud.add_to_cart(db, ctx, burger.id, 2)
    await cart_crud.add_to_cart(db, ctx, fries.id)

    order = await create_order_from_cart(db, ctx, delivery_address="221B Baker Street")
    assert order.status == OrderStatus.PENDING
    assert order.restaurant_id == restaurant.id
    assert order.subtotal == 14.0
    assert order.delivery_address == "221B Baker Street"

    remaining = (await db.execute(select(func.count()).select_from(CartEntry))).scalar_one()
    assert remaining == 0


async def test_empty_cart_cannot_check_out(db, setup):
    ctx, _, _, _ = setup
    with pytest.raises(ValidationError, match="Cart is empty"):
        await create_order_from_cart(db, ctx)


async def test_failed_checkout_keeps_the_cart(db, setup):
    ctx, _, burger, _ = setup
    await cart_crud.add_to_cart(db, ctx, burger.id)
    burger.is_available = False
    await db.commit()

    with pytest.raises(ValidationError):
        await create_order_from_cart(db, ctx)
    assert len((await cart_crud.get_cart(db, ctx)).items) == 1
