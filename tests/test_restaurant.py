import pytest

from app.auth.dependencies import AuthContext
from app.core.errors import ConflictError, ForbiddenError
from app.core.order_flow import OrderStatus
from app.crud import menu as menu_crud
from app.crud import order as order_crud
from app.crud import restaurant as restaurant_crud
from app.models.account import AccountRole
from app.models.menu.menu_item import MenuCategory, Cuisine, SubCategory
from app.schemas.menu_item import MenuItemCreate, MenuItemUpdate
from app.schemas.order import OrderLineIn
from app.schemas.restaurant import RestaurantProfileUpdate


async def open_orders(db, restaurant, item, customer, n, status=OrderStatus.PREPARING):
    for _ in range(n):
        order = await order_crud.create_order(
            db, AuthContext(customer), restaurant.id, [OrderLineIn(menu_item_id=item.id, quantity=1)]
        )
        order.status = status
    await db.commit()


# ==================== KITCHEN ====================

async def test_kitchen_with_open_orders_cannot_close(db, make_account, make_restaurant, make_menu_item):
    customer = await make_account(AccountRole.CUSTOMER)
    restaurant = await make_restaurant()
    item = await make_menu_item(restaurant)
    await open_orders(db, restaurant, item, customer, 2)

    with pytest.raises(ConflictError) as exc:
        await restaurant_crud.toggle_kitchen(db, AuthContext(restaurant))
    assert exc.value.extra == {"activeOrders": 2}
    assert exc.value.status_code == 400


async def test_kitchen_toggles_when_idle(db, make_account, make_restaurant, make_menu_item):
    customer = await make_account(AccountRole.CUSTOMER)
    restaurant = await make_restaurant()
    item = await make_menu_item(restaurant)
    # Finished orders do not count
    await open_orders(db, restaurant, item, customer, 1, status=OrderStatus.DELIVERED)

    assert await restaurant_crud.toggle_kitchen(db, AuthContext(restaurant)) is False
    assert await restaurant_crud.toggle_kitchen(db, AuthContext(restaurant)) is True


async def test_reopening_is_never_blocked(db, make_restaurant):
    restaurant = await make_restaurant(is_kitchen_open=False)
    assert await restaurant_crud.set_kitchen_open(db, AuthContext(restaurant), True) is True


# ==================== MENU ====================

def new_item(**overrides):
    data = dict(
        name="Margherita",
        description="Tomato, mozzarella, basil",
        price=8.5,
        category=MenuCategory.MAIN_COURSE,
        cuisine=Cuisine.ITALIAN,
        sub_category=SubCategory.PIZZA,
        image="https://img.example.com/pizza.jpg",
    )
    data.update(overrides)
    return MenuItemCreate(**data)


async def test_menu_item_copies_restaurant_location(db, make_restaurant):
    restaurant = await make_restaurant(latitude=12.9, longitude=77.6)
    item = await menu_crud.create_menu_item(db, AuthContext(restaurant), new_item())
    assert (item.restaurant_latitude, item.restaurant_longitude) == (12.9, 77.6)
    assert [i.id for i in await menu_crud.list_menu_items(db, AuthContext(restaurant))] == [item.id]


async def test_partial_menu_update(db, make_restaurant):
    restaurant = await make_restaurant()
    item = await menu_crud.create_menu_item(db, AuthContext(restaurant), new_item())

    item = await menu_crud.update_menu_item(
        db, AuthContext(restaurant), item.id, MenuItemUpdate(price=9.0, sub_category=None)
    )
    assert item.price == 9.0
    assert item.name == "Margherita"
    assert item.sub_category is None


async def test_menu_items_belong_to_their_restaurant(db, make_restaurant):
    owner, other = await make_restaurant(), await make_restaurant()
    item = await menu_crud.create_menu_item(db, AuthContext(owner), new_item())
    with pytest.raises(ForbiddenError):
        await menu_crud.delete_menu_item(db, AuthContext(other), item.id)
    await menu_crud.delete_menu_item(db, AuthContext(owner), item.id)
    assert await menu_crud.list_menu_items(db, AuthContext(owner)) == []


async def test_profile_location_moves_menu_items(db, make_restaurant):
    restaurant = await make_restaurant()
    item = await menu_crud.create_menu_item(db, AuthContext(restaurant), new_item())

    profile = await restaurant_crud.update_profile(
        db,
        AuthContext(restaurant),
        RestaurantProfileUpdate(latitude=1.5, longitude=2.5, cuisine=[Cuisine.ITALIAN]),
    )
    assert profile.cuisine == ["Italian"]

    await db.refresh(item)
    assert (item.restaurant_latitude, item.restaurant_longitude) == (1.5, 2.5)


# ==================== LISTING ====================

async def test_listing_filters_by_distance(db, make_restaurant, make_menu_item):
    here = await make_restaurant(latitude=0, longitude=0, name="Here")
    near = await make_restaurant(latitude=0, longitude=0.001, name="Near")
    far = await make_restaurant(latitude=1, longitude=1, name="Far")
    nowhere = await make_restaurant(name="Nowhere")
    empty = await make_restaurant(latitude=0, longitude=0, name="Empty")
    for r in (here, near, far, nowhere):
        await make_menu_item(r)
    await make_menu_item(empty, is_available=False)

    everything = await restaurant_crud.list_restaurants(db)
    assert {r.name for r in everything} == {"Here", "Near", "Far", "Nowhere"}

    nearby = await restaurant_crud.list_restaurants(db, latitude=0, longitude=0, max_distance_km=25)
    assert [r.name for r in nearby] == ["Here", "Near"]
    assert nearby[0].distance_km == 0
    assert nearby[1].distance_km == 0.11

    tight = await restaurant_crud.list_restaurants(db, latitude=0, longitude=0.001, max_distance_km=0.05)
    assert [r.name for r in tight] == ["Near"]
