import pytest

from app.auth.dependencies import AuthContext
from app.core.errors import NotFoundError, ValidationError
from app.crud import wishlist as wishlist_crud
from app.models.account import AccountRole
from app.schemas.wishlist import WishlistCreate, WishlistItemIn


@pytest.fixture
async def setup(make_account, make_restaurant, make_menu_item):
    customer = await make_account(AccountRole.CUSTOMER)
    restaurant = await make_restaurant()
    biryani = await make_menu_item(restaurant, "Biryani", 12.0)
    raita = await make_menu_item(restaurant, "Raita", 1.5)
    return AuthContext(customer), restaurant, biryani, raita


async def create(db, ctx, restaurant, *items, name="Friday night"):
    return await wishlist_crud.create_wishlist(
        db,
        ctx,
        WishlistCreate(
            name=name,
            restaurant_id=restaurant.id,
            items=[WishlistItemIn(menu_item_id=i.id) for i in items],
        ),
    )


async def test_create_fills_names_and_prices_from_menu(db, setup):
    ctx, restaurant, biryani, raita = setup
    wishlist = await create(db, ctx, restaurant, biryani, raita, biryani)

    assert wishlist.name == "Friday night"
    assert {(i.name, i.price, i.quantity) for i in wishlist.items} == {
        ("Biryani", 12.0, 2),
        ("Raita", 1.5, 1),
    }
    assert [w.id for w in await wishlist_crud.list_wishlists(db, ctx)] == [wishlist.id]


async def test_create_requires_items(db, setup):
    ctx, restaurant, _, _ = setup
    with pytest.raises(ValidationError):
        await create(db, ctx, restaurant)


async def test_items_must_come_from_the_same_restaurant(db, setup, make_restaurant, make_menu_item):
    ctx, restaurant, biryani, _ = setup
    other = await make_restaurant()
    pizza = await make_menu_item(other, "Pizza", 9.0)

    with pytest.raises(ValidationError, match="same restaurant"):
        await create(db, ctx, restaurant, biryani, pizza)

    wishlist = await create(db, ctx, restaurant, biryani)
    with pytest.raises(ValidationError):
        await wishlist_crud.add_item(db, ctx, wishlist.id, WishlistItemIn(menu_item_id=pizza.id))


async def test_edit_items(db, setup):
    ctx, restaurant, biryani, raita = setup
    wishlist = await create(db, ctx, restaurant, biryani)

    wishlist = await wishlist_crud.add_item(db, ctx, wishlist.id, WishlistItemIn(menu_item_id=raita.id, quantity=2))
    wishlist = await wishlist_crud.add_item(db, ctx, wishlist.id, WishlistItemIn(menu_item_id=raita.id))
    raita_line = next(i for i in wishlist.items if i.menu_item_id == raita.id)
    assert raita_line.quantity == 3

    wishlist = await wishlist_crud.update_item_quantity(db, ctx, wishlist.id, raita_line.id, 5)
    assert next(i for i in wishlist.items if i.id == raita_line.id).quantity == 5

    wishlist = await wishlist_crud.remove_item(db, ctx, wishlist.id, raita_line.id)
    assert [i.menu_item_id for i in wishlist.items] == [biryani.id]

    with pytest.raises(NotFoundError):
        await wishlist_crud.remove_item(db, ctx, wishlist.id, raita_line.id)


async def test_rename_and_delete(db, setup):
    ctx, restaurant, biryani, _ = setup
    wishlist = await create(db, ctx, restaurant, biryani)

    wishlist = await wishlist_crud.rename_wishlist(db, ctx, wishlist.id, "  Sunday lunch ")
    assert wishlist.name == "Sunday lunch"
    with pytest.raises(ValidationError):
        await wishlist_crud.rename_wishlist(db, ctx, wishlist.id, "   ")

    await wishlist_crud.delete_wishlist(db, ctx, wishlist.id)
    with pytest.raises(NotFoundError):
        await wishlist_crud.get_wishlist(db, ctx, wishlist.id)


async def test_wishlists_are_private(db, setup, make_account):
    ctx, restaurant, biryani, _ = setup
    wishlist = await create(db, ctx, restaurant, biryani)
    stranger = AuthContext(await make_account(AccountRole.CUSTOMER))
    with pytest.raises(NotFoundError):
        await wishlist_crud.get_wishlist(db, stranger, wishlist.id)
