import pytest
from sqlalchemy import select, update

from eats.core.errors import ErrorKind
from eats.models import Dish, Order, OrderStatus, UserRole
from eats.schemas import OrderItemOptionSchema
from eats.services.orders import OrderService, item_price
from eats.services.restaurants import RestaurantService
from tests.conftest import make_user

DISH = {
    "name": "Margherita",
    "price": 9.5,
    "description": "Tomato, mozzarella and basil",
    "options": [
        {"name": "Size", "choices": [{"name": "L", "extra": 2}, {"name": "M"}]},
        {"name": "Extra cheese", "extra": 1.5},
    ],
}


@pytest.fixture
async def menu(db, owner):
    """A restaurant with one dish; returns (restaurant_id, dish_id)."""
    service = RestaurantService(db)
    restaurant_id = (
        await service.create_restaurant(owner, {"name": "Pizza Palace", "category_name": "Italian"})
    ).value
    dish_id = (await service.create_dish(owner, {"restaurant_id": restaurant_id, **DISH})).value
    return restaurant_id, dish_id


@pytest.fixture
async def order_id(db, client_user, menu, notifier):
    restaurant_id, dish_id = menu
    result = await OrderService(db, notifier).create_order(
        client_user, {"restaurant_id": restaurant_id, "items": [{"dish_id": dish_id}]}
    )
    assert result.ok, result.error
    return result.value


def test_item_price_adds_matching_extras():
    dish = Dish(name="Margherita", price=9.5, description="x" * 5, options=DISH["options"])
    price, applied = item_price(
        dish,
        [
            OrderItemOptionSchema(name="Size", choice="L"),
            OrderItemOptionSchema(name="Extra cheese"),
            OrderItemOptionSchema(name="Gluten free"),
            OrderItemOptionSchema(name="Size", choice="XXL"),
        ],
    )
    assert price == 13.0
    assert applied == [
        {"name": "Size", "choice": "L"},
        {"name": "Extra cheese", "choice": None},
    ]


async def test_create_order_computes_total(db, owner, client_user, menu, notifier):
    restaurant_id, dish_id = menu
    result = await OrderService(db, notifier).create_order(
        client_user,
        {
            "restaurant_id": restaurant_id,
            "items": [
                {"dish_id": dish_id, "options": [{"name": "Size", "choice": "L"}, {"name": "Extra cheese"}]},
                {"dish_id": dish_id},
            ],
        },
    )
    assert result.ok

    order = await db.get(Order, result.value)
    assert order.total == 22.5
    assert order.status == OrderStatus.PENDING
    assert order.customer_id == client_user.id
    assert len(order.items) == 2
    assert notifier.events == [("new_order", order.id, owner.id)]


async def test_create_order_requires_items(db, client_user, menu, notifier):
    restaurant_id, _ = menu
    result = await OrderService(db, notifier).create_order(
        client_user, {"restaurant_id": restaurant_id, "items": []}
    )
    assert result.error_kind == ErrorKind.VALIDATION
    assert notifier.events == []


async def test_create_order_with_unknown_dish(db, client_user, menu, notifier):
    restaurant_id, _ = menu
    result = await OrderService(db, notifier).create_order(
        client_user, {"restaurant_id": restaurant_id, "items": [{"dish_id": 999}]}
    )
    assert result.error_kind == ErrorKind.NOT_FOUND


async def test_create_order_for_unknown_restaurant(db, client_user, notifier):
    result = await OrderService(db, notifier).create_order(
        client_user, {"restaurant_id": 77, "items": [{"dish_id": 1}]}
    )
    assert result.error_kind == ErrorKind.NOT_FOUND
    assert result.error == "Restaurant not found"


async def test_orders_are_visible_by_role(db, owner, other_owner, client_user, driver, order_id, notifier):
    service = OrderService(db, notifier)
    stranger = await make_user(db, "stranger@eats.io", UserRole.CLIENT)

    assert [o.id for o in (await service.get_orders(client_user)).value] == [order_id]
    assert [o.id for o in (await service.get_orders(owner)).value] == [order_id]
    assert (await service.get_orders(other_owner)).value == []
    assert (await service.get_orders(stranger)).value == []
    assert (await service.get_orders(driver)).value == []

    assert (await service.get_order(client_user, {"order_id": order_id})).ok
    denied = await service.get_order(stranger, {"order_id": order_id})
    assert denied.error_kind == ErrorKind.FORBIDDEN
    missing = await service.get_order(client_user, {"order_id": 12345})
    assert missing.error_kind == ErrorKind.NOT_FOUND


async def test_get_orders_filters_by_status(db, owner, client_user, order_id, notifier):
    service = OrderService(db, notifier)
    assert (await service.edit_order(owner, {"order_id": order_id, "status": "cooking"})).ok

    cooking = await service.get_orders(client_user, {"status": "cooking"})
    pending = await service.get_orders(client_user, {"status": "pending"})
    assert [o.id for o in cooking.value] == [order_id]
    assert pending.value == []


async def test_status_workflow(db, owner, client_user, driver, order_id, notifier):
    service = OrderService(db, notifier)

    refused = await service.edit_order(client_user, {"order_id": order_id, "status": "cooking"})
    assert refused.error_kind == ErrorKind.FORBIDDEN

    assert (await service.edit_order(owner, {"order_id": order_id, "status": "cooking"})).ok
    assert (await service.edit_order(owner, {"order_id": order_id, "status": "cooked"})).ok
    owner_too_far = await service.edit_order(owner, {"order_id": order_id, "status": "delivered"})
    assert owner_too_far.error_kind == ErrorKind.FORBIDDEN

    # Not the assigned driver yet
    early = await service.edit_order(driver, {"order_id": order_id, "status": "picked_up"})
    assert early.error_kind == ErrorKind.FORBIDDEN

    assert (await service.take_order(driver, {"order_id": order_id})).ok
    assert (await service.edit_order(driver, {"order_id": order_id, "status": "picked_up"})).ok
    assert (await service.edit_order(driver, {"order_id": order_id, "status": "delivered"})).ok

    order = await db.get(Order, order_id)
    assert order.status == OrderStatus.DELIVERED
    assert order.driver_id == driver.id
    assert [e[2] for e in notifier.events if e[0] == "status"] == [
        OrderStatus.COOKING,
        OrderStatus.COOKED,
        OrderStatus.PICKED_UP,
        OrderStatus.DELIVERED,
    ]


async def test_take_order_rules(db, client_user, driver, order_id, notifier):
    service = OrderService(db, notifier)
    other_driver = await make_user(db, "driver2@eats.io", UserRole.DELIVERY)

    assert (await service.take_order(client_user, {"order_id": order_id})).error_kind == ErrorKind.FORBIDDEN
    assert (await service.take_order(driver, {"order_id": 999})).error_kind == ErrorKind.NOT_FOUND
    assert (await service.take_order(driver, {"order_id": order_id})).ok

    taken = await service.take_order(other_driver, {"order_id": order_id})
    assert taken.error_kind == ErrorKind.VALIDATION
    assert (await db.get(Order, order_id)).driver_id == driver.id


async def test_notifier_failure_does_not_fail_order(db, client_user, menu):
    class BrokenNotifier:
        async def notify_new_order(self, order, owner_id):
            raise RuntimeError("push gateway down")

    restaurant_id, dish_id = menu
    result = await OrderService(db, BrokenNotifier()).create_order(
        client_user, {"restaurant_id": restaurant_id, "items": [{"dish_id": dish_id}]}
    )
    assert result.ok
    assert await db.get(Order, result.value) is not None


async def test_take_order_respects_claim_made_elsewhere(db, driver, order_id, notifier):
    service = OrderService(db, notifier)
    other_driver = await make_user(db, "driver2@eats.io", UserRole.DELIVERY)

    # Load the unclaimed order, then claim it behind the session's back
    order = await db.get(Order, order_id)
    assert order.driver_id is None
    await db.execute(
        update(Order.__table__).where(Order.__table__.c.id == order_id).values(driver_id=driver.id)
    )
    await db.commit()

    result = await service.take_order(other_driver, {"order_id": order_id})
    assert result.error_kind == ErrorKind.VALIDATION
    assert result.error == "This order already has a driver"

    stored = await db.scalar(select(Order.driver_id).where(Order.id == order_id))
    assert stored == driver.id


async def test_driver_may_skip_status_steps(db, driver, order_id, notifier):
    service = OrderService(db, notifier)
    assert (await service.take_order(driver, {"order_id": order_id})).ok

    result = await service.edit_order(driver, {"order_id": order_id, "status": "delivered"})
    assert result.ok
    assert (await db.get(Order, order_id)).status == OrderStatus.DELIVERED
