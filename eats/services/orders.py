"""
Order Service

Order placement and status changes. Each role may set only its own statuses:

    restaurant owner: cooking, cooked
    delivery driver:  picked_up, delivered

The order of the steps is not enforced; any allowed status can be set from
any current status.

Prices are always computed server-side from the stored dish price plus the
extras of the selected options.
"""

import logging
from typing import Any, Iterable, Optional, Union

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from eats.core.errors import ForbiddenError, NotFoundError, ValidationFailed
from eats.models import Dish, Order, OrderItem, OrderStatus, Restaurant, User, UserRole
from eats.schemas import (
    CreateOrderInput,
    EditOrderInput,
    GetOrdersInput,
    OrderIdInput,
    OrderItemOptionSchema,
)
from eats.services.base import BaseService, parse_input, service_operation
from eats.services.notifications import BaseNotificationService, get_notification_service

logger = logging.getLogger(__name__)

ALLOWED_STATUS_CHANGES = {
    UserRole.OWNER: {OrderStatus.COOKING, OrderStatus.COOKED},
    UserRole.DELIVERY: {OrderStatus.PICKED_UP, OrderStatus.DELIVERED},
}


def item_price(dish: Dish, selected: Iterable[OrderItemOptionSchema]) -> tuple[float, list[dict]]:
    """
    Price of one dish with the given option selections.

    Returns the price and the selections that matched an option group of the
    dish; unknown groups and choices are ignored.
    """
    price = dish.price
    applied = []
    groups = {group["name"]: group for group in dish.options or []}

    for option in selected:
        group = groups.get(option.name)
        if group is None:
            continue
        if group.get("extra") is not None:
            price += group["extra"]
            applied.append({"name": option.name, "choice": option.choice})
            continue
        choice = next(
            (c for c in group.get("choices") or [] if c["name"] == option.choice),
            None,
        )
        if choice is None:
            continue
        price += choice.get("extra") or 0
        applied.append({"name": option.name, "choice": option.choice})

    return price, applied


def can_see_order(user: User, order: Order) -> bool:
    if user.role == UserRole.CLIENT:
        return order.customer_id == user.id
    if user.role == UserRole.DELIVERY:
        return order.driver_id == user.id
    if user.role == UserRole.OWNER:
        return order.restaurant is not None and order.restaurant.owner_id == user.id
    return False


def _with_order_relations(query):
    return query.options(
        selectinload(Order.restaurant),
        selectinload(Order.customer),
        selectinload(Order.driver),
        selectinload(Order.items).selectinload(OrderItem.dish),
    )


class OrderService(BaseService):
    """Places orders and moves them through their lifecycle."""

    def __init__(self, db, notifier: Optional[BaseNotificationService] = None):
        super().__init__(db)
        self.notifier = notifier or get_notification_service()

    async def _notify(self, coro) -> None:
        # A lost notification must never undo a committed order
        try:
            result = await coro
            if not result.success:
                logger.warning(f"Notification failed: {result.error_message}")
        except Exception as e:
            logger.exception(f"Notification error: {e}")

    async def _get_visible_order(self, user: User, order_id: int) -> Order:
        result = await self.db.execute(
            _with_order_relations(select(Order)).where(Order.id == order_id)
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError("Order not found")
        if not can_see_order(user, order):
            raise ForbiddenError("You can't see that")
        return order

    @service_operation("Could not create order")
    async def create_order(self, customer: User, data: Union[CreateOrderInput, dict[str, Any]]) -> int:
        data = parse_input(CreateOrderInput, data)

        restaurant = await self.db.get(Restaurant, data.restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")

        dish_ids = {item.dish_id for item in data.items}
        result = await self.db.execute(
            select(Dish).where(Dish.id.in_(dish_ids), Dish.restaurant_id == restaurant.id)
        )
        dishes = {dish.id: dish for dish in result.scalars().all()}

        total = 0.0
        items = []
        for item in data.items:
            dish = dishes.get(item.dish_id)
            if dish is None:
                raise NotFoundError(f"Dish #{item.dish_id} not found")
            price, applied = item_price(dish, item.options)
            total += price
            items.append(OrderItem(dish_id=dish.id, options=applied))

        order = Order(
            customer_id=customer.id,
            restaurant_id=restaurant.id,
            total=round(total, 2),
            status=OrderStatus.PENDING,
            items=items,
        )
        self.db.add(order)
        await self.db.commit()

        logger.info(f"Order #{order.id} placed by user #{customer.id} (total {order.total:.2f})")
        await self._notify(self.notifier.notify_new_order(order, restaurant.owner_id))
        return order.id

    @service_operation("Could not load orders")
    async def get_orders(
        self, user: User, data: Union[GetOrdersInput, dict[str, Any], None] = None
    ) -> list[Order]:
        data = parse_input(GetOrdersInput, data or {})
        query = _with_order_relations(select(Order))

        if user.role == UserRole.CLIENT:
            query = query.where(Order.customer_id == user.id)
        elif user.role == UserRole.DELIVERY:
            query = query.where(Order.driver_id == user.id)
        else:
            query = query.join(Order.restaurant).where(Restaurant.owner_id == user.id)

        if data.status is not None:
            query = query.where(Order.status == data.status)

        result = await self.db.execute(query.order_by(Order.id.desc()))
        return list(result.scalars().all())

    @service_operation("Could not load order")
    async def get_order(self, user: User, data: Union[OrderIdInput, dict[str, Any]]) -> Order:
        data = parse_input(OrderIdInput, data)
        return await self._get_visible_order(user, data.order_id)

    @service_operation("Could not edit order")
    async def edit_order(self, user: User, data: Union[EditOrderInput, dict[str, Any]]) -> None:
        data = parse_input(EditOrderInput, data)
        order = await self._get_visible_order(user, data.order_id)

        if data.status not in ALLOWED_STATUS_CHANGES.get(user.role, set()):
            raise ForbiddenError("You can't do that.")

        order.status = data.status
        await self.db.commit()

        logger.info(f"Order #{order.id} moved to {order.status.value} by user #{user.id}")
        await self._notify(self.notifier.notify_order_status(order))

    @service_operation("Could not take order")
    async def take_order(self, driver: User, data: Union[OrderIdInput, dict[str, Any]]) -> None:
        data = parse_input(OrderIdInput, data)
        if driver.role != UserRole.DELIVERY:
            raise ForbiddenError("Only delivery drivers can take orders")
        # Matches no row once another driver holds the order
        claimed = await self.db.scalar(
            update(Order)
            .where(Order.id == data.order_id, Order.driver_id.is_(None))
            .values(driver_id=driver.id)
            .returning(Order.id)
            .execution_options(synchronize_session="fetch")
        )
        if claimed is None:
            exists = await self.db.scalar(select(Order.id).where(Order.id == data.order_id))
            if exists is None:
                raise NotFoundError("Order not found")
            raise ValidationFailed("This order already has a driver")

        await self.db.commit()
        logger.info(f"Order #{data.order_id} taken by driver #{driver.id}")
