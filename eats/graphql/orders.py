"""
Order queries and mutations.
"""

from typing import Optional

import strawberry
from strawberry.types import Info

from eats.graphql.inputs import (
    CreateOrderInput,
    EditOrderInput,
    GetOrdersInput,
    OrderInput,
    input_to_dict,
)
from eats.graphql.permissions import IsAuthenticated, IsClient, IsDelivery
from eats.graphql.types import (
    CreateOrderOutput,
    EditOrderOutput,
    GetOrderOutput,
    GetOrdersOutput,
    OrderType,
    TakeOrderOutput,
)
from eats.services.orders import OrderService


@strawberry.type
class OrderQuery:

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def get_orders(
        self, info: Info, input: Optional[GetOrdersInput] = None
    ) -> GetOrdersOutput:
        data = input_to_dict(input) if input is not None else {}
        result = await OrderService(info.context.db).get_orders(info.context.user, data)
        if not result.ok:
            return GetOrdersOutput.failed(result)
        return GetOrdersOutput(ok=True, orders=[OrderType.from_model(o) for o in result.value])

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def get_order(self, info: Info, input: OrderInput) -> GetOrderOutput:
        result = await OrderService(info.context.db).get_order(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return GetOrderOutput.failed(result)
        return GetOrderOutput(ok=True, order=OrderType.from_model(result.value))


@strawberry.type
class OrderMutation:

    @strawberry.mutation(permission_classes=[IsClient])
    async def create_order(self, info: Info, input: CreateOrderInput) -> CreateOrderOutput:
        result = await OrderService(info.context.db).create_order(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return CreateOrderOutput.failed(result)
        return CreateOrderOutput(ok=True, order_id=result.value)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def edit_order(self, info: Info, input: EditOrderInput) -> EditOrderOutput:
        result = await OrderService(info.context.db).edit_order(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return EditOrderOutput.failed(result)
        return EditOrderOutput(ok=True)

    @strawberry.mutation(permission_classes=[IsDelivery])
    async def take_order(self, info: Info, input: OrderInput) -> TakeOrderOutput:
        result = await OrderService(info.context.db).take_order(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return TakeOrderOutput.failed(result)
        return TakeOrderOutput(ok=True)
