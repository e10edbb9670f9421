"""
GraphQL Input Types

Raw argument shapes. Validation happens in the pydantic schemas the
services parse these into (see ``eats.schemas``).
"""

import dataclasses
from typing import Any, List, Optional

import strawberry

from eats.models import OrderStatus, UserRole


def _without_none(pairs) -> dict[str, Any]:
    return {k: v for k, v in pairs if v is not None}


def input_to_dict(value: Any) -> dict[str, Any]:
    """Turn a strawberry input into a dict, dropping arguments left out (None) at every level."""
    return dataclasses.asdict(value, dict_factory=_without_none)


# =============================================================================
# USERS
# =============================================================================

@strawberry.input
class CreateAccountInput:
    email: str
    password: str
    role: UserRole = UserRole.CLIENT


@strawberry.input
class LoginInput:
    email: str
    password: str


@strawberry.input
class EditProfileInput:
    email: Optional[str] = None
    password: Optional[str] = None


# =============================================================================
# RESTAURANTS
# =============================================================================

@strawberry.input
class CreateRestaurantInput:
    name: str
    category_name: str
    address: Optional[str] = None
    avatar: Optional[str] = None


@strawberry.input
class EditRestaurantInput:
    restaurant_id: int
    name: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    category_name: Optional[str] = None


@strawberry.input
class RestaurantInput:
    restaurant_id: int


@strawberry.input
class RestaurantsInput:
    page: int = 1


@strawberry.input
class CategoryInput:
    slug: str
    page: int = 1


@strawberry.input
class SearchRestaurantInput:
    query: str
    page: int = 1


# =============================================================================
# DISHES
# =============================================================================

@strawberry.input
class DishChoiceInput:
    name: str
    extra: Optional[float] = None


@strawberry.input
class DishOptionInput:
    name: str
    choices: Optional[List[DishChoiceInput]] = None
    extra: Optional[float] = None


@strawberry.input
class CreateDishInput:
    restaurant_id: int
    name: str
    price: float
    description: str
    photo: Optional[str] = None
    options: Optional[List[DishOptionInput]] = None


@strawberry.input
class EditDishInput:
    dish_id: int
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    photo: Optional[str] = None
    options: Optional[List[DishOptionInput]] = None


@strawberry.input
class DishInput:
    dish_id: int


# =============================================================================
# ORDERS
# =============================================================================

@strawberry.input
class OrderItemOptionInput:
    name: str
    choice: Optional[str] = None


@strawberry.input
class CreateOrderItemInput:
    dish_id: int
    options: Optional[List[OrderItemOptionInput]] = None


@strawberry.input
class CreateOrderInput:
    restaurant_id: int
    items: List[CreateOrderItemInput]


@strawberry.input
class GetOrdersInput:
    status: Optional[OrderStatus] = None


@strawberry.input
class OrderInput:
    order_id: int


@strawberry.input
class EditOrderInput:
    order_id: int
    status: OrderStatus
