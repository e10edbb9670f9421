"""
GraphQL Object Types

API exposure is declared here, separately from the ORM mapping in
``eats.models``. Each type has a ``from_model`` converter that copies the
columns and only follows relationships that were eagerly loaded.
"""

from datetime import datetime
from typing import List, Optional

import strawberry
from sqlalchemy import inspect as sa_inspect
from strawberry.types import Info

from eats.core.errors import ErrorKind
from eats.models import (
    Category,
    Dish,
    Order,
    OrderItem,
    OrderStatus,
    Restaurant,
    User,
    UserRole,
)
from eats.schemas import ServiceResult
from eats.services.restaurants import RestaurantService

strawberry.enum(UserRole, name="UserRole")
strawberry.enum(OrderStatus, name="OrderStatus")
strawberry.enum(ErrorKind, name="ErrorKind")


def _loaded(instance, attribute: str):
    """Relationship value if it was loaded, else None (async sessions cannot lazy-load)."""
    if attribute in sa_inspect(instance).unloaded:
        return None
    return getattr(instance, attribute)


# =============================================================================
# ENTITIES
# =============================================================================

@strawberry.type(name="User")
class UserType:
    id: int
    email: str
    role: UserRole
    verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            verified=user.verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@strawberry.type(name="DishChoice")
class DishChoiceType:
    name: str
    extra: Optional[float] = None


@strawberry.type(name="DishOption")
class DishOptionType:
    name: str
    choices: Optional[List[DishChoiceType]] = None
    extra: Optional[float] = None

    @classmethod
    def from_dict(cls, option: dict) -> "DishOptionType":
        choices = option.get("choices")
        return cls(
            name=option["name"],
            extra=option.get("extra"),
            choices=[
                DishChoiceType(name=c["name"], extra=c.get("extra")) for c in choices
            ] if choices is not None else None,
        )


@strawberry.type(name="Dish")
class DishType:
    id: int
    name: str
    price: float
    description: str
    restaurant_id: int
    photo: Optional[str] = None
    options: Optional[List[DishOptionType]] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, dish: Dish) -> "DishType":
        return cls(
            id=dish.id,
            name=dish.name,
            price=dish.price,
            description=dish.description,
            restaurant_id=dish.restaurant_id,
            photo=dish.photo,
            options=[DishOptionType.from_dict(o) for o in dish.options or []],
            created_at=dish.created_at,
        )


@strawberry.type(name="Category")
class CategoryType:
    model: strawberry.Private[Category]
    id: int
    name: str
    slug: str
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None

    @strawberry.field
    async def restaurant_count(self, info: Info) -> int:
        """Number of restaurants filed under this category, counted on demand."""
        return await RestaurantService(info.context.db).count_restaurants(self.model)

    @classmethod
    def from_model(cls, category: Category) -> "CategoryType":
        return cls(
            model=category,
            id=category.id,
            name=category.name,
            slug=category.slug,
            cover_image=category.cover_image,
            created_at=category.created_at,
        )


@strawberry.type(name="Restaurant")
class RestaurantType:
    id: int
    name: str
    address: str
    avatar: str
    verified: bool
    owner_id: int
    category: Optional[CategoryType] = None
    owner: Optional[UserType] = None
    dishes: Optional[List[DishType]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, restaurant: Restaurant) -> "RestaurantType":
        category = _loaded(restaurant, "category")
        owner = _loaded(restaurant, "owner")
        dishes = _loaded(restaurant, "dishes")
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            address=restaurant.address,
            avatar=restaurant.avatar,
            verified=restaurant.verified,
            owner_id=restaurant.owner_id,
            category=CategoryType.from_model(category) if category is not None else None,
            owner=UserType.from_model(owner) if owner is not None else None,
            dishes=[DishType.from_model(d) for d in dishes] if dishes is not None else None,
            created_at=restaurant.created_at,
            updated_at=restaurant.updated_at,
        )


@strawberry.type(name="OrderItemOption")
class OrderItemOptionType:
    name: str
    choice: Optional[str] = None


@strawberry.type(name="OrderItem")
class OrderItemType:
    id: int
    dish: Optional[DishType] = None
    options: Optional[List[OrderItemOptionType]] = None

    @classmethod
    def from_model(cls, item: OrderItem) -> "OrderItemType":
        dish = _loaded(item, "dish")
        return cls(
            id=item.id,
            dish=DishType.from_model(dish) if dish is not None else None,
            options=[
                OrderItemOptionType(name=o["name"], choice=o.get("choice"))
                for o in item.options or []
            ],
        )


@strawberry.type(name="Order")
class OrderType:
    id: int
    status: OrderStatus
    total: Optional[float] = None
    customer: Optional[UserType] = None
    driver: Optional[UserType] = None
    restaurant: Optional[RestaurantType] = None
    items: Optional[List[OrderItemType]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, order: Order) -> "OrderType":
        customer = _loaded(order, "customer")
        driver = _loaded(order, "driver")
        restaurant = _loaded(order, "restaurant")
        items = _loaded(order, "items")
        return cls(
            id=order.id,
            status=order.status,
            total=order.total,
            customer=UserType.from_model(customer) if customer is not None else None,
            driver=UserType.from_model(driver) if driver is not None else None,
            restaurant=RestaurantType.from_model(restaurant) if restaurant is not None else None,
            items=[OrderItemType.from_model(i) for i in items] if items is not None else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


# =============================================================================
# OUTPUTS
# =============================================================================

@strawberry.type
class CoreOutput:
    """Fields shared by every query / mutation result."""
    ok: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failed(cls, result: ServiceResult):
        return cls(ok=False, error=result.error, error_kind=result.error_kind)


@strawberry.type
class PaginationOutput(CoreOutput):
    page: Optional[int] = None
    total_pages: Optional[int] = None
    total_results: Optional[int] = None


@strawberry.type
class CreateAccountOutput(CoreOutput):
    user_id: Optional[int] = None


@strawberry.type
class LoginOutput(CoreOutput):
    token: Optional[str] = None


@strawberry.type
class EditProfileOutput(CoreOutput):
    pass


@strawberry.type
class UserProfileOutput(CoreOutput):
    user: Optional[UserType] = None


@strawberry.type
class CreateRestaurantOutput(CoreOutput):
    restaurant_id: Optional[int] = None


@strawberry.type
class EditRestaurantOutput(CoreOutput):
    pass


@strawberry.type
class DeleteRestaurantOutput(CoreOutput):
    pass


@strawberry.type
class RestaurantOutput(CoreOutput):
    restaurant: Optional[RestaurantType] = None


@strawberry.type
class MyRestaurantsOutput(CoreOutput):
    restaurants: Optional[List[RestaurantType]] = None


@strawberry.type
class RestaurantsOutput(PaginationOutput):
    results: Optional[List[RestaurantType]] = None


@strawberry.type
class SearchRestaurantOutput(PaginationOutput):
    restaurants: Optional[List[RestaurantType]] = None


@strawberry.type
class AllCategoriesOutput(CoreOutput):
    categories: Optional[List[CategoryType]] = None


@strawberry.type
class CategoryOutput(PaginationOutput):
    category: Optional[CategoryType] = None
    restaurants: Optional[List[RestaurantType]] = None


@strawberry.type
class CreateDishOutput(CoreOutput):
    dish_id: Optional[int] = None


@strawberry.type
class EditDishOutput(CoreOutput):
    pass


@strawberry.type
class DeleteDishOutput(CoreOutput):
    pass


@strawberry.type
class CreateOrderOutput(CoreOutput):
    order_id: Optional[int] = None


@strawberry.type
class GetOrdersOutput(CoreOutput):
    orders: Optional[List[OrderType]] = None


@strawberry.type
class GetOrderOutput(CoreOutput):
    order: Optional[OrderType] = None


@strawberry.type
class EditOrderOutput(CoreOutput):
    pass


@strawberry.type
class TakeOrderOutput(CoreOutput):
    pass
