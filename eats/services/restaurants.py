"""
Restaurant Service

Create / edit / delete / search / paginate restaurants and manage their
dishes. Every mutation re-checks ownership through ``ensure_owner`` before
touching the database.

Deleting a restaurant never removes the row: it clears ``verified`` so the
restaurant drops out of the curated listing while its history survives.
"""

import logging
from typing import Any, Union

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from eats.core.errors import ForbiddenError, NotFoundError
from eats.models import Category, Dish, Restaurant, User
from eats.schemas import (
    CategoryInput,
    CategoryPage,
    CreateDishInput,
    CreateRestaurantInput,
    DishIdInput,
    EditDishInput,
    EditRestaurantInput,
    Page,
    PageInput,
    RestaurantIdInput,
    SearchRestaurantInput,
)
from eats.services.base import BaseService, parse_input, service_operation
from eats.services.categories import CategoryRepository

logger = logging.getLogger(__name__)

CATEGORY_PAGE_SIZE = 25
RESTAURANTS_PAGE_SIZE = 3
SEARCH_PAGE_SIZE = 25

LIKE_ESCAPE = "\\"


def ensure_owner(user: User, restaurant: Restaurant) -> None:
    """Raise ``ForbiddenError`` unless ``user`` owns ``restaurant``."""
    if restaurant.owner_id != user.id:
        logger.warning(
            f"User #{user.id} tried to modify restaurant #{restaurant.id} "
            f"owned by #{restaurant.owner_id}"
        )
        raise ForbiddenError("You can't do that.")


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _with_listing_relations(query):
    return query.options(
        selectinload(Restaurant.category),
        selectinload(Restaurant.owner),
    )


class RestaurantService(BaseService):
    """Catalog operations for restaurants, categories and dishes."""

    def __init__(self, db):
        super().__init__(db)
        self.categories = CategoryRepository(db)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    async def _get_restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = await self.db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def _get_owned_restaurant(self, owner: User, restaurant_id: int) -> Restaurant:
        restaurant = await self._get_restaurant(restaurant_id)
        ensure_owner(owner, restaurant)
        return restaurant

    async def _get_owned_dish(self, owner: User, dish_id: int) -> Dish:
        result = await self.db.execute(
            select(Dish).options(selectinload(Dish.restaurant)).where(Dish.id == dish_id)
        )
        dish = result.scalar_one_or_none()
        if dish is None:
            raise NotFoundError("Dish not found")
        ensure_owner(owner, dish.restaurant)
        return dish

    # =========================================================================
    # RESTAURANTS
    # =========================================================================

    @service_operation("Could not create restaurant")
    async def create_restaurant(
        self, owner: User, data: Union[CreateRestaurantInput, dict[str, Any]]
    ) -> int:
        """Create a restaurant owned by ``owner``; returns its id."""
        data = parse_input(CreateRestaurantInput, data)

        category = await self.categories.get_or_create(data.category_name)
        restaurant = Restaurant(
            name=data.name,
            address=data.address,
            avatar=data.avatar,
            owner_id=owner.id,
            category_id=category.id,
        )
        self.db.add(restaurant)
        await self.db.commit()

        logger.info(f"Restaurant #{restaurant.id} '{restaurant.name}' created by user #{owner.id}")
        return restaurant.id

    @service_operation("Could not edit restaurant")
    async def edit_restaurant(
        self, owner: User, data: Union[EditRestaurantInput, dict[str, Any]]
    ) -> None:
        data = parse_input(EditRestaurantInput, data)
        restaurant = await self._get_owned_restaurant(owner, data.restaurant_id)

        category = None
        if data.category_name:
            category = await self.categories.get_or_create(data.category_name)

        for key, value in data.changes().items():
            setattr(restaurant, key, value)
        if category is not None:
            restaurant.category_id = category.id

        await self.db.commit()
        logger.info(f"Restaurant #{restaurant.id} edited by user #{owner.id}")

    @service_operation("Could not delete restaurant")
    async def delete_restaurant(
        self, owner: User, data: Union[RestaurantIdInput, dict[str, Any]]
    ) -> None:
        """Soft delete: the row stays, ``verified`` is cleared."""
        data = parse_input(RestaurantIdInput, data)
        restaurant = await self._get_owned_restaurant(owner, data.restaurant_id)

        restaurant.verified = False
        await self.db.commit()
        logger.info(f"Restaurant #{restaurant.id} unverified by user #{owner.id}")

    @service_operation("Could not load restaurant")
    async def find_restaurant_by_id(
        self, data: Union[RestaurantIdInput, dict[str, Any]]
    ) -> Restaurant:
        data = parse_input(RestaurantIdInput, data)
        result = await self.db.execute(
            _with_listing_relations(select(Restaurant))
            .options(selectinload(Restaurant.dishes))
            .where(Restaurant.id == data.restaurant_id)
        )
        restaurant = result.scalar_one_or_none()
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    @service_operation("Could not load restaurants")
    async def my_restaurants(self, owner: User) -> list[Restaurant]:
        result = await self.db.execute(
            _with_listing_relations(select(Restaurant))
            .where(Restaurant.owner_id == owner.id)
            .order_by(Restaurant.id)
        )
        return list(result.scalars().all())

    @service_operation("Could not load restaurants")
    async def all_restaurants(self, data: Union[PageInput, dict[str, Any]]) -> Page[Restaurant]:
        data = parse_input(PageInput, data)

        total_result = await self.db.execute(select(func.count(Restaurant.id)))
        total = total_result.scalar() or 0

        result = await self.db.execute(
            _with_listing_relations(select(Restaurant))
            .order_by(Restaurant.id)
            .offset((data.page - 1) * RESTAURANTS_PAGE_SIZE)
            .limit(RESTAURANTS_PAGE_SIZE)
        )
        return Page.build(list(result.scalars().all()), data.page, RESTAURANTS_PAGE_SIZE, total)

    @service_operation("Could not search for restaurants")
    async def search_restaurant_by_name(
        self, data: Union[SearchRestaurantInput, dict[str, Any]]
    ) -> Page[Restaurant]:
        """Case-insensitive substring search on the restaurant name."""
        data = parse_input(SearchRestaurantInput, data)
        matches = Restaurant.name.ilike(f"%{escape_like(data.query)}%", escape=LIKE_ESCAPE)

        total_result = await self.db.execute(select(func.count(Restaurant.id)).where(matches))
        total = total_result.scalar() or 0

        result = await self.db.execute(
            _with_listing_relations(select(Restaurant))
            .options(selectinload(Restaurant.dishes))
            .where(matches)
            .order_by(Restaurant.id)
            .offset((data.page - 1) * SEARCH_PAGE_SIZE)
            .limit(SEARCH_PAGE_SIZE)
        )
        return Page.build(list(result.scalars().all()), data.page, SEARCH_PAGE_SIZE, total)

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def count_restaurants(self, category: Category) -> int:
        result = await self.db.execute(
            select(func.count(Restaurant.id)).where(Restaurant.category_id == category.id)
        )
        return result.scalar() or 0

    @service_operation("Could not load categories")
    async def all_categories(self) -> list[Category]:
        return await self.categories.find_all()

    @service_operation("Could not load category")
    async def find_category_by_slug(
        self, data: Union[CategoryInput, dict[str, Any]]
    ) -> CategoryPage:
        data = parse_input(CategoryInput, data)
        category = await self.categories.find_by_slug(data.slug)
        if category is None:
            raise NotFoundError("Category not found")

        total = await self.count_restaurants(category)
        result = await self.db.execute(
            _with_listing_relations(select(Restaurant))
            .where(Restaurant.category_id == category.id)
            .order_by(Restaurant.id)
            .offset((data.page - 1) * CATEGORY_PAGE_SIZE)
            .limit(CATEGORY_PAGE_SIZE)
        )
        restaurants = Page.build(
            list(result.scalars().all()), data.page, CATEGORY_PAGE_SIZE, total
        )
        return CategoryPage(category=category, restaurants=restaurants)

    # =========================================================================
    # DISHES
    # =========================================================================

    @service_operation("Could not create dish")
    async def create_dish(self, owner: User, data: Union[CreateDishInput, dict[str, Any]]) -> int:
        data = parse_input(CreateDishInput, data)
        restaurant = await self._get_owned_restaurant(owner, data.restaurant_id)

        dish = Dish(
            name=data.name,
            price=data.price,
            photo=data.photo,
            description=data.description,
            options=[option.model_dump(exclude_none=True) for option in data.options],
            restaurant_id=restaurant.id,
        )
        self.db.add(dish)
        await self.db.commit()

        logger.info(f"Dish #{dish.id} '{dish.name}' added to restaurant #{restaurant.id}")
        return dish.id

    @service_operation("Could not edit dish")
    async def edit_dish(self, owner: User, data: Union[EditDishInput, dict[str, Any]]) -> None:
        data = parse_input(EditDishInput, data)
        dish = await self._get_owned_dish(owner, data.dish_id)

        for key, value in data.changes().items():
            setattr(dish, key, value)
        await self.db.commit()
        logger.info(f"Dish #{dish.id} edited by user #{owner.id}")

    @service_operation("Could not delete dish")
    async def delete_dish(self, owner: User, data: Union[DishIdInput, dict[str, Any]]) -> None:
        data = parse_input(DishIdInput, data)
        dish = await self._get_owned_dish(owner, data.dish_id)

        await self.db.delete(dish)
        await self.db.commit()
        logger.info(f"Dish #{data.dish_id} deleted by user #{owner.id}")
