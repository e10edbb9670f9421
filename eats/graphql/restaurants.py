"""
Restaurant, category and dish queries and mutations.

Resolvers stay thin: convert the input, call ``RestaurantService``, map the
``ServiceResult`` onto the output type.
"""

from typing import Optional

import strawberry
from strawberry.types import Info

from eats.graphql.inputs import (
    CategoryInput,
    CreateDishInput,
    CreateRestaurantInput,
    DishInput,
    EditDishInput,
    EditRestaurantInput,
    RestaurantInput,
    RestaurantsInput,
    SearchRestaurantInput,
    input_to_dict,
)
from eats.graphql.permissions import IsOwner
from eats.graphql.types import (
    AllCategoriesOutput,
    CategoryOutput,
    CategoryType,
    CreateDishOutput,
    CreateRestaurantOutput,
    DeleteDishOutput,
    DeleteRestaurantOutput,
    EditDishOutput,
    EditRestaurantOutput,
    MyRestaurantsOutput,
    RestaurantOutput,
    RestaurantsOutput,
    RestaurantType,
    SearchRestaurantOutput,
)
from eats.services.restaurants import RestaurantService


@strawberry.type
class RestaurantQuery:

    @strawberry.field
    async def restaurants(
        self, info: Info, input: Optional[RestaurantsInput] = None
    ) -> RestaurantsOutput:
        data = input_to_dict(input) if input is not None else {}
        result = await RestaurantService(info.context.db).all_restaurants(data)
        if not result.ok:
            return RestaurantsOutput.failed(result)
        page = result.value
        return RestaurantsOutput(
            ok=True,
            results=[RestaurantType.from_model(r) for r in page.items],
            page=page.page,
            total_pages=page.total_pages,
            total_results=page.total_results,
        )

    @strawberry.field
    async def restaurant(self, info: Info, input: RestaurantInput) -> RestaurantOutput:
        result = await RestaurantService(info.context.db).find_restaurant_by_id(input_to_dict(input))
        if not result.ok:
            return RestaurantOutput.failed(result)
        return RestaurantOutput(ok=True, restaurant=RestaurantType.from_model(result.value))

    @strawberry.field
    async def search_restaurant(
        self, info: Info, input: SearchRestaurantInput
    ) -> SearchRestaurantOutput:
        result = await RestaurantService(info.context.db).search_restaurant_by_name(
            input_to_dict(input)
        )
        if not result.ok:
            return SearchRestaurantOutput.failed(result)
        page = result.value
        return SearchRestaurantOutput(
            ok=True,
            restaurants=[RestaurantType.from_model(r) for r in page.items],
            page=page.page,
            total_pages=page.total_pages,
            total_results=page.total_results,
        )

    @strawberry.field(permission_classes=[IsOwner])
    async def my_restaurants(self, info: Info) -> MyRestaurantsOutput:
        result = await RestaurantService(info.context.db).my_restaurants(info.context.user)
        if not result.ok:
            return MyRestaurantsOutput.failed(result)
        return MyRestaurantsOutput(
            ok=True, restaurants=[RestaurantType.from_model(r) for r in result.value]
        )

    @strawberry.field
    async def categories(self, info: Info) -> AllCategoriesOutput:
        result = await RestaurantService(info.context.db).all_categories()
        if not result.ok:
            return AllCategoriesOutput.failed(result)
        return AllCategoriesOutput(
            ok=True, categories=[CategoryType.from_model(c) for c in result.value]
        )

    @strawberry.field
    async def category(self, info: Info, input: CategoryInput) -> CategoryOutput:
        result = await RestaurantService(info.context.db).find_category_by_slug(
            input_to_dict(input)
        )
        if not result.ok:
            return CategoryOutput.failed(result)
        page = result.value.restaurants
        return CategoryOutput(
            ok=True,
            category=CategoryType.from_model(result.value.category),
            restaurants=[RestaurantType.from_model(r) for r in page.items],
            page=page.page,
            total_pages=page.total_pages,
            total_results=page.total_results,
        )


@strawberry.type
class RestaurantMutation:

    @strawberry.mutation(permission_classes=[IsOwner])
    async def create_restaurant(
        self, info: Info, input: CreateRestaurantInput
    ) -> CreateRestaurantOutput:
        result = await RestaurantService(info.context.db).create_restaurant(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return CreateRestaurantOutput.failed(result)
        return CreateRestaurantOutput(ok=True, restaurant_id=result.value)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def edit_restaurant(self, info: Info, input: EditRestaurantInput) -> EditRestaurantOutput:
        result = await RestaurantService(info.context.db).edit_restaurant(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return EditRestaurantOutput.failed(result)
        return EditRestaurantOutput(ok=True)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def delete_restaurant(self, info: Info, input: RestaurantInput) -> DeleteRestaurantOutput:
        result = await RestaurantService(info.context.db).delete_restaurant(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return DeleteRestaurantOutput.failed(result)
        return DeleteRestaurantOutput(ok=True)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def create_dish(self, info: Info, input: CreateDishInput) -> CreateDishOutput:
        result = await RestaurantService(info.context.db).create_dish(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return CreateDishOutput.failed(result)
        return CreateDishOutput(ok=True, dish_id=result.value)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def edit_dish(self, info: Info, input: EditDishInput) -> EditDishOutput:
        result = await RestaurantService(info.context.db).edit_dish(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return EditDishOutput.failed(result)
        return EditDishOutput(ok=True)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def delete_dish(self, info: Info, input: DishInput) -> DeleteDishOutput:
        result = await RestaurantService(info.context.db).delete_dish(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return DeleteDishOutput.failed(result)
        return DeleteDishOutput(ok=True)
