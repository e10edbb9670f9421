"""
Root GraphQL schema assembled from the per-domain query / mutation types.
"""

import strawberry

from eats.graphql.orders import OrderMutation, OrderQuery
from eats.graphql.restaurants import RestaurantMutation, RestaurantQuery
from eats.graphql.users import UserMutation, UserQuery


@strawberry.type
class Query(UserQuery, RestaurantQuery, OrderQuery):
    pass


@strawberry.type
class Mutation(UserMutation, RestaurantMutation, OrderMutation):
    pass


schema = strawberry.Schema(query=Query, mutation=Mutation)
