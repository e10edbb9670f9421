"""
                        Services Module

Business logic behind the GraphQL resolvers. Every public operation returns
a ServiceResult instead of raising.

Services:
    - restaurants: restaurant / category / dish catalog
    - users: accounts, login, profile
    - orders: order placement and status workflow
    - notifications: order event publishing
"""

from eats.services.orders import OrderService
from eats.services.restaurants import RestaurantService
from eats.services.users import UserService

__all__ = ["OrderService", "RestaurantService", "UserService"]
