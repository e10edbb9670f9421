"""
Role-based guards for resolvers.

Usage:
    @strawberry.mutation(permission_classes=[IsOwner])
    async def create_restaurant(...)
"""

from typing import Any, Optional

from strawberry.permission import BasePermission
from strawberry.types import Info

from eats.models import UserRole


class IsAuthenticated(BasePermission):
    message = "You must be logged in."

    def has_permission(self, source: Any, info: Info, **kwargs) -> bool:
        return info.context.user is not None


class RolePermission(BasePermission):
    """Allows a single role; subclasses set ``role``."""
    role: Optional[UserRole] = None
    message = "You can't do that."

    def has_permission(self, source: Any, info: Info, **kwargs) -> bool:
        user = info.context.user
        return user is not None and user.role == self.role


class IsOwner(RolePermission):
    role = UserRole.OWNER
    message = "Only restaurant owners can do that."


class IsClient(RolePermission):
    role = UserRole.CLIENT
    message = "Only clients can do that."


class IsDelivery(RolePermission):
    role = UserRole.DELIVERY
    message = "Only delivery drivers can do that."
