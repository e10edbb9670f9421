"""
User Service

Account creation, login (JWT issuing) and profile edits. A user's role is
chosen once at sign-up and cannot be changed afterwards.
"""

import logging
from typing import Any, Optional, Union

from sqlalchemy import select

from eats.core.errors import ForbiddenError, NotFoundError, ValidationFailed
from eats.core.security import create_access_token, hash_password, verify_password
from eats.models import User
from eats.schemas import CreateAccountInput, EditProfileInput, LoginInput
from eats.services.base import BaseService, parse_input, service_operation

logger = logging.getLogger(__name__)


class UserService(BaseService):

    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @service_operation("Could not create account")
    async def create_account(self, data: Union[CreateAccountInput, dict[str, Any]]) -> int:
        data = parse_input(CreateAccountInput, data)
        if await self._find_by_email(data.email):
            raise ValidationFailed("There is a user with that email already")

        user = User(
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            role=data.role,
        )
        self.db.add(user)
        await self.db.commit()

        logger.info(f"Account #{user.id} created ({user.role.value})")
        return user.id

    @service_operation("Could not log user in")
    async def login(self, data: Union[LoginInput, dict[str, Any]]) -> str:
        """Check credentials and return a signed access token."""
        data = parse_input(LoginInput, data)
        user = await self._find_by_email(data.email)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(data.password, user.password_hash):
            logger.warning(f"Wrong password for user #{user.id}")
            raise ForbiddenError("Wrong password")

        return create_access_token({"id": user.id})

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Plain lookup used by the request context; no result wrapping."""
        return await self.db.get(User, user_id)

    @service_operation("Could not load user")
    async def find_by_id(self, user_id: int) -> User:
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @service_operation("Could not update profile")
    async def edit_profile(self, user: User, data: Union[EditProfileInput, dict[str, Any]]) -> None:
        data = parse_input(EditProfileInput, data)

        if data.email is not None:
            email = data.email.lower()
            existing = await self._find_by_email(email)
            if existing is not None and existing.id != user.id:
                raise ValidationFailed("There is a user with that email already")
            if email != user.email:
                user.email = email
                user.verified = False
        if data.password is not None:
            user.password_hash = hash_password(data.password)

        await self.db.commit()
        logger.info(f"Profile of user #{user.id} updated")
