"""
GraphQL request context: the request-scoped session and the caller.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from eats.database import get_db
from eats.models import User
from eats.services.users import UserService

logger = logging.getLogger(__name__)


class Context(BaseContext):
    def __init__(self, db: AsyncSession, user: Optional[User] = None):
        super().__init__()
        self.db = db
        self.user = user


async def load_user(db: AsyncSession, payload: Optional[dict]) -> Optional[User]:
    """Resolve the decoded token payload to a user (None when anonymous)."""
    if not payload:
        return None
    user_id = payload.get("id")
    if not isinstance(user_id, int):
        logger.debug(f"Token payload without a usable id: {payload}")
        return None
    return await UserService(db).get_by_id(user_id)


async def get_context(request: Request, db: AsyncSession = Depends(get_db)) -> Context:
    payload = getattr(request.state, "token_payload", None)
    return Context(db=db, user=await load_user(db, payload))
