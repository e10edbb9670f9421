"""
Service Boundary Helpers

Every public service method is wrapped by ``service_operation``: whatever
happens inside, the caller receives a ``ServiceResult`` and the session is
left clean (rolled back on failure).
"""

import functools
import logging
from typing import Any, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eats.core.errors import ErrorKind, ServiceError
from eats.schemas import ServiceResult

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_input(schema: Type[SchemaT], data: Union[SchemaT, dict[str, Any]]) -> SchemaT:
    """Validate raw input (or pass through an already validated schema)."""
    if isinstance(data, schema):
        return data
    return schema.model_validate(data)


def format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "input"
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


class BaseService:
    """Holds the request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _discard_changes(self) -> None:
        # Rollback expires every loaded instance; only roll back pending changes
        if self.db.new or self.db.dirty or self.db.deleted:
            await self.db.rollback()


def service_operation(failure_message: str):
    """
    Convert exceptions raised by a service coroutine into a failed result.

    Args:
        failure_message: Message reported for persistence / unexpected errors

    The wrapped coroutine returns the success payload (or a ``ServiceResult``
    it built itself); anything it raises becomes ``ServiceResult.failure``.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self: BaseService, *args, **kwargs) -> ServiceResult:
            try:
                value = await func(self, *args, **kwargs)
            except ServiceError as e:
                await self._discard_changes()
                logger.info(f"{func.__name__} refused ({e.kind.value}): {e.message}")
                return ServiceResult.failure(e.kind, e.message)
            except ValidationError as e:
                await self._discard_changes()
                message = format_validation_error(e)
                logger.info(f"{func.__name__} rejected invalid input: {message}")
                return ServiceResult.failure(ErrorKind.VALIDATION, message)
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.exception(f"Database error in {func.__name__}: {e}")
                return ServiceResult.failure(ErrorKind.PERSISTENCE, failure_message)
            except Exception as e:
                await self.db.rollback()
                logger.exception(f"Unexpected error in {func.__name__}: {e}")
                return ServiceResult.failure(ErrorKind.INTERNAL, failure_message)

            if isinstance(value, ServiceResult):
                return value
            return ServiceResult.success(value)

        return wrapper

    return decorator
