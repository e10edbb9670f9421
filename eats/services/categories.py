"""
Category Store

Maps free-text category names onto one canonical, slug-keyed row.
``get_or_create`` is atomic: it relies on the unique slug constraint instead
of a separate find-then-insert, so concurrent requests for the same name
converge on the same row. Only dialects with INSERT ... ON CONFLICT
(PostgreSQL, SQLite) are supported.
"""

import logging
import re
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from eats.core.errors import ValidationFailed
from eats.models import Category

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")

# Dialects with native INSERT ... ON CONFLICT DO NOTHING
UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def slugify(name: str) -> tuple[str, str]:
    """
    Normalize a category name and derive its slug.

    >>> slugify("  Korean  BBQ ")
    ('korean bbq', 'korean-bbq')
    """
    normalized = WHITESPACE.sub(" ", name.strip()).lower()
    return normalized, normalized.replace(" ", "-")


class CategoryRepository:
    """Data access for categories, bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_or_create(self, name: str) -> Category:
        """
        Return the category for ``name``, creating it when missing.

        Case and whitespace variants of one name resolve to the same row.
        """
        normalized, slug = slugify(name)
        if not slug:
            raise ValidationFailed("Category name must not be blank")

        dialect = self.db.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Category upsert is not supported on {dialect}")

        await self.db.execute(
            insert(Category)
            .values(name=normalized, slug=slug)
            .on_conflict_do_nothing(index_elements=["slug"])
        )

        category = await self.find_by_slug(slug)
        logger.debug(f"Resolved category '{name}' -> #{category.id} ({slug})")
        return category

    async def find_all(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def find_by_slug(self, slug: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()
