import pytest
from sqlalchemy import func, select

from eats.core.errors import ValidationFailed
from eats.models import Category
from eats.services.categories import CategoryRepository, slugify


def test_slugify_normalizes_case_and_spaces():
    assert slugify("Korean BBQ") == ("korean bbq", "korean-bbq")
    assert slugify("  korean   bbq ") == ("korean bbq", "korean-bbq")
    assert slugify("PIZZA") == ("pizza", "pizza")


async def test_get_or_create_is_idempotent_across_variants(db):
    repo = CategoryRepository(db)

    first = await repo.get_or_create("Korean BBQ")
    second = await repo.get_or_create("  korean bbq ")
    third = await repo.get_or_create("KOREAN  BBQ")
    await db.commit()

    assert first.id == second.id == third.id
    assert first.slug == "korean-bbq"
    assert first.name == "korean bbq"
    count = await db.execute(select(func.count(Category.id)))
    assert count.scalar() == 1


async def test_get_or_create_rejects_blank_name(db):
    with pytest.raises(ValidationFailed):
        await CategoryRepository(db).get_or_create("   ")


async def test_find_all_is_sorted_by_name(db):
    repo = CategoryRepository(db)
    await repo.get_or_create("Sushi")
    await repo.get_or_create("Burgers")
    await db.commit()

    names = [c.name for c in await repo.find_all()]
    assert names == ["burgers", "sushi"]


async def test_get_or_create_refuses_dialects_without_upsert(db, monkeypatch):
    monkeypatch.setattr("eats.services.categories.UPSERT_INSERTS", {})

    with pytest.raises(RuntimeError, match="not supported on sqlite"):
        await CategoryRepository(db).get_or_create("Sushi")
    assert await CategoryRepository(db).find_all() == []
