"""Seeded in-memory database for the store-backed tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from .models import PEOPLE, PETS, TOYS, Base, Person, Pet, Toy

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncSession


def _seed(session: AsyncSession) -> None:
    session.add_all(
        Person(id=i, first_name=name, age=age, gender=gender, type=kind)
        for i, name, age, gender, kind in PEOPLE
    )
    session.add_all(Pet(id=i, name=name, pet_owner_id=owner) for i, name, owner in PETS)
    session.add_all(Toy(id=i, type=kind, pet_id=pet) for i, kind, pet in TOYS)


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(eng, expire_on_commit=False)
    async with factory() as sess:
        _seed(sess)
        await sess.commit()
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as sess:
        yield sess
