"""SqlMatrixStore against an in-memory aiosqlite database."""

from __future__ import annotations

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from fleetquote.db.models import Base, ConfigurationMatrixModel
from fleetquote.matrix.errors import OptionNotFoundError
from fleetquote.matrix.importer import import_matrix_from_rows
from fleetquote.matrix.repository import ConfigurationMatrixRepository
from fleetquote.matrix.store import SqlMatrixStore
from fleetquote.models import AvailabilityLevel, ConfigurationMatrix, OptionPatch


@pytest_asyncio.fixture()
async def db_session() -> AsyncSession:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture
def repo(db_session: AsyncSession) -> ConfigurationMatrixRepository:
    return ConfigurationMatrixRepository(SqlMatrixStore(db_session))


@pytest.mark.asyncio
async def test_save_and_reload_full_tree(repo, sample_matrix):
    await repo.save_matrix(sample_matrix)

    stored = await repo.get_matrix(sample_matrix.id)

    assert stored.base_model_family == "EG16"
    option = stored.find_variant("EG16P").find_group("5100").find_option("OPT-CAB-FULL")
    assert option.eur_cost_delta == Decimal("3200.50")
    assert option.availability is AvailabilityLevel.SPECIAL_ORDER
    assert stored.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_one_row_per_matrix(repo, db_session, eg16_rows):
    matrix = import_matrix_from_rows(eg16_rows).matrix

    await repo.save_matrix(matrix)
    await repo.save_matrix(matrix)

    rows = (await db_session.execute(select(ConfigurationMatrixModel))).scalars().all()
    assert len(rows) == 1
    assert rows[0].base_model_family == "EG16"
    assert [v["variant_code"] for v in rows[0].variants] == ["EG16P", "EG16"]


@pytest.mark.asyncio
async def test_resave_keeps_created_at(repo, sample_matrix):
    await repo.save_matrix(sample_matrix)
    first = await repo.get_matrix(sample_matrix.id)

    await repo.save_matrix(sample_matrix)
    second = await repo.get_matrix(sample_matrix.id)

    assert second.created_at == first.created_at
    assert second.updated_at >= first.updated_at


@pytest.mark.asyncio
async def test_family_lookup_and_listing(repo, sample_matrix):
    await repo.save_matrix(sample_matrix)
    await repo.save_matrix(ConfigurationMatrix(id="matrix-eg20", base_model_family="EG20"))

    assert (await repo.get_matrix_by_model_family("EG20")).id == "matrix-eg20"
    assert await repo.get_matrix_by_model_family("RX60") is None
    assert {m.id for m in await repo.list()} == {"matrix-eg16", "matrix-eg20"}

    matrix, variant = await repo.get_variant_configuration("EG16P")
    assert matrix.id == "matrix-eg16"
    assert variant.model_code == "EG16"


@pytest.mark.asyncio
async def test_update_option_persists(repo, sample_matrix):
    await repo.save_matrix(sample_matrix)

    await repo.update_option(
        sample_matrix.id,
        "EG16P",
        "1135",
        "OPT-BATT-LI",
        OptionPatch(eur_cost_delta=Decimal("1999.99"), description="Lithium-ion 48V"),
    )

    stored = await repo.get_matrix(sample_matrix.id)
    option = stored.find_variant("EG16P").find_group("1135").find_option("OPT-BATT-LI")
    assert option.eur_cost_delta == Decimal("1999.99")
    assert option.description == "Lithium-ion 48V"

    with pytest.raises(OptionNotFoundError):
        await repo.update_option(sample_matrix.id, "EG16P", "1135", "OPT-NOPE", OptionPatch())


@pytest.mark.asyncio
async def test_delete(repo, sample_matrix):
    await repo.save_matrix(sample_matrix)

    await repo.delete(sample_matrix.id)
    await repo.delete(sample_matrix.id)

    assert await repo.get_matrix(sample_matrix.id) is None
    assert await repo.list() == []
