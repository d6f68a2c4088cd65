"""Keyed record stores backing the configuration matrix repository.

The repository only needs get-by-id, first-by-family, list-all, upsert-by-id
and delete-by-id over whole matrices. Every read hands back an independent
copy, so callers doing read-modify-write never share state with the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetquote.db.models import ConfigurationMatrixModel
from fleetquote.models import ConfigurationMatrix


class MatrixStore(ABC):
    """Persistence contract consumed by ConfigurationMatrixRepository.

    Misses return None; they are never errors at this layer.
    """

    @abstractmethod
    async def get_by_id(self, matrix_id: str) -> ConfigurationMatrix | None:
        pass

    @abstractmethod
    async def get_first_by_family(self, family: str) -> ConfigurationMatrix | None:
        pass

    @abstractmethod
    async def list_all(self) -> list[ConfigurationMatrix]:
        pass

    @abstractmethod
    async def upsert(self, matrix: ConfigurationMatrix) -> None:
        pass

    @abstractmethod
    async def delete_by_id(self, matrix_id: str) -> None:
        pass


class InMemoryMatrixStore(MatrixStore):
    """Process-local store keyed by matrix id, insertion ordered."""

    def __init__(self, matrices: list[ConfigurationMatrix] | None = None):
        self._records: dict[str, ConfigurationMatrix] = {}
        for matrix in matrices or []:
            self._records[matrix.id] = matrix.model_copy(deep=True)

    async def get_by_id(self, matrix_id: str) -> ConfigurationMatrix | None:
        record = self._records.get(matrix_id)
        return record.model_copy(deep=True) if record else None

    async def get_first_by_family(self, family: str) -> ConfigurationMatrix | None:
        for record in self._records.values():
            if record.base_model_family == family:
                return record.model_copy(deep=True)
        return None

    async def list_all(self) -> list[ConfigurationMatrix]:
        return [record.model_copy(deep=True) for record in self._records.values()]

    async def upsert(self, matrix: ConfigurationMatrix) -> None:
        self._records[matrix.id] = matrix.model_copy(deep=True)

    async def delete_by_id(self, matrix_id: str) -> None:
        self._records.pop(matrix_id, None)


class SqlMatrixStore(MatrixStore):
    """Async SQLAlchemy store: one row per matrix, variants as JSON.

    Writes are flushed, not committed; the owning ``get_session()`` block
    commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, matrix_id: str) -> ConfigurationMatrix | None:
        stmt = select(ConfigurationMatrixModel).where(ConfigurationMatrixModel.id == matrix_id)
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return _to_matrix(row) if row is not None else None

    async def get_first_by_family(self, family: str) -> ConfigurationMatrix | None:
        stmt = (
            select(ConfigurationMatrixModel)
            .where(ConfigurationMatrixModel.base_model_family == family)
            .order_by(ConfigurationMatrixModel.created_at, ConfigurationMatrixModel.id)
            .limit(1)
        )
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return _to_matrix(row) if row is not None else None

    async def list_all(self) -> list[ConfigurationMatrix]:
        stmt = select(ConfigurationMatrixModel).order_by(
            ConfigurationMatrixModel.created_at, ConfigurationMatrixModel.id
        )
        rows = (await self.session.execute(stmt)).scalars().all()
        return [_to_matrix(row) for row in rows]

    async def upsert(self, matrix: ConfigurationMatrix) -> None:
        await self.session.merge(_to_model(matrix))
        await self.session.flush()

    async def delete_by_id(self, matrix_id: str) -> None:
        await self.session.execute(
            delete(ConfigurationMatrixModel).where(ConfigurationMatrixModel.id == matrix_id)
        )
        await self.session.flush()


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_model(matrix: ConfigurationMatrix) -> ConfigurationMatrixModel:
    return ConfigurationMatrixModel(
        id=matrix.id,
        base_model_family=matrix.base_model_family,
        variants=[variant.model_dump(mode="json") for variant in matrix.variants],
        created_at=matrix.created_at,
        updated_at=matrix.updated_at,
    )


def _to_matrix(model: ConfigurationMatrixModel) -> ConfigurationMatrix:
    return ConfigurationMatrix.model_validate(
        {
            "id": model.id,
            "base_model_family": model.base_model_family,
            "variants": model.variants or [],
            "created_at": _as_utc(model.created_at),
            "updated_at": _as_utc(model.updated_at),
        }
    )
