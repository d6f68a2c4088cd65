"""Shared dependencies for FleetQuote web routes.

Usage:
    from fastapi import Depends
    from fleetquote.web.dependencies import get_matrix_repository

    @router.get("/configuration-matrices")
    async def list_matrices(repo=Depends(get_matrix_repository)):
        return await repo.list()
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fleetquote.db.connection import get_session
from fleetquote.matrix.repository import ConfigurationMatrixRepository
from fleetquote.matrix.store import SqlMatrixStore


async def get_matrix_repository() -> AsyncGenerator[ConfigurationMatrixRepository, None]:
    """Repository bound to a request-scoped session; committed when the request ends."""
    async with get_session() as session:
        yield ConfigurationMatrixRepository(SqlMatrixStore(session))
