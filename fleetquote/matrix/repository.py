"""Configuration matrix repository facade.

Wraps a MatrixStore with the catalog operations the quote builder and the
admin tooling need. There is no locking or versioning: update_option reads
the whole matrix, patches one option and writes the whole matrix back, so
two concurrent patches against the same matrix are last-write-wins.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fleetquote.matrix.errors import (
    MatrixNotFoundError,
    MatrixPersistenceError,
    OptionNotFoundError,
    SpecGroupNotFoundError,
    VariantNotFoundError,
)
from fleetquote.matrix.store import MatrixStore
from fleetquote.models import ConfigurationMatrix, ConfigurationVariant, OptionPatch

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ConfigurationMatrixRepository:
    """Catalog access over a keyed matrix store."""

    def __init__(self, store: MatrixStore):
        """Initialize repository.

        Args:
            store: Record store holding whole configuration matrices
        """
        self.store = store

    async def get_matrix(self, matrix_id: str) -> ConfigurationMatrix | None:
        try:
            return await self.store.get_by_id(matrix_id)
        except Exception as e:
            logger.error(f"Error fetching matrix {matrix_id}: {e}", exc_info=True)
            raise MatrixPersistenceError("Failed to load configuration matrices") from e

    async def get_matrix_by_model_family(self, family: str) -> ConfigurationMatrix | None:
        """First matrix for a base model family (e.g. "EG16"), or None."""
        try:
            return await self.store.get_first_by_family(family)
        except Exception as e:
            logger.error(f"Error fetching matrix for family {family}: {e}", exc_info=True)
            raise MatrixPersistenceError("Failed to load configuration matrices") from e

    async def get_variant_by_code(self, variant_code: str) -> ConfigurationVariant | None:
        """Search every matrix for a variant code; first match wins.

        Deliberately a full linear scan: catalogs hold dozens of matrices
        with a handful of variants each.
        """
        found = await self.get_variant_configuration(variant_code)
        return found[1] if found else None

    async def get_variant_configuration(
        self, variant_code: str
    ) -> tuple[ConfigurationMatrix, ConfigurationVariant] | None:
        """Like get_variant_by_code but also returns the owning matrix."""
        for matrix in await self.list():
            for variant in matrix.variants:
                if variant.variant_code == variant_code:
                    return matrix, variant
        return None

    async def save_matrix(self, matrix: ConfigurationMatrix) -> str:
        """Upsert a whole matrix by id.

        Timestamps on the argument are ignored: an existing record keeps its
        original created_at and gets a fresh updated_at, a new record gets
        both set to now.

        Returns:
            The matrix id

        Raises:
            MatrixPersistenceError: If the store fails
        """
        try:
            now = _now()
            existing = await self.store.get_by_id(matrix.id)
            to_save = matrix.model_copy(
                update={
                    "created_at": existing.created_at if existing and existing.created_at else now,
                    "updated_at": now,
                }
            )
            await self.store.upsert(to_save)
        except Exception as e:
            logger.error(f"Error saving configuration matrix {matrix.id}: {e}", exc_info=True)
            raise MatrixPersistenceError("Failed to save configuration matrix") from e

        logger.info(
            f"Saved configuration matrix {to_save.id} "
            f"({to_save.base_model_family}, {len(to_save.variants)} variants)"
        )
        return to_save.id

    async def update_option(
        self,
        matrix_id: str,
        variant_code: str,
        spec_code: str,
        option_code: str,
        patch: OptionPatch,
    ) -> ConfigurationMatrix:
        """Patch a single option and persist the entire matrix.

        Only the fields explicitly set on ``patch`` are merged.

        Returns:
            The matrix as written

        Raises:
            MatrixNotFoundError: No matrix with that id
            VariantNotFoundError: Variant not in the matrix
            SpecGroupNotFoundError: Spec group not in the variant
            OptionNotFoundError: Option not in the spec group
            MatrixPersistenceError: If the store fails
        """
        try:
            matrix = await self.store.get_by_id(matrix_id)
        except Exception as e:
            logger.error(f"Error loading matrix {matrix_id}: {e}", exc_info=True)
            raise MatrixPersistenceError("Failed to load configuration matrices") from e

        if matrix is None:
            raise MatrixNotFoundError(matrix_id)

        variant = matrix.find_variant(variant_code)
        if variant is None:
            raise VariantNotFoundError(variant_code, matrix_id)

        group = variant.find_group(spec_code)
        if group is None:
            raise SpecGroupNotFoundError(spec_code, variant_code)

        option = group.find_option(option_code)
        if option is None:
            raise OptionNotFoundError(option_code, spec_code)

        for field_name, value in patch.model_dump(exclude_unset=True).items():
            setattr(option, field_name, value)
        matrix.updated_at = _now()

        try:
            await self.store.upsert(matrix)
        except Exception as e:
            logger.error(f"Error updating option {option_code} in {matrix_id}: {e}", exc_info=True)
            raise MatrixPersistenceError("Failed to save configuration matrix") from e

        logger.info(
            f"Updated option {option_code} ({spec_code}) on {variant_code} in matrix {matrix_id}"
        )
        return matrix

    async def list(self) -> list[ConfigurationMatrix]:
        """All stored matrices."""
        try:
            return await self.store.list_all()
        except Exception as e:
            logger.error(f"Error listing configuration matrices: {e}", exc_info=True)
            raise MatrixPersistenceError("Failed to load configuration matrices") from e

    async def delete(self, matrix_id: str) -> None:
        """Remove a matrix; deleting a missing id is not an error."""
        try:
            await self.store.delete_by_id(matrix_id)
        except Exception as e:
            logger.error(f"Error deleting matrix {matrix_id}: {e}", exc_info=True)
            raise MatrixPersistenceError("Failed to delete configuration matrix") from e

        logger.info(f"Deleted configuration matrix {matrix_id}")
