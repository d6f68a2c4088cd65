"""Configuration matrix engine: import, export, storage and pricing."""

from fleetquote.matrix.engine import (
    calculate_configuration_cost,
    generate_configuration_summary,
    get_available_options,
    get_specifications_by_category,
    get_standard_options,
    initialize_selections,
    validate_configuration,
)
from fleetquote.matrix.errors import (
    MatrixLookupError,
    MatrixNotFoundError,
    MatrixPersistenceError,
    OptionNotFoundError,
    SpecGroupNotFoundError,
    VariantNotFoundError,
)
from fleetquote.matrix.exporter import export_matrix_rows, export_matrix_to_excel
from fleetquote.matrix.importer import import_matrix_from_excel, import_matrix_from_rows
from fleetquote.matrix.repository import ConfigurationMatrixRepository
from fleetquote.matrix.store import InMemoryMatrixStore, MatrixStore, SqlMatrixStore

__all__ = [
    "ConfigurationMatrixRepository",
    "InMemoryMatrixStore",
    "MatrixStore",
    "SqlMatrixStore",
    "MatrixLookupError",
    "MatrixNotFoundError",
    "MatrixPersistenceError",
    "OptionNotFoundError",
    "SpecGroupNotFoundError",
    "VariantNotFoundError",
    "calculate_configuration_cost",
    "export_matrix_rows",
    "export_matrix_to_excel",
    "generate_configuration_summary",
    "get_available_options",
    "get_specifications_by_category",
    "get_standard_options",
    "import_matrix_from_excel",
    "import_matrix_from_rows",
    "initialize_selections",
    "validate_configuration",
]
