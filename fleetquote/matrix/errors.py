"""Errors raised by the configuration matrix repository."""

from __future__ import annotations


class MatrixLookupError(LookupError):
    """A matrix, variant, spec group or option could not be found."""


class MatrixNotFoundError(MatrixLookupError):
    def __init__(self, matrix_id: str):
        self.matrix_id = matrix_id
        super().__init__(f"Matrix {matrix_id} not found")


class VariantNotFoundError(MatrixLookupError):
    def __init__(self, variant_code: str, matrix_id: str):
        self.variant_code = variant_code
        self.matrix_id = matrix_id
        super().__init__(f"Variant {variant_code} not found in matrix {matrix_id}")


class SpecGroupNotFoundError(MatrixLookupError):
    def __init__(self, spec_code: str, variant_code: str):
        self.spec_code = spec_code
        self.variant_code = variant_code
        super().__init__(f"Spec group {spec_code} not found in variant {variant_code}")


class OptionNotFoundError(MatrixLookupError):
    def __init__(self, option_code: str, spec_code: str):
        self.option_code = option_code
        self.spec_code = spec_code
        super().__init__(f"Option {option_code} not found in spec group {spec_code}")


class MatrixPersistenceError(RuntimeError):
    """Underlying store failure; the message never carries store internals."""
