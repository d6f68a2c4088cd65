"""Configuration matrix admin and quoting routes.

Routes:
- GET    /configuration-matrices                              - List matrices
- GET    /configuration-matrices/family/{family}              - Matrix for a model family
- GET    /configuration-matrices/variants/{variant_code}      - Variant and owning matrix
- POST   /configuration-matrices/variants/{variant_code}/quote - Price a selection
- POST   /configuration-matrices/import                       - Upload vendor workbook
- GET    /configuration-matrices/{matrix_id}/export           - Download workbook
- PATCH  /configuration-matrices/{matrix_id}/variants/{v}/specs/{s}/options/{o}
                                                              - Patch one option
- DELETE /configuration-matrices/{matrix_id}                  - Delete matrix
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from fleetquote.matrix import engine
from fleetquote.matrix.errors import MatrixLookupError, MatrixPersistenceError
from fleetquote.matrix.exporter import export_matrix_to_excel, suggested_export_filename
from fleetquote.matrix.importer import import_matrix_from_excel
from fleetquote.matrix.repository import ConfigurationMatrixRepository
from fleetquote.models import ConfigurationMatrix, ConfigurationOption, OptionPatch
from fleetquote.web.dependencies import get_matrix_repository
from fleetquote.web.models import (
    MatrixImportResponse,
    MatrixSummary,
    QuoteRequest,
    QuoteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/configuration-matrices", tags=["configuration"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("", response_model=list[MatrixSummary])
async def list_matrices(
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    try:
        matrices = await repo.list()
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return [
        MatrixSummary(
            id=m.id,
            base_model_family=m.base_model_family,
            variant_codes=[v.variant_code for v in m.variants],
            created_at=m.created_at,
            updated_at=m.updated_at,
        )
        for m in matrices
    ]


@router.get("/family/{family}", response_model=ConfigurationMatrix)
async def get_matrix_for_family(
    family: str,
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    try:
        matrix = await repo.get_matrix_by_model_family(family)
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if matrix is None:
        raise HTTPException(status_code=404, detail=f"No configuration matrix for family {family}")
    return matrix


@router.get("/variants/{variant_code}")
async def get_variant(
    variant_code: str,
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    try:
        found = await repo.get_variant_configuration(variant_code)
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if found is None:
        raise HTTPException(status_code=404, detail=f"Variant {variant_code} not found")

    matrix, variant = found
    return {
        "matrix_id": matrix.id,
        "base_model_family": matrix.base_model_family,
        "variant": variant.model_dump(mode="json"),
        "standard_selections": engine.initialize_selections(variant),
    }


@router.post("/variants/{variant_code}/quote", response_model=QuoteResponse)
async def quote_variant(
    variant_code: str,
    request: QuoteRequest,
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    """Price a selection against a variant.

    With ``use_standard_defaults`` the caller's selections are layered over
    the variant's Standard options.
    """
    try:
        found = await repo.get_variant_configuration(variant_code)
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if found is None:
        raise HTTPException(status_code=404, detail=f"Variant {variant_code} not found")

    matrix, variant = found
    selections = engine.initialize_selections(variant) if request.use_standard_defaults else {}
    selections.update(request.selections)

    validation = engine.validate_configuration(variant, selections)
    return QuoteResponse(
        matrix_id=matrix.id,
        variant_code=variant.variant_code,
        selections=selections,
        options_cost=engine.calculate_configuration_cost(variant, selections),
        summary=engine.generate_configuration_summary(variant, selections),
        valid=validation.valid,
        missing_specs=validation.missing_specs,
    )


@router.post("/import")
async def import_matrix(
    file: UploadFile = File(...),
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    """Upload a vendor workbook, import it and save the resulting matrix.

    A failed import is returned as 422 with the full import result; nothing
    is saved.
    """
    content = await file.read()
    result = import_matrix_from_excel(content)

    if not result.success or result.matrix is None:
        logger.warning(f"Rejected configuration upload {file.filename}: {result.errors}")
        return JSONResponse(status_code=422, content=result.model_dump(mode="json"))

    try:
        matrix_id = await repo.save_matrix(result.matrix)
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return MatrixImportResponse(
        success=True,
        matrix_id=matrix_id,
        base_model_family=result.matrix.base_model_family,
        stats=result.stats,
        warnings=result.warnings,
    )


@router.get("/{matrix_id}/export")
async def export_matrix(
    matrix_id: str,
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    try:
        matrix = await repo.get_matrix(matrix_id)
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if matrix is None:
        raise HTTPException(status_code=404, detail=f"Matrix {matrix_id} not found")

    return StreamingResponse(
        export_matrix_to_excel(matrix),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename={suggested_export_filename(matrix)}"
        },
    )


@router.patch(
    "/{matrix_id}/variants/{variant_code}/specs/{spec_code}/options/{option_code}",
    response_model=ConfigurationOption,
)
async def patch_option(
    matrix_id: str,
    variant_code: str,
    spec_code: str,
    option_code: str,
    patch: OptionPatch,
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    try:
        matrix = await repo.update_option(matrix_id, variant_code, spec_code, option_code, patch)
    except MatrixLookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return matrix.find_variant(variant_code).find_group(spec_code).find_option(option_code)


@router.delete("/{matrix_id}")
async def delete_matrix(
    matrix_id: str,
    repo: ConfigurationMatrixRepository = Depends(get_matrix_repository),
):
    try:
        await repo.delete(matrix_id)
    except MatrixPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"success": True, "matrix_id": matrix_id}
