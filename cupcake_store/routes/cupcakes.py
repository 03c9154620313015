"""
Cupcake Store — Cupcake Route Handlers
=======================================

What:  CRUD endpoints under /api/v1/cupcakes.
How:   Each handler gets a CupcakeService (built per request around the
       request's session) and, for item routes, an identifier already
       parsed by `parse_cupcake_id`. Errors are raised, and the global
       handlers in main.py turn them into `{"error": ...}` responses.
Who:   The static frontend (web/app.js) and any JSON client.

Routes:
    GET    /api/v1/cupcakes        200 list
    POST   /api/v1/cupcakes        201 created cupcake
    GET    /api/v1/cupcakes/{id}   200 cupcake | 404
    PUT    /api/v1/cupcakes/{id}   200 updated cupcake | 400
    DELETE /api/v1/cupcakes/{id}   204 | 400
"""

import logging
import re
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cupcake_store.database import get_db_session
from cupcake_store.exceptions import InvalidIDError
from cupcake_store.repositories.cupcake_repository import CupcakeRepository
from cupcake_store.schemas.cupcake import (
    CupcakeCreate,
    CupcakeResponse,
    CupcakeUpdate,
    ErrorResponse,
)
from cupcake_store.services.cupcake_service import CupcakeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/cupcakes", tags=["Cupcakes"])

# Unsigned decimal only: no sign, no whitespace, no underscores
_ID_PATTERN = re.compile(r"[0-9]+")
MAX_CUPCAKE_ID = 2**32 - 1


# ══════════════════════════════════════════════════════════════════════════
# Dependencies
# ══════════════════════════════════════════════════════════════════════════


def parse_cupcake_id(cupcake_id: str) -> int:
    """
    Path parameter parser for `{cupcake_id}`.

    Accepts 1..2^32-1 written as plain decimal digits; anything else
    (letters, "0", "-1", "+5", overflow) is rejected with 400 "Invalid ID"
    before the service is called.
    """
    if not _ID_PATTERN.fullmatch(cupcake_id):
        raise InvalidIDError(cupcake_id)
    value = int(cupcake_id)
    if value == 0 or value > MAX_CUPCAKE_ID:
        raise InvalidIDError(cupcake_id)
    return value


def get_cupcake_service(
    session: AsyncSession = Depends(get_db_session),
) -> CupcakeService:
    """Build the service around this request's session."""
    return CupcakeService(CupcakeRepository(session))


# ══════════════════════════════════════════════════════════════════════════
# Collection Routes
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "",
    response_model=List[CupcakeResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all cupcakes",
)
@router.get("/", response_model=List[CupcakeResponse], include_in_schema=False)
async def list_cupcakes(
    service: CupcakeService = Depends(get_cupcake_service),
) -> List[CupcakeResponse]:
    """Every cupcake in creation order. An empty store returns `[]`."""
    cupcakes = await service.list_cupcakes()
    return [CupcakeResponse.model_validate(cupcake) for cupcake in cupcakes]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CupcakeResponse,
    responses={400: {"description": "Invalid body or field", "model": ErrorResponse}},
    summary="Create a cupcake",
)
@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=CupcakeResponse,
    include_in_schema=False,
)
async def create_cupcake(
    payload: CupcakeCreate,
    service: CupcakeService = Depends(get_cupcake_service),
) -> CupcakeResponse:
    """
    Create a cupcake from `{name, flavor, price_cents}`.

    Name and flavor are stored trimmed; new cupcakes are available.
    """
    cupcake = await service.create_cupcake(payload)
    return CupcakeResponse.model_validate(cupcake)


# ══════════════════════════════════════════════════════════════════════════
# Item Routes
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "/{cupcake_id}",
    response_model=CupcakeResponse,
    responses={
        400: {"description": "Invalid ID", "model": ErrorResponse},
        404: {"description": "Cupcake not found", "model": ErrorResponse},
    },
    summary="Get a cupcake by ID",
)
async def get_cupcake(
    valid_id: int = Depends(parse_cupcake_id),
    service: CupcakeService = Depends(get_cupcake_service),
) -> CupcakeResponse:
    cupcake = await service.get_cupcake(valid_id)
    return CupcakeResponse.model_validate(cupcake)


@router.put(
    "/{cupcake_id}",
    response_model=CupcakeResponse,
    responses={
        400: {"description": "Invalid ID, body, field, or unknown cupcake", "model": ErrorResponse},
    },
    summary="Partially update a cupcake",
)
async def update_cupcake(
    payload: CupcakeUpdate,
    valid_id: int = Depends(parse_cupcake_id),
    service: CupcakeService = Depends(get_cupcake_service),
) -> CupcakeResponse:
    """
    Apply the fields present in the body; absent or null fields are kept.

    An unknown id answers 400 (not 404) with the store's "record not found".
    """
    cupcake = await service.update_cupcake(valid_id, payload)
    return CupcakeResponse.model_validate(cupcake)


@router.delete(
    "/{cupcake_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"description": "Invalid ID or cupcake not found", "model": ErrorResponse}},
    summary="Delete a cupcake",
)
async def delete_cupcake(
    valid_id: int = Depends(parse_cupcake_id),
    service: CupcakeService = Depends(get_cupcake_service),
) -> Response:
    await service.delete_cupcake(valid_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
