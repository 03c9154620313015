"""
Cupcake Store — Cupcake Service (Orchestration)
================================================

What:  Sequences validation and persistence for each public cupcake operation.
How:   Receives a repository through its constructor; validation/merge rules
       come from services.validation. Holds no other state.
Who:   Called by the cupcake route handlers; calls the repository.

Flows:
    create  validate → build (trimmed, available) → repository.create → commit
    get     repository.find_by_id (RecordNotFoundError passes through)
    list    repository.find_all
    update  find_by_id → apply_update → repository.update (full replace) → commit
    delete  repository.exists → CupcakeNotFoundError | repository.delete → commit

Writes are committed before the operation returns, so a response is only
built for data that is already durable.

Error Handling:
    No retries and no translation except on delete: validation errors and
    repository errors reach the caller unchanged.
"""

import logging
from typing import List

from cupcake_store.exceptions import CupcakeNotFoundError
from cupcake_store.models.cupcake import Cupcake
from cupcake_store.repositories.base import CupcakeRepositoryBase
from cupcake_store.schemas.cupcake import CupcakeCreate, CupcakeUpdate
from cupcake_store.services.validation import apply_update, build_cupcake

logger = logging.getLogger(__name__)


class CupcakeService:
    """Business operations on cupcakes."""

    def __init__(self, repository: CupcakeRepositoryBase):
        self.repository = repository

    async def create_cupcake(self, request: CupcakeCreate) -> Cupcake:
        """
        Validate a create request and persist the new cupcake.

        Raises:
            NameRequiredError, NameTooShortError, FlavorRequiredError,
            InvalidPriceError: request violates a field invariant
            DatabaseError: the insert or its commit failed
        """
        cupcake = await self.repository.create(build_cupcake(request))
        await self.repository.commit()
        return cupcake

    async def get_cupcake(self, cupcake_id: int) -> Cupcake:
        return await self.repository.find_by_id(cupcake_id)

    async def list_cupcakes(self) -> List[Cupcake]:
        return await self.repository.find_all()

    async def update_cupcake(self, cupcake_id: int, request: CupcakeUpdate) -> Cupcake:
        """
        Merge a partial update onto the stored cupcake and write it back.

        A rejected update raises before anything is written; the fetched
        entity is left untouched and callers should re-fetch rather than
        assume any field was applied.

        Raises:
            RecordNotFoundError: no cupcake with this id
            NameTooShortError, InvalidPriceError: invalid present field
            DatabaseError: the write or its commit failed
        """
        cupcake = await self.repository.find_by_id(cupcake_id)
        apply_update(cupcake, request)
        updated = await self.repository.update(cupcake)
        await self.repository.commit()
        return updated

    async def delete_cupcake(self, cupcake_id: int) -> None:
        """
        Delete a cupcake by id.

        Raises:
            CupcakeNotFoundError: no cupcake with this id
            DatabaseError: the existence check or delete failed
        """
        if not await self.repository.exists(cupcake_id):
            logger.info("Delete requested for missing cupcake %s", cupcake_id)
            raise CupcakeNotFoundError(cupcake_id=cupcake_id)
        await self.repository.delete(cupcake_id)
        await self.repository.commit()
