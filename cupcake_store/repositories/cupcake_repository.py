"""
Cupcake Store — SQLAlchemy Cupcake Repository
==============================================

What:  The persistence gateway for cupcakes over an AsyncSession.
How:   One repository per request session. Writes are flushed, then made
       durable by commit(), which CupcakeService calls before it returns;
       the session owner (get_db_session / Database.session) rolls back
       whatever is left when the request fails.
Who:   Constructed per request by the route dependency and handed to
       CupcakeService.

Query plans:
    find_by_id  SELECT ... WHERE id = :id           (primary key)
    find_all    SELECT ... ORDER BY id              (insertion order)
    exists      SELECT count(*) ... WHERE id = :id
    delete      DELETE ... WHERE id = :id           (rowcount 0 → not found)
"""

import logging
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cupcake_store.exceptions import DatabaseError, RecordNotFoundError
from cupcake_store.models.cupcake import Cupcake, utcnow
from cupcake_store.repositories.base import CupcakeRepositoryBase

logger = logging.getLogger(__name__)


class CupcakeRepository(CupcakeRepositoryBase):
    """CRUD primitives for the `cupcakes` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, cupcake: Cupcake) -> Cupcake:
        try:
            self.session.add(cupcake)
            await self.session.flush()  # assigns the autoincrement id
        except SQLAlchemyError as e:
            logger.error("Database error creating cupcake: %s", e, exc_info=True)
            raise DatabaseError(
                message="Could not create the cupcake. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        logger.info("Cupcake %s created", cupcake.id)
        return cupcake

    async def find_by_id(self, cupcake_id: int) -> Cupcake:
        try:
            cupcake = await self.session.get(Cupcake, cupcake_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching cupcake %s: %s", cupcake_id, e)
            raise DatabaseError(
                message="Could not retrieve the cupcake. Please try again.",
                context={"cupcake_id": cupcake_id},
            ) from e

        if cupcake is None:
            raise RecordNotFoundError(resource_id=cupcake_id)
        return cupcake

    async def find_all(self) -> List[Cupcake]:
        try:
            result = await self.session.execute(select(Cupcake).order_by(Cupcake.id))
        except SQLAlchemyError as e:
            logger.error("Database error listing cupcakes: %s", e, exc_info=True)
            raise DatabaseError(
                message="Error fetching cupcakes",
                context={"error_type": type(e).__name__},
            ) from e
        return list(result.scalars().all())

    async def update(self, cupcake: Cupcake) -> Cupcake:
        """
        Write every column of `cupcake` back to its row.

        merge() copies the full state of the given instance onto the
        persistent one (a no-op copy when it is already attached to this
        session); updated_at is bumped even when no other field changed.
        """
        try:
            merged = await self.session.merge(cupcake)
            merged.updated_at = utcnow()
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating cupcake %s: %s", cupcake.id, e, exc_info=True)
            raise DatabaseError(
                message="Could not update the cupcake. Please try again.",
                context={"cupcake_id": cupcake.id},
            ) from e
        logger.info("Cupcake %s updated", merged.id)
        return merged

    async def delete(self, cupcake_id: int) -> None:
        try:
            result = await self.session.execute(
                delete(Cupcake).where(Cupcake.id == cupcake_id)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting cupcake %s: %s", cupcake_id, e, exc_info=True)
            raise DatabaseError(
                message="Could not delete the cupcake. Please try again.",
                context={"cupcake_id": cupcake_id},
            ) from e

        if result.rowcount == 0:
            raise RecordNotFoundError(resource_id=cupcake_id)
        logger.info("Cupcake %s deleted", cupcake_id)

    async def exists(self, cupcake_id: int) -> bool:
        try:
            result = await self.session.execute(
                select(func.count()).select_from(Cupcake).where(Cupcake.id == cupcake_id)
            )
        except SQLAlchemyError as e:
            logger.error("Database error checking cupcake %s: %s", cupcake_id, e)
            raise DatabaseError(context={"cupcake_id": cupcake_id}) from e
        return (result.scalar() or 0) > 0

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error("Database error committing cupcake changes: %s", e, exc_info=True)
            raise DatabaseError(
                message="Could not save the cupcake. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
