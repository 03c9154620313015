"""
Cupcake Store — Abstract Cupcake Repository
============================================

What:  The persistence contract CupcakeService depends on.
How:   Concrete repositories inherit from CupcakeRepositoryBase and
       implement every method. CupcakeRepository is the SQLAlchemy one;
       tests substitute AsyncMock(spec=CupcakeRepositoryBase).

Contract:
    - create() assigns the identifier and timestamps
    - find_by_id() and delete() raise RecordNotFoundError for a missing row,
      distinguishable from every other failure
    - update() is a full-row overwrite of the stored entity, never a patch
    - find_all() returns entities in insertion (identifier) order
    - writes are staged until commit(); the service commits each
      successful write before the response is built
    - storage failures surface as DatabaseError
"""

from abc import ABC, abstractmethod
from typing import List

from cupcake_store.models.cupcake import Cupcake


class CupcakeRepositoryBase(ABC):
    """Capability set {create, find_by_id, find_all, update, delete, exists, commit}."""

    @abstractmethod
    async def create(self, cupcake: Cupcake) -> Cupcake:
        """Persist a new cupcake and return it with its identifier set."""
        ...

    @abstractmethod
    async def find_by_id(self, cupcake_id: int) -> Cupcake:
        """
        Fetch one cupcake.

        Raises:
            RecordNotFoundError: no row has this identifier
        """
        ...

    @abstractmethod
    async def find_all(self) -> List[Cupcake]:
        """Every stored cupcake, oldest first. Empty list when none exist."""
        ...

    @abstractmethod
    async def update(self, cupcake: Cupcake) -> Cupcake:
        """Overwrite the stored row with every field of `cupcake`."""
        ...

    @abstractmethod
    async def delete(self, cupcake_id: int) -> None:
        """
        Remove one cupcake.

        Raises:
            RecordNotFoundError: no row has this identifier
        """
        ...

    @abstractmethod
    async def exists(self, cupcake_id: int) -> bool:
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Make the staged writes durable. Raises DatabaseError on failure."""
        ...
