# Repositories package init
"""
Cupcake Store — Persistence Gateways
=====================================

What:  CRUD primitives over the relational store.

Inventory:
    - CupcakeRepositoryBase (abstract): contract the service depends on
    - CupcakeRepository: SQLAlchemy AsyncSession implementation
"""

from cupcake_store.repositories.base import CupcakeRepositoryBase
from cupcake_store.repositories.cupcake_repository import CupcakeRepository

__all__ = ["CupcakeRepositoryBase", "CupcakeRepository"]
