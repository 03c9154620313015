"""
Cupcake Store — Application Package Initializer
================================================

What: Marks the `cupcake_store` directory as a Python package.
Who:  Used by uvicorn (`cupcake_store.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Orchestration + Rules)  │  ← validation, merge, sequencing
    ├─────────────────────────────────────┤
    │     Repositories (Persistence)      │  ← CRUD primitives over a session
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Engine/Sessions)   │  ← explicitly constructed, injected
    └─────────────────────────────────────┘

    Each layer only talks to the one below it. The database handle is an
    object created at startup and passed down, never a module global.
"""

__version__ = "1.0.0"
