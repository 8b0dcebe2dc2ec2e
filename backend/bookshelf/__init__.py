"""
Bookshelf Backend — Application Package Initializer
====================================================

What: Marks the `bookshelf` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn bookshelf.main:app`), Alembic and pytest.

Architecture Note:
    The backend is layered so each layer only talks to the one below it:

    ┌─────────────────────────────────────┐
    │        Routes (Route Table)         │  ← (method, path) → handler
    ├─────────────────────────────────────┤
    │     Controllers (Request Handlers)  │  ← ordered validation chains
    ├─────────────────────────────────────┤
    │      Services (Persistence Layer)   │  ← existence checks, CRUD
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Sessions)          │  ← Async SQLAlchemy
    └─────────────────────────────────────┘

    Failures at any layer are raised as typed exceptions (see exceptions.py)
    and answered by the single set of handlers registered in main.py.
"""

__version__ = "1.0.0"
