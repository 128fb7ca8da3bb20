"""
BizTime Backend — Application Package Initializer
==================================================

What: Marks the `biztime` directory as a Python package.
Why:  Enables module imports like `from biztime.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Queries, row-count branches
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Two resources live side by side: companies and invoices.
    Each has its own route module, service and schema module.
"""

__version__ = "1.0.0"
