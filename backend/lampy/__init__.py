"""
LAMPY Backend - Application Package
===================================

What:  Counselling-booking REST API (auth, profiles, verification uploads,
       counsellors and session booking).
Who:   Imported by uvicorn (`lampy.main:app`), Alembic and pytest.

Architecture Note:
    The backend keeps the usual layered split:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← queries, rules, uploads
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Configuration and the database handle are built by `create_app()` and
    reach handlers through FastAPI dependencies, never through module globals.
"""

__version__ = "1.0.0"
