"""
DevCamper API - Application Package
===================================

What:  REST backend for bootcamp listings, their courses and user accounts.
Who:   Imported by uvicorn (`devcamper.main:app`), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services          Query pipeline  │  ← business rules, list queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic DTOs
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
