"""
Guestbook API — Application Package Initializer
================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn app.main:app`), Alembic, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Business Rules)       │  ← validation, trimming, errors
    ├─────────────────────────────────────┤
    │   Stores (ORM or literal SQL)       │  ← MessageStore implementations
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
