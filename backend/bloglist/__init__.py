"""
Bloglist Backend - Application Package
======================================

What: Blog-post catalog API with account registration, token login and
      owner-only deletion of posts.
Who:  Imported by uvicorn (`bloglist.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Auth (tokens, identity, owners)   │  ← who is calling, may they mutate
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, store access, stats
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
