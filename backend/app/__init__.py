"""
Letter Writer Backend — Application Package
=============================================

Layers:

    ┌─────────────────────────────────────┐
    │  Routes + dependencies (HTTP)       │  auth, letters, drive, health
    ├─────────────────────────────────────┤
    │  Services                           │  sessions, Google OAuth, letters,
    │                                     │  credentials, Docs/Drive
    ├─────────────────────────────────────┤
    │  Models & Schemas                   │  SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Database                           │  async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
