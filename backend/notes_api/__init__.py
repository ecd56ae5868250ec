"""
Notes API: Application Package Initializer
============================================

What: Marks the `notes_api` directory as a Python package.
Who:  Imported by uvicorn (`notes_api.main:app`), pytest and the `python -m notes_api` runner.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │     Middleware (error trap, CORS,   │  ← cross-cutting request wrapping
    │     request id, access logging)     │
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (validation + flow)    │  ← NoteService
    ├─────────────────────────────────────┤
    │   Models (Note entity, ORM record)  │
    ├─────────────────────────────────────┤
    │  Storage (memory or SQL NoteStore)  │  ← injected at startup
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
