# Routes package init
"""
Notes API: Routes Package
===========================

Route Inventory:
    - notes.py:   /api/notes CRUD + /api/notes/search
    - health.py:  GET /health, GET /

Design Principle:
    Routes stay thin: read the request, call NoteService, shape the envelope.
"""
