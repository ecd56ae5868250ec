# Services package init
"""
Notes API: Services Layer
===========================

What:  Business logic between the routes (HTTP) and the storage collaborator.

Service Inventory:
    - NoteService: validation, existence checks and store calls for notes

Why services are separate from routes:
    1. Testability: services run against an InMemoryNoteStore with no HTTP
    2. Single responsibility: routes handle HTTP, services handle rules
"""
