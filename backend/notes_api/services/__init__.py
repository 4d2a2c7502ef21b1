"""
Notes API — Services Layer
============================

Service Inventory:
    - NoteService: list/create/update/delete, one statement each
"""
