"""
Notes API — API Routes Package
================================

Route Inventory:
    - health.py:  GET    /health
    - notes.py:   GET    /notes
                  POST   /notes
                  PUT    /notes/{id}
                  DELETE /notes/{id}

Routes handle HTTP concerns only (body decoding, path parsing, status codes)
and delegate statements to NoteService.
"""
