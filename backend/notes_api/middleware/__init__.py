"""
Notes API — Middleware Package
================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first, so the access log line carries it
    2. Logging measures the full handler duration and final status
    3. CORS answers preflight requests
"""
