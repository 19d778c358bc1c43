# Middleware package init
"""
DocCRUD Backend - Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first so the logging middleware can read it
    - Logging captures response status and duration on the way back
"""
