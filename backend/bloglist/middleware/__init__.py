# Middleware package init
"""
Bloglist Backend - Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Login Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Login Rate Limit only inspects POST /api/login
    - Request ID is set before Logging reads it
    - Logging measures the full handler time, including exception handlers
"""
