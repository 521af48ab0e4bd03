# Middleware package init
"""
Letter Writer Backend — Middleware Package
============================================

What:  Cross-cutting request handling applied to every route.

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    - Request ID is set before the access log line needs it
    - Access log measures the duration of everything beneath it
    - CORS answers preflight requests from the SPA origins
"""
