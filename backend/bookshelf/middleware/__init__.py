# Middleware package init
"""
Bookshelf Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject brute-force login/registration bursts before
       a session is opened or a bcrypt hash is computed
    2. Request ID: correlation ID for logs and error envelopes
    3. Logging: one access line per request, tagged with the request ID
"""
