"""
LAMPY Backend - Middleware
==========================

Middleware Chain (outermost first, as registered in main.create_app):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Rate Limit rejects a flooding client before any other work.
    - Request ID sets the correlation id that logging and error bodies use.
    - Logging records status and duration once the response is built.
"""
