"""
LAMPY Backend - API Routes
==========================

Route Inventory (paths below the configured API prefix, default /api/v1):
    - auth.py:         POST /auth/register, /auth/login
                       POST /auth/verify-photo, /auth/verify-age   (token)
    - users.py:        GET/PUT /users/profile, POST /users/location,
                       POST /users/preferences, POST /users/upload-photo (token)
    - counsellors.py:  GET /counsellors/, /counsellors/recommended,
                       /counsellors/{id}                              (token)
    - sessions.py:     POST /sessions/book, GET /sessions/, GET /sessions/{id},
                       PUT /sessions/{id}/cancel                      (token)
    - admin.py:        POST /admin/counsellors, GET /admin/verifications,
                       POST /admin/verifications/{id}/approve|reject  (no auth)

Unprefixed:
    - health.py:       GET /health
    - uploads.py:      GET /uploads/{path}

Routes stay thin: read the request, call one service method, return its
result. Errors are raised by services and rendered by the handlers in main.py.
"""
