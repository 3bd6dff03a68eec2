"""
Request correlation ids.

Each request gets an id (the client's X-Request-ID if it sent one, else a
short random one). It is kept in a ContextVar so log lines and error bodies
can read it without threading the request through every call, and echoed back
in the X-Request-ID response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        # Client-supplied ids are echoed into logs; keep them short
        rid = rid[:64]

        # Not reset afterwards: the 500 handler runs outside this middleware
        # and still needs the id
        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
