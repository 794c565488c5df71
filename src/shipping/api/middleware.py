"""Request correlation: every response carries the X-Request-ID it was handled under."""

from uuid import uuid4

from fastapi import Request

from shipping.utils.logging import add_context, clear_context

REQUEST_ID_HEADER = "X-Request-ID"


async def request_id_middleware(request: Request, call_next):
    """Bind the caller's request id (or a fresh one) into the log context and echo it back."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
    clear_context()
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
