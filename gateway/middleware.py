"""Request id propagation and per-request access logging for both services.

Every request gets an identifier: the incoming ``X-Request-ID`` header when
the client sends one, a fresh UUID4 otherwise. The id is stored on
``request.state``, in the ``REQUEST_ID_CTX`` context variable (so log
records emitted anywhere downstream can carry it) and echoed back on the
response.
"""

import contextvars
import logging
import uuid

from fastapi import FastAPI, Request

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")

REQUEST_HEADER = "X-Request-ID"
RESPONSE_HEADER = "X-Request-ID"


def install_request_middleware(app: FastAPI, logger: logging.Logger) -> None:
    """Register the request-id middleware on ``app``, logging through ``logger``."""

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = request.headers.get(REQUEST_HEADER) or str(uuid.uuid4())
        request.state.request_id = rid
        token = REQUEST_ID_CTX.set(rid)
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            # one structured line per request; never the header value itself
            logger.info(
                "request handled",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status": status_code,
                    "authorization_header": "Authorization" in request.headers,
                },
            )
            REQUEST_ID_CTX.reset(token)
        response.headers[RESPONSE_HEADER] = rid
        return response
