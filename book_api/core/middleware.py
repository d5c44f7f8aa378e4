"""
HTTP middleware of the application.
"""

import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from book_api.core.config import settings
from book_api.core.logger_config import log_performance, logger

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its status and duration.

    The request id is taken from the ``X-Request-ID`` header or generated, stored
    on ``request.state`` and echoed back in the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception:
            process_time = time.time() - start_time
            logger.bind(**context, process_time=process_time).exception(
                f"[{request_id}] Request failed: {request.method} {request.url.path}"
            )
            raise

        process_time = time.time() - start_time
        message = (
            f"[{request_id}] {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {process_time:.4f}s"
        )
        bound = logger.bind(**context, status_code=response.status_code, process_time=process_time)
        if response.status_code >= 500:
            bound.error(message)
        elif response.status_code >= 400:
            bound.warning(message)
        else:
            bound.info(message)

        log_performance(f"http_request_{request.method}", process_time, {"path": request.url.path})
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def setup_middleware(app: FastAPI) -> None:
    """
    Install middleware. Starlette runs the last added middleware first, so the
    resulting order is: HTTPS redirection, request logging, CORS.

    Args:
        app: FastAPI application
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    if settings.HTTPS_REDIRECT:
        app.add_middleware(HTTPSRedirectMiddleware)
