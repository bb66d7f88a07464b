import time
import logging
import uuid
from typing import Callable
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from ..i18n.messages import get_catalog

logger = logging.getLogger(__name__)

LOCALE_COOKIE = "locale"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging with a short request id and timing headers"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        logger.info(
            f"Request {request_id}: {request.method} {request.url.path} "
            f"locale={request.cookies.get(LOCALE_COOKIE, '-')}"
        )
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(f"Error {request_id}: {e} after {duration:.3f}s", exc_info=True)
            raise

        duration = time.time() - start_time
        logger.info(f"Response {request_id}: {response.status_code} in {duration:.3f}s")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


class LocaleMiddleware(BaseHTTPMiddleware):
    """
    Resolve the locale cookie against the loaded message catalogs

    Unsupported or missing cookies resolve to the default locale. The resolved
    code is kept on request.state and echoed as Content-Language.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        locale = get_catalog().resolve_locale(request.cookies.get(LOCALE_COOKIE))
        request.state.locale = locale

        response = await call_next(request)
        response.headers["Content-Language"] = locale
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response


def setup_middleware(app: FastAPI) -> None:
    """Setup all middleware for the application"""
    from ..config import settings

    # Scenario batches for the full catalog are large JSON bodies
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(LocaleMiddleware)
    app.add_middleware(LoggingMiddleware)

    # Added last so it wraps everything, including error responses
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time", "Content-Language"]
    )

    logger.info("Middleware setup complete")
