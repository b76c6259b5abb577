"""FastAPI exception handlers for Imagedrop errors."""
import logging

from fastapi import Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from imagedrop.errors import ImagedropError
from imagedrop.files.router import cors_headers

logger = logging.getLogger(__name__)


async def imagedrop_exception_handler(request: Request, exc: ImagedropError) -> Response:
    """Turn an ImagedropError into a plain-text response with its status."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s", type(exc).__name__, request.method, request.url.path)
    return PlainTextResponse(
        content=exc.message,
        status_code=exc.status_code,
        headers=cors_headers(request),
    )


async def fallback_http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Unknown routes and wrong methods both end as an empty 404."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return await http_exception_handler(request, exc)
