"""FastAPI router for image upload and retrieval endpoints.

Endpoints:
    POST    /upload            - Authenticated image upload, returns public URL
    GET     /uploads/{path}    - Serve a stored file
    OPTIONS /upload            - Cross-origin preflight
    OPTIONS /uploads/{path}    - Cross-origin preflight
"""
import asyncio
import logging
import secrets
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, JSONResponse, Response
from starlette.datastructures import UploadFile

from imagedrop.config import AppConfig
from imagedrop.errors import (
    AuthError,
    ImagedropError,
    InternalError,
    NotFound,
    PayloadTooLarge,
    UnsupportedType,
)

from .schemas import StoredFile, UploadResponse
from .service import FileStorageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])

UPLOAD_METHODS = "POST, OPTIONS"
RETRIEVAL_METHODS = "GET, OPTIONS"


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_storage(request: Request) -> FileStorageService:
    return request.app.state.storage


def cors_headers(request: Request) -> Dict[str, str]:
    """Permissive cross-origin headers for the route the request targets.

    Empty when cross-origin headers are disabled in the server settings or
    the path belongs to neither endpoint.
    """
    config: AppConfig = request.app.state.config
    if not config.server.cors_enabled:
        return {}
    path = request.url.path
    if path == "/upload":
        methods = UPLOAD_METHODS
    elif path.startswith("/uploads"):
        methods = RETRIEVAL_METHODS
    else:
        return {}
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


def _check_authorization(header: Optional[str], api_key: str) -> None:
    expected = f"Bearer {api_key}"
    if not header or not secrets.compare_digest(header.encode("utf-8"), expected.encode("utf-8")):
        logger.info("Unauthorized upload attempt")
        raise AuthError()


def _declared_length(header: Optional[str]) -> Optional[int]:
    if header is None:
        return None
    try:
        return int(header)
    except ValueError:
        return None


async def _store_upload(
    request: Request,
    config: AppConfig,
    storage: FileStorageService,
) -> StoredFile:
    """Authenticate, validate and persist the ``image`` form field.

    Checks run in order and the first failure wins: credential, declared
    size, then presence and MIME type of the field.

    Raises:
        AuthError: Missing or wrong bearer token
        PayloadTooLarge: Declared or actual size above the limit
        UnsupportedType: No ``image`` file part, or a disallowed MIME type
        InternalError: Anything else (I/O, malformed multipart body)
    """
    limit = config.storage.max_file_size_bytes
    try:
        _check_authorization(request.headers.get("authorization"), config.auth.api_key)

        declared = _declared_length(request.headers.get("content-length"))
        if declared is not None and declared > limit:
            logger.info("File too large (declared %d bytes)", declared)
            raise PayloadTooLarge()

        async with request.form() as form:
            image = form.get("image")
            if not isinstance(image, UploadFile) or image.content_type not in config.storage.allowed_mime_types:
                logger.info(
                    "Unsupported file type: %s",
                    image.content_type if isinstance(image, UploadFile) else None,
                )
                raise UnsupportedType()

            content = await image.read()
            if len(content) > limit:
                logger.info("File too large (%d bytes)", len(content))
                raise PayloadTooLarge()

            return await storage.save_file(
                filename=image.filename or "",
                content=content,
                mime_type=image.content_type,
            )
    except ImagedropError:
        raise
    except Exception as exc:
        logger.exception("File upload failed")
        raise InternalError() from exc


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    request: Request,
    config: AppConfig = Depends(get_app_config),
    storage: FileStorageService = Depends(get_storage),
):
    """Upload an image and get back its public URL.

    Every call first starts a retention sweep in the background; the upload
    does not wait for it.

    Returns:
        UploadResponse with the URL the file can be fetched from
    """
    storage.sweeper.spawn()

    stored = await _store_upload(request, config, storage)
    logger.info("File uploaded successfully: %s", stored.stored_filename)

    body = UploadResponse(url=f"{config.public_hostname}/uploads/{stored.stored_filename}")
    return JSONResponse(content=body.model_dump(), headers=cors_headers(request))


@router.get("/uploads/{file_path:path}")
async def get_upload(
    request: Request,
    file_path: str,
    storage: FileStorageService = Depends(get_storage),
):
    """Serve a stored file.

    Raises:
        NotFound: If the file does not exist inside the upload directory
    """
    path = storage.resolve(file_path)
    if path is None:
        raise NotFound()
    # A sweep may delete the file between resolve() and the response.
    try:
        stat_result = await asyncio.to_thread(path.stat)
    except FileNotFoundError:
        raise NotFound()
    return FileResponse(path=path, stat_result=stat_result, headers=cors_headers(request))


@router.options("/upload")
@router.options("/uploads/{file_path:path}")
async def preflight(request: Request):
    """Answer a browser cross-origin preflight."""
    return Response(status_code=204, headers=cors_headers(request))
