"""Imgur-compatible upload endpoint.

Mirrors ``POST https://api.imgur.com/3/upload`` closely enough for existing
clients. The album, title, description and disable_audio parameters are
accepted and ignored. Uploads always get a random filename.
"""

import base64
import binascii
import logging
import time
from pathlib import PurePosixPath
from urllib.parse import urlsplit

import httpx
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile
from starlette.requests import Request

from filedrop.auth import bearer_key
from filedrop.config import APP_VERSION, FETCH_TIMEOUT_S, Config, current
from filedrop.content import SNIFF_BYTES, resolve_type
from filedrop.errors import FailPostFile, UploadError, status_code
from filedrop.models import ImgurImageData, ImgurImageResult
from filedrop.remote import client_addr
from filedrop.routes.forms import read_form
from filedrop.storage import UploadRequest, UploadResult, authorize, iter_bytes, iter_upload_file, upload_file

router = APIRouter(prefix="/compat/imgur", tags=["compat"])
logger = logging.getLogger(__name__)


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=FETCH_TIMEOUT_S,
        follow_redirects=True,
        headers={"User-Agent": f"filedrop/{APP_VERSION}"},
    )


def _form_str(form: FormData, name: str) -> str:
    value = form.get(name)
    return value if isinstance(value, str) else ""


def _from_file(form: FormData, key: str, name: str) -> UploadRequest:
    upload = form.get("image")
    if not isinstance(upload, UploadFile):
        upload = form.get("video")
    if not isinstance(upload, UploadFile):
        raise FailPostFile()
    return UploadRequest(
        upload_key=key,
        chunks=iter_upload_file(upload),
        filename=name or upload.filename or "",
        random_filename=True,
        content_type=upload.content_type or "",
    )


def _from_base64(form: FormData, key: str, name: str) -> UploadRequest:
    encoded = "".join(_form_str(form, "image").split())
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FailPostFile("invalid base64 payload") from e
    content_type = resolve_type("", name, data[:SNIFF_BYTES])
    if not content_type:
        raise FailPostFile("no filename or mime type given")
    return UploadRequest(
        upload_key=key,
        chunks=iter_bytes(data),
        filename=name,
        random_filename=True,
        content_type=content_type,
    )


async def _from_url(form: FormData, key: str, name: str, cfg: Config) -> UploadResult:
    image_url = _form_str(form, "image").strip()
    try:
        parsed = urlsplit(image_url)
    except ValueError as e:
        raise FailPostFile("invalid image url") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FailPostFile("invalid image url")
    try:
        async with _http_client() as client:
            async with client.stream("GET", image_url) as resp:
                if resp.status_code != 200:
                    logger.warning("fetch %s got non-200 status code: %s", image_url, resp.status_code)
                    raise FailPostFile()
                req = UploadRequest(
                    upload_key=key,
                    chunks=resp.aiter_bytes(),
                    filename=name or PurePosixPath(parsed.path).name,
                    random_filename=True,
                    content_type=resp.headers.get("content-type", ""),
                )
                return await upload_file(req, cfg)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning("fetch %s failed: %s", image_url, e)
        raise FailPostFile() from e


async def _handle(request: Request, cfg: Config) -> UploadResult:
    key = bearer_key(request.headers.get("authorization"))
    authorize(cfg, key)

    is_multipart = (request.headers.get("content-type") or "").startswith("multipart/form-data")
    async with read_form(request) as form:
        file_type = _form_str(form, "type") or ("file" if is_multipart else "url")
        name = _form_str(form, "name").strip()
        if file_type == "file":
            return await upload_file(_from_file(form, key, name), cfg)
        if file_type == "base64":
            return await upload_file(_from_base64(form, key, name), cfg)
        if file_type == "url":
            return await _from_url(form, key, name, cfg)
    raise FailPostFile(f"unsupported type: {file_type}")


def _error_response(e: Exception) -> JSONResponse:
    code = status_code(e)
    body = ImgurImageResult(success=False, status=code)
    return JSONResponse(body.model_dump(), status_code=code)


@router.post("/image")
async def compat_imgur_image(request: Request):
    cfg = current()
    try:
        result = await _handle(request, cfg)
    except UploadError as e:
        logger.warning("compat upload error [%s]: %s", client_addr(request, cfg), e)
        return _error_response(e)

    body = ImgurImageResult(
        success=True,
        status=200,
        data=ImgurImageData(
            id=result.file_url,
            link=result.file_url,
            datetime=int(time.time()),
            type=result.content_type or None,
            size=result.size,
        ),
    )
    return JSONResponse(body.model_dump())
