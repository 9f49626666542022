import logging
from fastapi import APIRouter, HTTPException
from starlette.datastructures import UploadFile
from starlette.requests import Request

from filedrop.config import current
from filedrop.errors import FailPostFile, UploadError, status_code, status_text
from filedrop.models import UploadResultPayload
from filedrop.remote import client_addr
from filedrop.routes.forms import read_form
from filedrop.storage import UploadRequest, authorize, iter_upload_file, upload_file

router = APIRouter(tags=["upload"])
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=UploadResultPayload)
async def api_upload(request: Request):
    cfg = current()
    try:
        async with read_form(request) as form:
            key = form.get("key")
            key = key if isinstance(key, str) else ""
            authorize(cfg, key)
            file = form.get("file")
            if not isinstance(file, UploadFile):
                # absent, or sent as a plain text field
                raise FailPostFile()
            result = await upload_file(
                UploadRequest(
                    upload_key=key,
                    chunks=iter_upload_file(file),
                    filename=file.filename or "",
                    random_filename=form.get("randomname") == "true",
                    content_type=file.content_type or "",
                ),
                cfg,
            )
    except UploadError as e:
        logger.warning("upload error [%s]: %s", client_addr(request, cfg), e)
        raise HTTPException(status_code=status_code(e), detail=status_text(e)) from e
    return UploadResultPayload(file_url=result.file_url)
