import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator
from urllib.parse import quote

from fastapi import UploadFile

from filedrop.config import Config
from filedrop.content import resolve_type
from filedrop.errors import FailPostFile, InvalidUploadKey, OutputFileError, WriteFileError
from filedrop.filenames import decide_filename

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
FILE_MODE = 0o644


@dataclass(slots=True)
class UploadRequest:
    upload_key: str
    chunks: AsyncIterator[bytes]
    filename: str = ""
    random_filename: bool = False
    content_type: str = ""


@dataclass(frozen=True, slots=True)
class UploadResult:
    file_url: str
    content_type: str
    filename: str
    size: int


async def iter_upload_file(file: UploadFile, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        yield chunk


async def iter_bytes(data: bytes) -> AsyncIterator[bytes]:
    if data:
        yield data


def authorize(cfg: Config, upload_key: str | None) -> None:
    if not cfg.keys.validate(upload_key):
        raise InvalidUploadKey()


def target_path(base: Path, filename: str) -> Path:
    base = base.resolve()
    target = (base / filename).resolve()
    if target == base or not target.is_relative_to(base):
        raise FailPostFile("invalid filename")
    return target


async def upload_file(req: UploadRequest, cfg: Config) -> UploadResult:
    """Validate, name and store one upload using a single config snapshot.

    The payload goes to a hidden temp file next to the target and is renamed
    into place only after the last chunk is written, so a failed or
    cancelled upload never leaves a partial file under the final name.
    """
    authorize(cfg, req.upload_key)

    content_type = req.content_type or resolve_type("", req.filename)
    filename = decide_filename(req.filename, req.random_filename, content_type)
    target = target_path(cfg.upload_path, filename)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".", suffix=".part", dir=target.parent)
    except OSError as e:
        logger.error("cannot open output file in %s: %s", target.parent, e)
        raise OutputFileError() from e
    tmp = Path(tmp_name)

    written = 0
    try:
        try:
            with os.fdopen(fd, "wb") as out:
                async for chunk in req.chunks:
                    out.write(chunk)
                    written += len(chunk)
            os.chmod(tmp, FILE_MODE)
            os.replace(tmp, target)
        except OSError as e:
            raise WriteFileError(written) from e
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise

    logger.info("stored %s (%s, %d bytes)", target.name, content_type or "unknown type", written)
    return UploadResult(
        file_url=cfg.upload_url + quote(filename),
        content_type=content_type,
        filename=filename,
        size=written,
    )
