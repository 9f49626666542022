from contextlib import asynccontextmanager
from typing import AsyncIterator

from starlette.datastructures import FormData
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from filedrop.errors import FailPostFile

MAX_PART_BYTES = 256 * 1024 * 1024


@asynccontextmanager
async def read_form(request: Request, max_part_size: int = MAX_PART_BYTES) -> AsyncIterator[FormData]:
    """Parsed request form, closed on exit. Unparseable bodies are bad input."""
    try:
        form = await request.form(max_part_size=max_part_size)
    except (MultiPartException, HTTPException) as e:
        raise FailPostFile("malformed form body") from e
    try:
        yield form
    finally:
        await form.close()
