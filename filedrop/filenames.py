import re
import secrets
from pathlib import PurePosixPath

from filedrop.auth import is_safe_name
from filedrop.content import extension_for
from filedrop.errors import FailPostFile, RandomNameError

RANDOM_NAME_BYTES = 12
FALLBACK_EXT = ".bin"
_EXT_RE = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


def random_name() -> str:
    try:
        return secrets.token_hex(RANDOM_NAME_BYTES)
    except (OSError, NotImplementedError) as e:
        raise RandomNameError() from e


def _declared_ext(name: str) -> str:
    ext = PurePosixPath(name.replace("\\", "/")).suffix if name else ""
    return ext if _EXT_RE.fullmatch(ext) else ""


def decide_filename(declared_name: str | None, force_random: bool, content_type: str = "") -> str:
    """Stored filename for an upload.

    A declared name is used verbatim unless a random one is forced. Random
    names keep the declared extension, else one derived from the content
    type, else FALLBACK_EXT.
    """
    declared_name = (declared_name or "").strip()
    if declared_name and not force_random:
        if not is_safe_name(declared_name):
            raise FailPostFile("invalid filename")
        return declared_name

    ext = _declared_ext(declared_name) or extension_for(content_type) or FALLBACK_EXT
    return random_name() + ext
