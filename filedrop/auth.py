import hmac
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

SAFE_NAME_RE = re.compile(r"^[^/\\\x00-\x1f\x7f]{1,120}$")


@dataclass(frozen=True, slots=True)
class KeyStore:
    """Valid upload keys, each with a descriptive comment.

    Comments are never consulted for authorization.
    """

    comments: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(cls, config_keys: Mapping[str, str], env_value: str = "") -> "KeyStore":
        merged: dict[str, str] = {}
        for key in env_value.split(","):
            key = key.strip()
            if key:
                merged[key] = ""
        for key, comment in config_keys.items():
            if key:
                merged[key] = comment
        return cls(MappingProxyType(merged))

    def __len__(self) -> int:
        return len(self.comments)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.validate(key)

    def validate(self, key: str | None) -> bool:
        if not key:
            return False
        candidate = key.encode("utf-8")
        found = False
        for known in self.comments:
            if hmac.compare_digest(candidate, known.encode("utf-8")):
                found = True
        return found


def bearer_key(authorization: str | None) -> str:
    """Upload key from an 'Authorization: Bearer <key>' header, or ''."""
    if not authorization:
        return ""
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0] != "Bearer":
        # "Client-ID" is anonymous access upstream; not supported here
        return ""
    return parts[1]


def is_safe_name(name: str) -> bool:
    return bool(SAFE_NAME_RE.fullmatch(name)) and name not in (".", "..") and not name.startswith(".")
