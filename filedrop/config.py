import json
import logging
import os
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path

from filedrop.auth import KeyStore

logger = logging.getLogger(__name__)

APP_VERSION = (os.environ.get("APP_VERSION") or "").strip() or "1.0"
UPLOAD_KEY_ENV = "UPLOAD_KEY"
FETCH_TIMEOUT_S = float(os.environ.get("FILEDROP_FETCH_TIMEOUT", "30"))
DEFAULT_CONFIG_PATH = "./config.json"

_STR_FIELDS = ("listen_address", "upload_path", "upload_url", "remote_addr_header")


@dataclass(frozen=True, slots=True)
class Config:
    """One complete configuration. Replaced as a whole on reload, never edited."""

    listen_address: str
    upload_path: Path
    upload_url: str
    remote_addr_header: str = ""
    keys: KeyStore = field(default_factory=KeyStore)


@dataclass(frozen=True, slots=True)
class Overrides:
    """Values given at process start. These win over the config file."""

    config_path: str = DEFAULT_CONFIG_PATH
    listen_address: str = ""
    upload_path: str = ""
    upload_url: str = ""
    remote_addr_header: str = ""

    @classmethod
    def from_env(cls) -> "Overrides":
        return cls(
            config_path=os.environ.get("FILEDROP_CONFIG") or DEFAULT_CONFIG_PATH,
            listen_address=os.environ.get("FILEDROP_LISTEN", ""),
            upload_path=os.environ.get("FILEDROP_UPLOAD_PATH", ""),
            upload_url=os.environ.get("FILEDROP_UPLOAD_URL", ""),
            remote_addr_header=os.environ.get("FILEDROP_REMOTE_ADDR_HEADER", ""),
        )


DEFAULT_CONFIG = Config(
    listen_address=":8080",
    upload_path=Path("./data/"),
    upload_url="http://localhost:8081/",
)


def _read_config_file(path: str) -> dict:
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError:
        return {}
    except OSError as e:
        logger.error("error loading config file %s: %s", path, e)
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.error("error parsing config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.error("error parsing config file %s: top level must be an object", path)
        return {}
    return data


def _file_values(data: dict) -> tuple[dict, dict[str, str]]:
    values = {}
    for name in _STR_FIELDS:
        if name not in data:
            continue
        v = data[name]
        if not isinstance(v, str):
            logger.warning("ignoring config field %s: expected a string, got %s", name, type(v).__name__)
            continue
        values[name] = v

    keys: dict[str, str] = {}
    raw_keys = data.get("upload_keys")
    if raw_keys is not None:
        if isinstance(raw_keys, dict):
            keys = {str(k): "" if c is None else str(c) for k, c in raw_keys.items()}
        else:
            logger.warning("ignoring config field upload_keys: expected an object")
    return values, keys


def load(overrides: Overrides) -> Config:
    """Build a fresh snapshot: defaults, then config file, then overrides."""
    file_values, file_keys = _file_values(_read_config_file(overrides.config_path))

    merged = {}
    for name in _STR_FIELDS:
        v = getattr(overrides, name) or file_values.get(name)
        if v:
            merged[name] = v
    if "upload_path" in merged:
        merged["upload_path"] = Path(merged["upload_path"])

    keys = KeyStore.build(file_keys, os.environ.get(UPLOAD_KEY_ENV, ""))
    return replace(DEFAULT_CONFIG, keys=keys, **merged)


_overrides = Overrides.from_env()
_reload_lock = threading.Lock()
_current: Config = load(_overrides)


def current() -> Config:
    """Snapshot to use for the whole of one request."""
    return _current


def set_overrides(overrides: Overrides) -> None:
    global _overrides
    _overrides = overrides


def reload() -> Config:
    global _current
    with _reload_lock:
        cfg = load(_overrides)
        _current = cfg
    logger.info(
        "config loaded: listen=%s upload_path=%s upload_url=%s keys=%d",
        cfg.listen_address,
        cfg.upload_path,
        cfg.upload_url,
        len(cfg.keys),
    )
    if not cfg.keys:
        logger.warning("no upload keys configured; every upload will be rejected")
    return cfg


def split_listen_address(addr: str) -> tuple[str, int]:
    """':8080' -> ('0.0.0.0', 8080); '[::1]:80' -> ('::1', 80)."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address: {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)
