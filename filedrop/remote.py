from starlette.requests import Request

from filedrop.config import Config


def client_addr(request: Request, cfg: Config) -> str:
    """Caller address for logs: the configured proxy header, else the peer."""
    if cfg.remote_addr_header:
        value = (request.headers.get(cfg.remote_addr_header) or "").strip()
        if value:
            return value
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
