"""Liveness plus a check that the current snapshot can accept uploads."""
import tempfile

from fastapi import APIRouter

from filedrop.config import Config, current

router = APIRouter()


def _storage_problem(cfg: Config) -> str | None:
    try:
        cfg.upload_path.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(prefix=".", suffix=".part", dir=cfg.upload_path):
            pass
    except OSError as e:
        return f"error: {e}"
    return None


@router.get("/health")
async def health():
    cfg = current()
    storage_problem = _storage_problem(cfg)
    checks = {
        "app": "ok",
        "storage": storage_problem or "ok",
        "keys": len(cfg.keys),
    }
    healthy = storage_problem is None and len(cfg.keys) > 0
    return {"status": "ok" if healthy else "unhealthy", "checks": checks}
