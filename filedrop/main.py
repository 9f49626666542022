import asyncio
import logging
import signal
from contextlib import asynccontextmanager

from fastapi import FastAPI

from filedrop import config
from filedrop.routes import compat, health, upload

logger = logging.getLogger(__name__)


def _on_sighup():
    logger.info("received SIGHUP signal, reloading...")
    config.reload()


@asynccontextmanager
async def lifespan(app: FastAPI):
    loop = asyncio.get_running_loop()
    installed = False
    if hasattr(signal, "SIGHUP"):
        try:
            loop.add_signal_handler(signal.SIGHUP, _on_sighup)
            installed = True
        except (NotImplementedError, RuntimeError, ValueError) as e:
            # only the main thread's loop can own signals
            logger.warning("config reload on SIGHUP unavailable: %s", e)
    try:
        yield
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGHUP)


app = FastAPI(title="filedrop", docs_url=None, redoc_url=None, openapi_url=None, lifespan=lifespan)

app.include_router(health.router)
app.include_router(upload.router)
app.include_router(compat.router)
