import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


TEST_UPLOAD_KEY = "test-upload-key"
TEST_ENV_KEY = "env-upload-key"
TEST_UPLOAD_URL = "http://files.test/u/"


@pytest.fixture()
def app_ctx(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict:
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir(parents=True, exist_ok=True)
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "listen_address": ":9090",
                "upload_path": str(upload_dir),
                "upload_url": TEST_UPLOAD_URL,
                "upload_keys": {TEST_UPLOAD_KEY: "test suite"},
            }
        ),
        encoding="utf-8",
    )

    monkeypatch.setenv("FILEDROP_CONFIG", str(config_path))
    monkeypatch.setenv("UPLOAD_KEY", TEST_ENV_KEY)
    for name in ("FILEDROP_LISTEN", "FILEDROP_UPLOAD_PATH", "FILEDROP_UPLOAD_URL", "FILEDROP_REMOTE_ADDR_HEADER"):
        monkeypatch.delenv(name, raising=False)

    for name in list(sys.modules.keys()):
        if name == "filedrop" or name.startswith("filedrop."):
            del sys.modules[name]

    import importlib

    main = importlib.import_module("filedrop.main")
    return {
        "app": main.app,
        "upload_dir": upload_dir,
        "config_path": config_path,
        "key": TEST_UPLOAD_KEY,
    }


@pytest.fixture()
def client(app_ctx: dict):
    with TestClient(app_ctx["app"]) as c:
        yield c


@pytest.fixture()
def upload_dir(app_ctx: dict) -> Path:
    return app_ctx["upload_dir"]


@pytest.fixture()
def upload_key(app_ctx: dict) -> str:
    return app_ctx["key"]


@pytest.fixture()
def config_path(app_ctx: dict) -> Path:
    return app_ctx["config_path"]
