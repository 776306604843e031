import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the import-time store away from the working tree.
_SCRATCH = Path(tempfile.mkdtemp(prefix="yasha-tests-"))
os.environ.setdefault("DATA_DIR", str(_SCRATCH / "data"))
os.environ.setdefault("UPLOAD_DIR", str(_SCRATCH / "uploads"))
os.environ.setdefault("STATIC_DIR", str(_SCRATCH / "public"))


import app  # noqa: E402
from config import Settings, get_settings  # noqa: E402
from stores import get_store, init_store  # noqa: E402


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        upload_dir=tmp_path / "uploads",
        static_dir=tmp_path / "public",
    )


@pytest.fixture
def store(settings: Settings):
    return init_store(settings)


@pytest.fixture
def client(settings: Settings, store):
    app.app.dependency_overrides[get_store] = lambda: store
    app.app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app.app)
    finally:
        app.app.dependency_overrides.clear()


def signup_payload(email: str, **extra) -> dict:
    body = {
        "name": "Asha",
        "email": email,
        "phone": "555-0100",
        "password": "secret",
        "role": "student",
        "courseType": "online",
    }
    body.update(extra)
    return body


@pytest.fixture
def register(client):
    """Sign a user up (and optionally approve them); returns the signup response."""

    def _register(email: str, approve: bool = False, **extra):
        resp = client.post("/api/auth/signup", json=signup_payload(email, **extra))
        if approve and resp.status_code == 201:
            client.patch(f"/api/admin/users/{email}/status", json={"status": "approved"})
        return resp

    return _register
