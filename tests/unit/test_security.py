from __future__ import annotations

from types import SimpleNamespace

from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from mindmate.app.core.security import USER_HEADER, resolve_current_user


class _StubStorage:
    def __init__(self) -> None:
        self.last_external_id: str | None = None

    async def ensure_user(self, external_id: str):
        self.last_external_id = external_id
        return SimpleNamespace(id=1, external_id=external_id)


def _app_with_security(storage: _StubStorage) -> FastAPI:
    app = FastAPI()
    app.state.storage_service = storage

    @app.get("/secure")
    async def secure_endpoint(
        request: Request, user_id: int = Depends(resolve_current_user)
    ) -> dict[str, int | str]:
        return {"user": user_id, "telemetry": request.state.telemetry_user}

    return app


def test_resolve_current_user_header() -> None:
    storage = _StubStorage()
    app = _app_with_security(storage)
    with TestClient(app) as client:
        response = client.get("/secure", headers={USER_HEADER: "  alice  "})
        assert response.status_code == 200
        payload = response.json()
        assert payload["user"] == 1
        assert len(payload["telemetry"]) == 12
        assert "alice" not in payload["telemetry"]
        assert storage.last_external_id == "alice"


def test_resolve_current_user_too_long() -> None:
    storage = _StubStorage()
    app = _app_with_security(storage)
    with TestClient(app) as client:
        response = client.get("/secure", headers={USER_HEADER: "x" * 129})
        assert response.status_code == 400
        assert storage.last_external_id is None


def test_resolve_current_user_missing() -> None:
    storage = _StubStorage()
    app = _app_with_security(storage)
    with TestClient(app) as client:
        assert client.get("/secure").status_code == 401
        assert client.get("/secure", headers={USER_HEADER: "   "}).status_code == 401
