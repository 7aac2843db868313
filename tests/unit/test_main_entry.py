from __future__ import annotations

from unittest.mock import patch

from mindmate import main as entrypoint


def test_main_run_uses_env_port(monkeypatch):
    monkeypatch.setenv("PORT", "5001")
    with patch("uvicorn.run") as run_mock:
        entrypoint.run()
    run_mock.assert_called_once()
    args, kwargs = run_mock.call_args
    assert kwargs.get("port") == 5001
    assert kwargs.get("host") == "0.0.0.0"


def test_main_run_honours_host(monkeypatch):
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.delenv("PORT", raising=False)
    with patch("uvicorn.run") as run_mock:
        entrypoint.run()
    _, kwargs = run_mock.call_args
    assert kwargs.get("host") == "127.0.0.1"
    assert kwargs.get("port") == 8000
