"""Tests for ganji_gateway.main entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest


def test_main_calls_uvicorn_run(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify that main() delegates to uvicorn.run with expected args."""
    monkeypatch.delenv("GANJI_SERVER__PORT", raising=False)
    monkeypatch.delenv("GANJI_RELOAD", raising=False)
    with patch("ganji_gateway.main.uvicorn.run") as mock_run:
        from ganji_gateway.main import main

        main()
        mock_run.assert_called_once()
        call_kwargs = mock_run.call_args
        assert call_kwargs[0][0] == "ganji_gateway.api.app:create_app"
        assert call_kwargs[1]["factory"] is True
        assert call_kwargs[1]["port"] == 3000
        assert call_kwargs[1]["reload"] is False


def test_main_honours_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GANJI_SERVER__PORT", "8123")
    monkeypatch.setenv("GANJI_RELOAD", "true")
    with patch("ganji_gateway.main.uvicorn.run") as mock_run:
        from ganji_gateway.main import main

        main()
        assert mock_run.call_args[1]["port"] == 8123
        assert mock_run.call_args[1]["reload"] is True
