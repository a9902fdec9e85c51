"""Tests for lifespan startup configuration error handling"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from booktracker.auth.utils import lifespan
from booktracker.config import config


def test_startup_fails_when_supabase_config_missing(monkeypatch):
    """Test startup fails gracefully when both Supabase configs are missing"""
    monkeypatch.setattr(config, "SUPABASE_URL", None)
    monkeypatch.setattr(config, "SUPABASE_SERVICE_ROLE_KEY", None)

    app = FastAPI(lifespan=lifespan)

    with pytest.raises(RuntimeError, match="Supabase configuration missing"):
        with TestClient(app):
            pass


def test_startup_fails_when_only_url_missing(monkeypatch):
    """Test startup fails when only URL is missing"""
    monkeypatch.setattr(config, "SUPABASE_URL", None)
    monkeypatch.setattr(config, "SUPABASE_SERVICE_ROLE_KEY", "service-key")

    app = FastAPI(lifespan=lifespan)

    with pytest.raises(RuntimeError, match="Supabase configuration missing"):
        with TestClient(app):
            pass


def test_startup_fails_when_only_service_key_missing(monkeypatch):
    """The anon key alone is not enough for the server"""
    monkeypatch.setattr(config, "SUPABASE_URL", "http://test.supabase.co")
    monkeypatch.setattr(config, "SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setattr(config, "SUPABASE_SERVICE_ROLE_KEY", None)

    app = FastAPI(lifespan=lifespan)

    with pytest.raises(RuntimeError, match="Supabase configuration missing"):
        with TestClient(app):
            pass


def test_startup_uses_service_role_key_and_closes_client(monkeypatch):
    monkeypatch.setattr(config, "SUPABASE_URL", "http://test.supabase.co")
    monkeypatch.setattr(config, "SUPABASE_SERVICE_ROLE_KEY", "service-key")

    mock_client = MagicMock()
    mock_client.postgrest.session.aclose = AsyncMock()

    with patch(
        "booktracker.auth.utils.create_async_client", new_callable=AsyncMock
    ) as mock_create:
        mock_create.return_value = mock_client
        app = FastAPI(lifespan=lifespan)

        with TestClient(app):
            assert app.state.supabase is mock_client

        assert mock_create.call_args[0][:2] == ("http://test.supabase.co", "service-key")
        mock_client.postgrest.session.aclose.assert_awaited_once()
