"""
Tests for the Supabase client factory.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from prepchef.config import Settings
from prepchef.db.client import create_supabase_client
from prepchef.services.database import DatabaseService


class TestCreateSupabaseClient:
    """Tests for create_supabase_client."""

    @pytest.mark.asyncio
    async def test_uses_url_and_anon_key(self, settings):
        fake_client = MagicMock()
        with patch("prepchef.db.client.create_async_client", new=AsyncMock(return_value=fake_client)) as mock:
            client = await create_supabase_client(settings)

        assert client is fake_client
        mock.assert_awaited_once_with("http://localhost:54321", "test-anon-key")

    @pytest.mark.asyncio
    async def test_missing_configuration_returns_none(self):
        with patch("prepchef.db.client.create_async_client", new=AsyncMock()) as mock:
            client = await create_supabase_client(Settings(supabase_url="", supabase_anon_key=""))

        assert client is None
        mock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_service_create_is_not_initialized(self, settings):
        with patch("prepchef.db.client.create_async_client", new=AsyncMock(return_value=MagicMock())):
            db = await DatabaseService.create(settings)

        assert db.client is not None
        assert db.session.is_initialized is False
