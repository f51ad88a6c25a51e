"""
Pytest configuration for PrepChef data layer tests.

Sets up test environment and global fixtures.
"""
import os
import pytest

# Set test environment variables before prepchef.config is imported
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

from prepchef.config import Settings  # noqa: E402
from prepchef.services.database import DatabaseService  # noqa: E402
from tests.fakes import FakeClock, FakeSupabase, make_session  # noqa: E402


@pytest.fixture
def settings():
    """Fully configured settings with the default duplicate window."""
    return Settings(
        supabase_url="http://localhost:54321",
        supabase_anon_key="test-anon-key",
        environment="testing",
        duplicate_window_ms=2000,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def supabase_client():
    """
    Fake Supabase client with a signed-in user ("user-1").
    """
    return FakeSupabase(session=make_session())


@pytest.fixture
def anonymous_client():
    """Fake Supabase client with no session."""
    return FakeSupabase()


@pytest.fixture
async def db(supabase_client, settings, clock):
    """Initialized DatabaseService for the signed-in user."""
    service = DatabaseService(supabase_client, settings, clock=clock)
    await service.initialize()
    return service


@pytest.fixture
async def anonymous_db(anonymous_client, settings, clock):
    """Initialized DatabaseService with nobody signed in."""
    service = DatabaseService(anonymous_client, settings, clock=clock)
    await service.initialize()
    return service
