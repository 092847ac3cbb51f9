"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from contextlib import ExitStack
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from tests.helpers import SERVICE_MODULES
from tests.fakes import FakeSupabase


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def sent_emails() -> Generator[MagicMock, None, None]:
    """Capture outgoing Resend calls so no test sends real mail."""
    with patch("resend.Emails.send", return_value={"id": "email_test"}) as send:
        yield send


@pytest.fixture
def fake_db() -> Generator[FakeSupabase, None, None]:
    """Route every service's Supabase client to one in-memory fake."""
    db = FakeSupabase()
    with ExitStack() as stack:
        for module in SERVICE_MODULES:
            stack.enter_context(patch(f"{module}.get_supabase_client", return_value=db))
        stack.enter_context(patch("src.services.auth_service.create_auth_client", return_value=MagicMock()))
        yield db


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client for the readiness probe.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login(client: TestClient) -> Callable[[Any], Any]:
    """Make subsequent requests run as the given RequestContext."""
    from src.api.deps import get_request_context
    from src.main import app

    def _login(ctx: Any) -> Any:
        app.dependency_overrides[get_request_context] = lambda: ctx
        return ctx

    return _login
