"""
Pytest fixtures for clusterauth testing.

Provides common fixtures for testing code that uses clusterauth against the
in-memory FakeAuthService.
"""

from collections.abc import Generator
from datetime import datetime, timezone

import pytest

from clusterauth.client import ClusterAuthClient
from clusterauth.credentials import MemoryCredentialStore
from clusterauth.scopes import Scope
from clusterauth.testing.mock import FakeAuthService, ScriptedPrompter
from clusterauth.types.acl import AccessGrant
from clusterauth.types.credentials import Credential

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


def create_mock_credential(
    token: str = "mock-token",
    subject: str | None = "mock-user",
    ttl_seconds: int | None = None,
) -> Credential:
    """Create a Credential with sensible defaults."""
    return Credential(token=token, subject=subject, ttl_seconds=ttl_seconds)


def create_mock_access_grant(
    username: str = "mock-user",
    repo: str = "mock-repo",
    scope: Scope = Scope.READER,
) -> AccessGrant:
    """Create an AccessGrant with sensible defaults."""
    return AccessGrant(username=username, repo=repo, scope=scope)


# ============================================================================
# Service and Client Fixtures
# ============================================================================


@pytest.fixture
def fake_service() -> Generator[FakeAuthService, None, None]:
    """
    Provide an inactive FakeAuthService.

    Example:
        ```python
        def test_login(fake_service, cluster_client):
            fake_service.activate_with_admin("admin")
            fake_service.register_one_time_code("123456", "alice")
            cluster_client.session.login(one_time_code="123456")
            assert fake_service.was_called("authenticate")
        ```
    """
    service = FakeAuthService()
    yield service
    service.reset()


@pytest.fixture
def credential_store() -> MemoryCredentialStore:
    """Provide an empty in-memory credential store."""
    return MemoryCredentialStore()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    """Provide a prompter with no queued answers."""
    return ScriptedPrompter()


@pytest.fixture
def cluster_client(
    fake_service: FakeAuthService,
    credential_store: MemoryCredentialStore,
    prompter: ScriptedPrompter,
) -> Generator[ClusterAuthClient, None, None]:
    """Provide a ClusterAuthClient wired to the fake service."""
    client = ClusterAuthClient(
        address="http://cluster.test",
        credential_store=credential_store,
        prompter=prompter,
        http_transport=fake_service.as_transport(),
        clock=lambda: FIXED_NOW,
    )
    yield client
    client.close()


@pytest.fixture
def admin_client(
    fake_service: FakeAuthService,
    credential_store: MemoryCredentialStore,
    cluster_client: ClusterAuthClient,
) -> ClusterAuthClient:
    """Provide a client logged in as "admin" on an active cluster."""
    token = fake_service.activate_with_admin("admin")
    credential_store.write(Credential(token=token, subject="admin"))
    return cluster_client


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_credential() -> Credential:
    """Provide a sample Credential object."""
    return create_mock_credential(token="sample-token", subject="alice", ttl_seconds=3600)


@pytest.fixture
def sample_access_grant() -> AccessGrant:
    """Provide a sample AccessGrant object."""
    return create_mock_access_grant(username="alice", repo="images", scope=Scope.WRITER)
