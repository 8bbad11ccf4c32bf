"""
Pytest plugin for clusterauth testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["clusterauth.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from clusterauth.testing.fixtures import (
    admin_client,
    cluster_client,
    credential_store,
    fake_service,
    prompter,
    sample_access_grant,
    sample_credential,
)

__all__ = [
    "fake_service",
    "credential_store",
    "prompter",
    "cluster_client",
    "admin_client",
    "sample_credential",
    "sample_access_grant",
]
