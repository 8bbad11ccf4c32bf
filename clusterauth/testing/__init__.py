"""clusterauth testing utilities.

Provides an in-memory authorization service, a scripted prompter, and
fixtures for testing applications that use clusterauth.
"""

from clusterauth.testing.fixtures import (
    create_mock_access_grant,
    create_mock_credential,
)
from clusterauth.testing.mock import (
    FakeAuthService,
    InjectedFailure,
    MockCall,
    ScriptedPrompter,
)

__all__ = [
    # Fake service
    "FakeAuthService",
    "MockCall",
    "InjectedFailure",
    "ScriptedPrompter",
    # Helper functions
    "create_mock_credential",
    "create_mock_access_grant",
]
