"""
clusterauth main client.

Provides the primary interface for authenticating against a cluster and
managing its access control.
"""

import os
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from clusterauth.clients import AuthorizationClient, IdentityExchange, SessionManager
from clusterauth.clients.identity import DEFAULT_AUTH_URL
from clusterauth.credentials import CredentialStore, FileCredentialStore
from clusterauth.exceptions import ConfigurationError
from clusterauth.prompts import ConsolePrompter, Prompter
from clusterauth.transport import HTTPTransport


class ClusterAuthClient:
    """
    Main client for a cluster's authorization service.

    Aggregates the session and authorization clients around one transport
    and one credential store.

    Example:
        ```python
        from clusterauth import ClusterAuthClient

        with ClusterAuthClient.from_env() as client:
            client.session.login()
            print(client.session.whoami().username)
            client.authorization.set_scope("alice", "writer", "images")
            client.authorization.check("reader", "images")
        ```
    """

    DEFAULT_ADDRESS = "http://localhost:30650"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        address: str = DEFAULT_ADDRESS,
        credential_store: CredentialStore | None = None,
        prompter: Prompter | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        auth_url: str = DEFAULT_AUTH_URL,
        http_transport: httpx.BaseTransport | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            address: Base URL of the cluster (default: http://localhost:30650)
            credential_store: Session credential storage (default: user config file)
            prompter: Interactive input (default: the console)
            timeout: Request timeout in seconds (default: 30.0)
            auth_url: Identity-provider URL shown during interactive login
            http_transport: Optional httpx transport, e.g. for an in-memory service
            clock: Source of the current time
        """
        self.address = address
        self.timeout = timeout
        self.credential_store = credential_store or FileCredentialStore()
        self.prompter = prompter or ConsolePrompter()

        self._transport = HTTPTransport(
            base_url=address,
            credential_store=self.credential_store,
            timeout=timeout,
            http_transport=http_transport,
        )

        self.identity = IdentityExchange(self._transport, self.prompter, auth_url=auth_url)
        self.session = SessionManager(
            self._transport,
            self.credential_store,
            self.identity,
            self.prompter,
            clock=clock,
        )
        self.authorization = AuthorizationClient(self._transport)

    @classmethod
    def from_env(
        cls,
        prompter: Prompter | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> "ClusterAuthClient":
        """
        Create a client from environment variables and the config file.

        Environment variables:
            CLUSTERAUTH_ADDRESS: Cluster base URL (optional; falls back to
                ``v1.cluster_address`` in the config file, then the default)
            CLUSTERAUTH_CONFIG: Config file path (optional, default: ~/.clusterauth/config.json)
            CLUSTERAUTH_TIMEOUT: Request timeout in seconds (optional, default: 30)
            CLUSTERAUTH_AUTH_URL: Identity-provider login URL (optional)

        Returns:
            Configured ClusterAuthClient instance

        Raises:
            ConfigurationError: If an environment variable has an invalid value
        """
        config_path = os.environ.get("CLUSTERAUTH_CONFIG")
        store = FileCredentialStore(Path(config_path) if config_path else None)

        address = os.environ.get("CLUSTERAUTH_ADDRESS") or store.read_cluster_address()
        if not address:
            address = cls.DEFAULT_ADDRESS
        if not address.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid cluster address: {address}. Must start with http:// or https://"
            )

        timeout_str = os.environ.get("CLUSTERAUTH_TIMEOUT")
        timeout = cls.DEFAULT_TIMEOUT
        if timeout_str:
            try:
                timeout = float(timeout_str)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid CLUSTERAUTH_TIMEOUT: {timeout_str}. Must be a number of seconds"
                ) from None
            if timeout <= 0:
                raise ConfigurationError("CLUSTERAUTH_TIMEOUT must be positive")

        return cls(
            address=address,
            credential_store=store,
            prompter=prompter,
            timeout=timeout,
            auth_url=os.environ.get("CLUSTERAUTH_AUTH_URL") or DEFAULT_AUTH_URL,
            http_transport=http_transport,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "ClusterAuthClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()
