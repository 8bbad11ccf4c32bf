"""
HTTP Transport for clusterauth.

Handles HTTP communication with the cluster's authorization service: attaches
the stored session credential, and parses error responses into typed
exceptions. Requests are never retried automatically.
"""

import time
from typing import Any

import httpx

from clusterauth.credentials import CredentialStore
from clusterauth.exceptions import (
    AlreadyActiveError,
    AuthenticationError,
    ClusterAuthError,
    ClusterConnectionError,
    InvalidProofError,
    NotActivatedError,
    NotLoggedInError,
    PartiallyActivatedError,
    PermissionDeniedError,
    RemoteError,
    RequestTimeoutError,
    scrub_message,
)
from clusterauth.logging import log_http_request, log_http_response

API_PREFIX = "/v1/auth"

# Error codes the cluster uses for distinguished failure kinds
_ERROR_CODES: dict[str, type[ClusterAuthError]] = {
    "PARTIALLY_ACTIVATED": PartiallyActivatedError,
    "INVALID_PROOF": InvalidProofError,
    "EXPIRED_PROOF": InvalidProofError,
    "BAD_TOKEN": InvalidProofError,
    "EXPIRED_TOKEN": InvalidProofError,
    "ALREADY_ACTIVATED": AlreadyActiveError,
    "NOT_ACTIVATED": NotActivatedError,
    "NOT_AUTHORIZED": PermissionDeniedError,
    "PERMISSION_DENIED": PermissionDeniedError,
}


class HTTPTransport:
    """
    HTTP transport layer for the authorization service.

    Handles:
    - Reading the session credential from the store on every request
    - Mapping transport failures to connection errors
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        credential_store: CredentialStore,
        timeout: float = 30.0,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL of the cluster (e.g., "http://localhost:30650")
            credential_store: Store the session credential is read from
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (e.g., httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.credential_store = credential_store
        self.timeout = timeout

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=http_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def call(
        self,
        operation: str,
        body: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        """
        Invoke one operation on the authorization service.

        Args:
            operation: Operation path segment (e.g., "whoami", "set-scope")
            body: Request payload
            authenticated: Whether the stored credential must be attached

        Returns:
            The ``data`` object of the response

        Raises:
            NotLoggedInError: If authenticated and no credential is stored
            ClusterConnectionError: If the cluster cannot be reached
            ClusterAuthError: On errors reported by the cluster
        """
        path = f"{API_PREFIX}/{operation}"
        headers: dict[str, str] = {}
        if authenticated:
            credential = self.credential_store.read()
            if credential is None:
                raise NotLoggedInError()
            headers["Authorization"] = f"Bearer {credential.token}"

        payload = body or {}
        log_http_request("POST", f"{self.base_url}{path}", headers, payload)

        started = time.monotonic()
        try:
            response = self._client.post(path, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                "TIMEOUT", f"request to {self.base_url} timed out: {e}"
            ) from e
        except httpx.RequestError as e:
            raise ClusterConnectionError(
                "CONNECTION_ERROR", f"could not connect to {self.base_url}: {e}"
            ) from e
        elapsed_ms = (time.monotonic() - started) * 1000

        data = self._decode(response)
        log_http_response(response.status_code, f"{self.base_url}{path}", data, elapsed_ms)

        if response.status_code >= 400:
            raise self._parse_error_response(response.status_code, data)

        result = data.get("data", {})
        if not isinstance(result, dict):
            raise RemoteError("MALFORMED_RESPONSE", f"unexpected response from {operation}")
        return result

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            if response.status_code >= 400:
                return {}
            raise RemoteError(
                "MALFORMED_RESPONSE", f"HTTP {response.status_code}: response is not JSON"
            )
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _parse_error_response(status_code: int, data: dict[str, Any]) -> ClusterAuthError:
        """
        Parse an error response into a typed exception.

        The error code decides the kind when the cluster sends a known one;
        otherwise the HTTP status does.

        Args:
            status_code: HTTP status code
            data: Decoded response body

        Returns:
            Appropriate ClusterAuthError subclass
        """
        error = data.get("error")
        if not isinstance(error, dict):
            error = {}
        code = error.get("code")
        if not isinstance(code, str) or not code:
            code = "UNKNOWN_ERROR"
        message = error.get("message")
        if not isinstance(message, str) or not message:
            message = f"HTTP {status_code}"
        message = scrub_message(message)
        meta = data.get("meta")
        request_id = meta.get("requestId") if isinstance(meta, dict) else None
        if request_id is not None:
            request_id = str(request_id)

        error_class = _ERROR_CODES.get(code)
        if error_class is not None:
            return error_class(code, message, request_id)

        if status_code == 401:
            return AuthenticationError(code, message, request_id)
        elif status_code == 403:
            return PermissionDeniedError(code, message, request_id)
        else:
            return RemoteError(code, message, request_id)


__all__ = ["HTTPTransport", "API_PREFIX"]
