"""clusterauth exception classes."""

import re

# Fixed guidance attached to partially-activated failures.
PARTIALLY_ACTIVATED_GUIDANCE = (
    "if the cluster is stuck in this state, you can revert by running "
    "'clusterauth auth deactivate' or retry by running "
    "'clusterauth auth activate' again"
)

_RPC_NOISE = re.compile(r"^(?:rpc error: code = \w+ desc = )+")


def scrub_message(message: str) -> str:
    """Strip transport-internal prefixes from a remote error message."""
    return _RPC_NOISE.sub("", message.strip())


class ClusterAuthError(Exception):
    """Base exception for all clusterauth errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(ClusterAuthError):
    """Raised when client configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class ValidationError(ClusterAuthError):
    """Raised on bad local input. Never involves the remote service."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR") -> None:
        super().__init__(code, message)


class InvalidScopeError(ValidationError):
    """Raised when text does not name a scope."""

    def __init__(self, text: str) -> None:
        super().__init__(
            f"invalid scope {text!r}: must be one of none, reader, writer, owner",
            code="INVALID_SCOPE",
        )
        self.text = text


class AbortedError(ClusterAuthError):
    """Raised when the operator declines a confirmation or closes input."""

    def __init__(self, message: str = "operation aborted") -> None:
        super().__init__("ABORTED", message)


class NotLoggedInError(ClusterAuthError):
    """Raised when an operation needs a credential and none is stored."""

    def __init__(self, message: str = "no credential found; log in first") -> None:
        super().__init__("NOT_LOGGED_IN", message)


class CredentialStoreError(ClusterAuthError):
    """Raised when the persisted credential cannot be read or written."""

    def __init__(self, message: str) -> None:
        super().__init__("CREDENTIAL_STORE_ERROR", message)


class ClusterConnectionError(ClusterAuthError):
    """Raised when the transport cannot reach the cluster."""

    retryable = True


class RequestTimeoutError(ClusterConnectionError):
    """Raised when the cluster does not answer before the timeout."""

    pass


class AuthenticationError(ClusterAuthError):
    """Raised when the cluster refuses to authenticate the caller."""

    pass


class InvalidProofError(AuthenticationError):
    """Raised when an external proof or one-time code is invalid or expired."""

    pass


class PartiallyActivatedError(AuthenticationError):
    """Raised when the cluster was left partially activated."""

    def with_recovery_guidance(self) -> "PartiallyActivatedError":
        """Return a copy whose message tells the operator how to recover."""
        if PARTIALLY_ACTIVATED_GUIDANCE in self.message:
            return self
        return PartiallyActivatedError(
            self.code,
            f"{self.message}: {PARTIALLY_ACTIVATED_GUIDANCE}",
            self.request_id,
        )


class PermissionDeniedError(ClusterAuthError):
    """Raised when the caller lacks the privilege an operation needs."""

    pass


class AlreadyActiveError(ClusterAuthError):
    """Raised when activating a cluster whose auth is already active."""

    pass


class RemoteError(ClusterAuthError):
    """Raised for any other failure reported by the cluster."""

    pass


class NotActivatedError(RemoteError):
    """Raised when auth operations are used on an inactive cluster."""

    pass
