"""clusterauth - client for a cluster's access-control service."""

from clusterauth.client import ClusterAuthClient
from clusterauth.clients import (
    AuthenticateRequest,
    AuthorizationClient,
    IdentityExchange,
    LoginMode,
    SessionManager,
)
from clusterauth.credentials import (
    CredentialStore,
    FileCredentialStore,
    MemoryCredentialStore,
)
from clusterauth.exceptions import (
    PARTIALLY_ACTIVATED_GUIDANCE,
    AbortedError,
    AlreadyActiveError,
    AuthenticationError,
    ClusterAuthError,
    ClusterConnectionError,
    ConfigurationError,
    CredentialStoreError,
    InvalidProofError,
    InvalidScopeError,
    NotActivatedError,
    NotLoggedInError,
    PartiallyActivatedError,
    PermissionDeniedError,
    RemoteError,
    RequestTimeoutError,
    ValidationError,
)
from clusterauth.logging import configure_logging, get_logger
from clusterauth.prompts import ConsolePrompter, Prompter, confirm
from clusterauth.scopes import Ordering, Scope, compare, parse_scope
from clusterauth.transport import HTTPTransport
from clusterauth.types import (
    AccessGrant,
    ActivationResult,
    ActivationState,
    Credential,
    HumanSubject,
    RobotSubject,
    WhoAmIResult,
    parse_subject,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "ClusterAuthClient",
    # Resource Clients
    "IdentityExchange",
    "AuthenticateRequest",
    "SessionManager",
    "LoginMode",
    "AuthorizationClient",
    # Scopes
    "Scope",
    "Ordering",
    "parse_scope",
    "compare",
    # Types
    "Credential",
    "ActivationResult",
    "ActivationState",
    "WhoAmIResult",
    "AccessGrant",
    "HumanSubject",
    "RobotSubject",
    "parse_subject",
    # Credential Stores
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    # Prompts
    "Prompter",
    "ConsolePrompter",
    "confirm",
    # Exceptions
    "ClusterAuthError",
    "ConfigurationError",
    "ValidationError",
    "InvalidScopeError",
    "AbortedError",
    "NotLoggedInError",
    "CredentialStoreError",
    "ClusterConnectionError",
    "RequestTimeoutError",
    "AuthenticationError",
    "InvalidProofError",
    "PartiallyActivatedError",
    "PermissionDeniedError",
    "AlreadyActiveError",
    "RemoteError",
    "NotActivatedError",
    "PARTIALLY_ACTIVATED_GUIDANCE",
    # Transport
    "HTTPTransport",
    # Logging
    "configure_logging",
    "get_logger",
]
