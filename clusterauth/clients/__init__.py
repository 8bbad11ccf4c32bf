"""clusterauth resource clients."""

from clusterauth.clients.authorization import AuthorizationClient
from clusterauth.clients.identity import AuthenticateRequest, IdentityExchange
from clusterauth.clients.session import LoginMode, SessionManager

__all__ = [
    "AuthenticateRequest",
    "IdentityExchange",
    "SessionManager",
    "LoginMode",
    "AuthorizationClient",
]
