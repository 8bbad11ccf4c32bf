"""Authorization resource client.

Checks and manages repo scopes, the cluster admin set, and tokens issued on
behalf of other subjects.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from clusterauth.clients.identity import credential_from_response
from clusterauth.exceptions import PartiallyActivatedError, RemoteError, ValidationError
from clusterauth.scopes import Scope, coerce_scope
from clusterauth.types.acl import AccessGrant
from clusterauth.types.credentials import Credential

if TYPE_CHECKING:
    from clusterauth.transport import HTTPTransport


def _list_field(data: dict[str, Any], key: str, operation: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise RemoteError("MALFORMED_RESPONSE", f"{operation} response field {key!r} is not a list")
    return value


class AuthorizationClient:
    """Client for repo access control and admin operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the authorization client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def check(self, scope: Scope | str, repo: str) -> bool:
        """
        Check whether the caller has at least ``scope`` on ``repo``.

        The caller does not need access to the repo to learn their own level.

        Args:
            scope: Minimum scope, as a Scope or its name
            repo: The repo name

        Returns:
            True if the caller's scope on the repo is at least ``scope``

        Raises:
            InvalidScopeError: If ``scope`` is not a scope name
            NotLoggedInError: If no credential is stored
        """
        required = coerce_scope(scope)
        data = self.transport.call(
            "authorize", body={"repo": repo, "scope": str(required)}
        )
        return bool(data.get("authorized", False))

    def get_acl(self, repo: str) -> list[AccessGrant]:
        """
        Get the full access list of a repo.

        Args:
            repo: The repo name

        Returns:
            AccessGrant entries in the order the cluster sent them

        Raises:
            PermissionDeniedError: If the caller may not read the ACL
        """
        data = self.transport.call("get-acl", body={"repo": repo})
        grants = []
        for entry in _list_field(data, "entries", "get-acl"):
            username = entry.get("username") if isinstance(entry, dict) else None
            if not isinstance(username, str) or not username:
                raise RemoteError(
                    "MALFORMED_RESPONSE", f"get-acl response has an invalid entry: {entry!r}"
                )
            grants.append(
                AccessGrant(username=username, repo=repo, scope=Scope.from_wire(entry.get("scope")))
            )
        return grants

    def get_scope(self, username: str, repo: str) -> Scope:
        """
        Get the scope ``username`` holds on ``repo``.

        Returns:
            The user's scope; Scope.NONE if never granted
        """
        data = self.transport.call(
            "get-scope", body={"repos": [repo], "username": username}
        )
        scopes = _list_field(data, "scopes", "get-scope")
        if len(scopes) != 1:
            raise RemoteError(
                "MALFORMED_RESPONSE",
                f"expected 1 scope for {repo!r}, got {len(scopes)}",
            )
        return Scope.from_wire(scopes[0])

    def set_scope(self, username: str, scope: Scope | str, repo: str) -> None:
        """
        Set the scope ``username`` holds on ``repo`` to exactly ``scope``.

        Setting Scope.NONE revokes all access. Repeating a call is harmless.

        Raises:
            InvalidScopeError: If ``scope`` is not a scope name
            PermissionDeniedError: If the caller does not own the repo
        """
        target = coerce_scope(scope)
        self.transport.call(
            "set-scope",
            body={"repo": repo, "scope": str(target), "username": username},
        )

    def list_admins(self) -> set[str]:
        """Return the current cluster admins."""
        data = self.transport.call("get-admins", body={})
        admins = _list_field(data, "admins", "get-admins")
        if not all(isinstance(admin, str) for admin in admins):
            raise RemoteError("MALFORMED_RESPONSE", "get-admins response has a non-string admin")
        return set(admins)

    def modify_admins(
        self,
        add: Iterable[str] = (),
        remove: Iterable[str] = (),
    ) -> None:
        """
        Grant and revoke admin status in one call.

        Both lists are deltas against the current set, so concurrent changes
        by other admins are not overwritten.

        Args:
            add: Subjects to grant admin status
            remove: Subjects to revoke admin status

        Raises:
            ValidationError: If a subject appears in both lists
            PartiallyActivatedError: If the cluster is partially activated;
                the message explains how to recover
        """
        to_add = [s for s in dict.fromkeys(add) if s]
        to_remove = [s for s in dict.fromkeys(remove) if s]
        overlap = sorted(set(to_add) & set(to_remove))
        if overlap:
            raise ValidationError(
                f"cannot both add and remove admin(s): {', '.join(overlap)}"
            )

        try:
            self.transport.call(
                "modify-admins", body={"add": to_add, "remove": to_remove}
            )
        except PartiallyActivatedError as e:
            raise e.with_recovery_guidance() from e

    def get_auth_token(self, subject: str) -> Credential:
        """
        Get a token that authenticates its holder as ``subject``.

        Admin only. The token is returned, never stored as the caller's own
        session; hand it to ``subject`` (see SessionManager.use_delegated_token).

        Raises:
            PermissionDeniedError: If the caller is not a cluster admin
        """
        data = self.transport.call("get-auth-token", body={"subject": subject})
        credential = credential_from_response(data, "get-auth-token")
        if credential.subject is None:
            credential = Credential(
                token=credential.token,
                subject=subject,
                ttl_seconds=credential.ttl_seconds,
            )
        return credential
