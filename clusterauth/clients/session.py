"""Session lifecycle client.

Activates and deactivates auth on a cluster, and logs the caller in and out.
The only local state is the stored credential; the activation state lives on
the cluster and is only ever inferred from its responses.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from clusterauth.clients.identity import credential_from_response, ttl_from_response
from clusterauth.exceptions import (
    AbortedError,
    PartiallyActivatedError,
    RemoteError,
    ValidationError,
)
from clusterauth.logging import get_logger
from clusterauth.prompts import confirm
from clusterauth.types.credentials import ActivationResult, Credential, WhoAmIResult
from clusterauth.types.subjects import RobotSubject, Subject, parse_subject

if TYPE_CHECKING:
    from clusterauth.clients.identity import IdentityExchange
    from clusterauth.credentials import CredentialStore
    from clusterauth.prompts import Prompter
    from clusterauth.transport import HTTPTransport

logger = get_logger("session")

DEACTIVATE_CONFIRMATION = (
    "Are you sure you want to delete ALL auth information (ACLs, tokens, and "
    "admins) in this cluster, and expose ALL data? yN"
)


class LoginMode(Enum):
    """How login obtains proof of identity."""

    EXTERNAL_PROOF = "external-proof"
    ONE_TIME_CODE = "one-time-code"
    ONE_TIME_CODE_PROMPT = "one-time-code-prompt"

    @classmethod
    def resolve(cls, use_one_time_code: bool, one_time_code: str | None) -> "LoginMode":
        """Pick the mode implied by command-line style arguments."""
        if one_time_code:
            return cls.ONE_TIME_CODE
        if use_one_time_code:
            return cls.ONE_TIME_CODE_PROMPT
        return cls.EXTERNAL_PROOF


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Client for the activation lifecycle and the caller's own session."""

    def __init__(
        self,
        transport: "HTTPTransport",
        credential_store: "CredentialStore",
        identity: "IdentityExchange",
        prompter: "Prompter",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the session manager.

        Args:
            transport: HTTP transport for making requests
            credential_store: Where the session credential is persisted
            identity: Exchange used for proofs and one-time codes
            prompter: Interactive input for confirmations and pasted tokens
            clock: Source of the current time, for expiration reporting
        """
        self.transport = transport
        self.credential_store = credential_store
        self.identity = identity
        self.prompter = prompter
        self.clock = clock or _utcnow

    def activate(self, initial_admin: "Subject | str | None" = None) -> ActivationResult:
        """
        Activate auth on the cluster.

        A human initial admin (or none, meaning the operator) first proves
        their identity through the identity provider. A robot initial admin
        skips that step. The returned credential is persisted; for a robot
        admin it is also the cluster's root token and must be shown to the
        operator.

        Args:
            initial_admin: The first cluster admin (default: the operator)

        Returns:
            ActivationResult with the new credential

        Raises:
            AlreadyActiveError: If auth is already active
            PartiallyActivatedError: If activation previously failed midway
            ClusterConnectionError: If the cluster cannot be reached
            RemoteError: On other failures reported by the cluster
        """
        if isinstance(initial_admin, str):
            initial_admin = parse_subject(initial_admin)

        body: dict[str, Any] = {}
        if not isinstance(initial_admin, RobotSubject):
            body["externalProof"] = self.identity.request_external_proof()
        if initial_admin is not None:
            body["subject"] = str(initial_admin)

        logger.info("Activating auth (initial admin: %s)", initial_admin or "<operator>")
        try:
            data = self.transport.call("activate", body=body, authenticated=False)
        except PartiallyActivatedError as e:
            raise e.with_recovery_guidance() from e

        credential = credential_from_response(data, "activate")
        if credential.subject is None and initial_admin is not None:
            credential = Credential(
                token=credential.token,
                subject=str(initial_admin),
                ttl_seconds=credential.ttl_seconds,
            )
        self.credential_store.write(credential)

        result = ActivationResult(credential=credential, initial_admin=initial_admin)
        if result.is_root_robot_token:
            logger.warning(
                "Initial admin %s is a robot; its token is the cluster's root "
                "credential and cannot be recovered if lost",
                initial_admin,
            )
        return result

    def deactivate(self) -> None:
        """
        Deactivate auth, deleting all ACLs, tokens and admins on the cluster.

        Asks for confirmation first; the cluster is not contacted unless the
        operator agrees.

        Raises:
            AbortedError: If the operator declines
            RemoteError: On failures reported by the cluster
        """
        if not confirm(self.prompter, DEACTIVATE_CONFIRMATION):
            raise AbortedError()
        self.transport.call("deactivate", body={})
        logger.info("Deactivated auth")

    def login(
        self,
        mode: LoginMode | None = None,
        one_time_code: str | None = None,
    ) -> Credential:
        """
        Log in and persist the resulting credential.

        Args:
            mode: How to prove identity (default: inferred from one_time_code)
            one_time_code: Code to use with LoginMode.ONE_TIME_CODE

        Returns:
            The new credential, which replaces any stored one

        Raises:
            ValidationError: If mode and one_time_code disagree
            InvalidProofError: If the proof or code is rejected
            PartiallyActivatedError: If the cluster is partially activated;
                the message explains how to recover
        """
        if mode is None:
            mode = LoginMode.resolve(False, one_time_code)
        if mode is LoginMode.ONE_TIME_CODE and not one_time_code:
            raise ValidationError("a one-time code is required for this login mode")
        if mode is not LoginMode.ONE_TIME_CODE and one_time_code:
            raise ValidationError(f"login mode {mode.value} does not take a one-time code")

        try:
            if mode is LoginMode.EXTERNAL_PROOF:
                proof = self.identity.request_external_proof()
                credential = self.identity.exchange_external_proof(proof)
            else:
                code = self.identity.resolve_one_time_code(
                    one_time_code if mode is LoginMode.ONE_TIME_CODE else None
                )
                credential = self.identity.exchange_one_time_code(code)
        except PartiallyActivatedError as e:
            raise e.with_recovery_guidance() from e

        self.credential_store.write(credential)
        logger.info("Logged in as %s", credential.subject or "<unknown>")
        return credential

    def logout(self) -> None:
        """Delete the stored credential. Succeeds if none is stored."""
        self.credential_store.clear()

    def whoami(self) -> WhoAmIResult:
        """
        Ask the cluster who the stored credential belongs to.

        Raises:
            NotLoggedInError: If no credential is stored
        """
        data = self.transport.call("whoami", body={})
        username = data.get("username")
        if not isinstance(username, str):
            raise RemoteError("MALFORMED_RESPONSE", "whoami response has no username")
        ttl_seconds = ttl_from_response(data, "whoami")
        expires_at = None
        if ttl_seconds is not None and ttl_seconds > 0:
            expires_at = self.clock() + timedelta(seconds=ttl_seconds)
        return WhoAmIResult(
            username=username,
            ttl_seconds=ttl_seconds,
            expires_at=expires_at,
        )

    def use_delegated_token(self, token: str | None = None) -> Credential:
        """
        Persist a token issued on the caller's behalf.

        The token is not validated here; a bad token surfaces on first use.

        Args:
            token: The token (default: prompt the operator to paste it)

        Raises:
            ValidationError: If the token is blank
        """
        if token is None:
            token = self.prompter.prompt("Please paste your auth token:")
        token = token.strip()
        if not token:
            raise ValidationError("no auth token was entered")
        credential = Credential(token=token)
        self.credential_store.write(credential)
        return credential
