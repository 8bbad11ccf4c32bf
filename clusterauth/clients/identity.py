"""Identity exchange client.

Turns an external proof (an OAuth token from the identity provider) or a
one-time code into a cluster credential.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from clusterauth.exceptions import RemoteError, ValidationError
from clusterauth.types.credentials import Credential

if TYPE_CHECKING:
    from clusterauth.prompts import Prompter
    from clusterauth.transport import HTTPTransport

DEFAULT_AUTH_URL = (
    "https://github.com/login/oauth/authorize?client_id=d3481e92b4f09ea74ff8"
    "&redirect_uri=https%3A%2F%2Fpachyderm.io%2Flogin-hook%2Fdisplay-token.html"
)


@dataclass(frozen=True)
class AuthenticateRequest:
    """An authenticate request. Exactly one field must be set."""

    external_proof: str | None = None
    one_time_code: str | None = None

    def __post_init__(self) -> None:
        given = [v for v in (self.external_proof, self.one_time_code) if v]
        if len(given) != 1:
            raise ValidationError(
                "exactly one of an external proof or a one-time code is required"
            )

    def to_body(self) -> dict[str, str]:
        if self.external_proof:
            return {"externalProof": self.external_proof}
        return {"oneTimeCode": self.one_time_code or ""}


def ttl_from_response(data: dict[str, Any], operation: str) -> int | None:
    """
    Read ``ttlSeconds`` from a response.

    64-bit integers may arrive as JSON strings, so numeric text is accepted.

    Raises:
        RemoteError: If the value is not a whole number of seconds
    """
    ttl = data.get("ttlSeconds")
    if ttl is None:
        return None
    if isinstance(ttl, int) and not isinstance(ttl, bool):
        return ttl
    if isinstance(ttl, str):
        try:
            return int(ttl)
        except ValueError:
            pass
    raise RemoteError(
        "MALFORMED_RESPONSE", f"{operation} response has an invalid ttlSeconds: {ttl!r}"
    )


def credential_from_response(data: dict[str, Any], operation: str) -> Credential:
    """Build a Credential from a response carrying a token."""
    token = data.get("token")
    if not token or not isinstance(token, str):
        raise RemoteError("MALFORMED_RESPONSE", f"{operation} response has no token")
    subject = data.get("subject")
    return Credential(
        token=token,
        subject=subject if isinstance(subject, str) and subject else None,
        ttl_seconds=ttl_from_response(data, operation),
    )


class IdentityExchange:
    """Client for exchanging external proofs and one-time codes for credentials."""

    def __init__(
        self,
        transport: "HTTPTransport",
        prompter: "Prompter",
        auth_url: str = DEFAULT_AUTH_URL,
    ) -> None:
        """
        Initialize the identity exchange.

        Args:
            transport: HTTP transport for making requests
            prompter: Interactive input for proofs and codes
            auth_url: Identity-provider URL the operator visits for a proof
        """
        self.transport = transport
        self.prompter = prompter
        self.auth_url = auth_url

    def request_external_proof(self) -> str:
        """
        Ask the operator to sign in with the identity provider and paste the
        resulting token.

        Returns:
            The pasted proof

        Raises:
            ValidationError: If nothing was pasted
        """
        proof = self.prompter.prompt(
            "(1) Please paste this link into a browser:\n\n"
            f"{self.auth_url}\n\n"
            "(You will be asked to authorize the cluster's login app. If you "
            "accept, you will be given a token to paste here, which will give "
            "you an externally verified account in this cluster)\n\n"
            "(2) Please paste the token you receive here:"
        ).strip()
        if not proof:
            raise ValidationError("no token was entered")
        return proof

    def resolve_one_time_code(self, code: str | None = None) -> str:
        """Return ``code`` if given, otherwise prompt the operator for one."""
        if code is None:
            code = self.prompter.prompt("Please enter your One-Time Password:")
        code = code.strip()
        if not code:
            raise ValidationError("no One-Time Password was entered")
        return code

    def exchange_external_proof(self, proof: str) -> Credential:
        """
        Exchange an external-identity proof for a cluster credential.

        Raises:
            InvalidProofError: If the proof is invalid or expired
            PartiallyActivatedError: If the cluster is partially activated
        """
        return self._authenticate(AuthenticateRequest(external_proof=proof))

    def exchange_one_time_code(self, code: str) -> Credential:
        """
        Exchange a one-time code for a cluster credential.

        Raises:
            InvalidProofError: If the code is invalid or expired
            PartiallyActivatedError: If the cluster is partially activated
        """
        return self._authenticate(AuthenticateRequest(one_time_code=code))

    def _authenticate(self, request: AuthenticateRequest) -> Credential:
        data = self.transport.call(
            "authenticate", body=request.to_body(), authenticated=False
        )
        return credential_from_response(data, "authenticate")
