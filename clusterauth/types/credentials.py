"""Credential and session data models."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from clusterauth.types.subjects import RobotSubject, Subject


@dataclass(frozen=True)
class Credential:
    """
    An opaque bearer token plus optional subject and time-to-live.

    ``ttl_seconds`` is None when the cluster sent no TTL. A TTL of 0 also means
    the credential does not expire; it is never treated as already expired.
    """

    token: str
    subject: str | None = None
    ttl_seconds: int | None = None

    @property
    def has_expiration(self) -> bool:
        return self.ttl_seconds is not None and self.ttl_seconds > 0

    def expires_at(self, now: datetime) -> datetime | None:
        """Return the absolute expiration relative to ``now``, if any."""
        if not self.has_expiration:
            return None
        return now + timedelta(seconds=self.ttl_seconds)

    def __repr__(self) -> str:
        # Keep tokens out of tracebacks and logs.
        return (
            f"Credential(token='***', subject={self.subject!r}, "
            f"ttl_seconds={self.ttl_seconds!r})"
        )


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of activating auth on a cluster."""

    credential: Credential
    initial_admin: Subject | None

    @property
    def is_root_robot_token(self) -> bool:
        """True when the returned token belongs to a robot initial admin.

        Such a token is the cluster's root credential and cannot be
        recovered if lost, so callers must show it to the operator.
        """
        return isinstance(self.initial_admin, RobotSubject)


@dataclass(frozen=True)
class WhoAmIResult:
    """Identity the cluster resolved for the stored credential."""

    username: str
    ttl_seconds: int | None
    expires_at: datetime | None
