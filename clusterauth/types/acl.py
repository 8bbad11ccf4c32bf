"""Access-control data models."""

from dataclasses import dataclass
from enum import Enum

from clusterauth.scopes import Scope


@dataclass(frozen=True)
class AccessGrant:
    """One entry of a repo's access list."""

    username: str
    repo: str
    scope: Scope


class ActivationState(Enum):
    """Whether a cluster enforces access control.

    Never tracked locally. PARTIALLY_ACTIVE is inferred from the cluster's
    error kind and must not be treated as either of the other states.
    """

    INACTIVE = "inactive"
    ACTIVE = "active"
    PARTIALLY_ACTIVE = "partially_active"
