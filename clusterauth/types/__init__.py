"""clusterauth type definitions.

This module exports all data model types used by the client.
"""

from clusterauth.types.acl import AccessGrant, ActivationState
from clusterauth.types.credentials import ActivationResult, Credential, WhoAmIResult
from clusterauth.types.subjects import (
    ROBOT_PREFIX,
    HumanSubject,
    RobotSubject,
    Subject,
    parse_subject,
)

__all__ = [
    # Credentials
    "Credential",
    "ActivationResult",
    "WhoAmIResult",
    # Subjects
    "Subject",
    "HumanSubject",
    "RobotSubject",
    "ROBOT_PREFIX",
    "parse_subject",
    # Access control
    "AccessGrant",
    "ActivationState",
]
