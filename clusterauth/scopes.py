"""
Access scopes and their ordering.

A scope is the level of access a subject holds on a repo. Scopes are totally
ordered, so "has reader access" means ``scope >= Scope.READER``.
"""

from enum import IntEnum

from clusterauth.exceptions import InvalidScopeError, RemoteError


class Ordering(IntEnum):
    """Result of comparing two scopes."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


class Scope(IntEnum):
    """Access level granted to a subject on a repo."""

    NONE = 0
    READER = 1
    WRITER = 2
    OWNER = 3

    def __str__(self) -> str:
        return self.name.lower()

    def satisfies(self, required: "Scope") -> bool:
        """Return True if this scope is at least ``required``."""
        return self >= required

    @classmethod
    def from_wire(cls, value: object) -> "Scope":
        """
        Decode a scope sent by the cluster.

        Accepts the canonical lowercase name, the upper-case enum name, or
        the integer ordinal.

        Raises:
            RemoteError: If the value does not name a scope
        """
        if isinstance(value, bool):
            raise RemoteError("MALFORMED_RESPONSE", f"invalid scope in response: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            member = cls.__members__.get(value.upper())
            if member is not None and value in (member.name, str(member)):
                return member
        raise RemoteError("MALFORMED_RESPONSE", f"invalid scope in response: {value!r}")


SCOPE_NAMES: tuple[str, ...] = tuple(str(scope) for scope in Scope)


def parse_scope(text: str) -> Scope:
    """
    Parse user-supplied text into a Scope.

    Matching is exact and case-sensitive: "reader" parses, "Reader" does not.

    Args:
        text: One of "none", "reader", "writer", "owner"

    Returns:
        The matching Scope

    Raises:
        InvalidScopeError: If the text does not name a scope
    """
    for scope in Scope:
        if text == str(scope):
            return scope
    raise InvalidScopeError(text)


def coerce_scope(value: "Scope | str") -> Scope:
    """Return ``value`` as a Scope, parsing it if it is text."""
    if isinstance(value, Scope):
        return value
    return parse_scope(value)


def compare(a: Scope, b: Scope) -> Ordering:
    """Compare two scopes over NONE < READER < WRITER < OWNER."""
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


__all__ = [
    "Ordering",
    "Scope",
    "SCOPE_NAMES",
    "parse_scope",
    "coerce_scope",
    "compare",
]
