"""Subject identities.

A subject is either a human (authenticated through the identity provider) or
a robot (a machine identity that authenticates itself). The distinction is
made once, when text is parsed, and carried as a type afterwards.
"""

from dataclasses import dataclass

from clusterauth.exceptions import ValidationError

ROBOT_PREFIX = "robot:"


@dataclass(frozen=True)
class HumanSubject:
    """A person, identified through the external identity provider."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RobotSubject:
    """A machine identity. ``name`` excludes the robot prefix."""

    name: str

    def __str__(self) -> str:
        return f"{ROBOT_PREFIX}{self.name}"


Subject = HumanSubject | RobotSubject


def parse_subject(text: str | None) -> Subject | None:
    """
    Parse a subject from user input.

    Args:
        text: A username, or "robot:<name>" for a robot identity

    Returns:
        The tagged subject, or None for empty input

    Raises:
        ValidationError: If a robot prefix is given without a name
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    if text.startswith(ROBOT_PREFIX):
        name = text[len(ROBOT_PREFIX):]
        if not name:
            raise ValidationError(f"robot subject {text!r} has no name")
        return RobotSubject(name)
    return HumanSubject(text)
