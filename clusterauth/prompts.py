"""
Interactive operator input.

Every interactive step (pasting a proof, a one-time code or a delegated token,
confirming a destructive action) goes through one injected Prompter, so tests
can supply canned answers.
"""

import sys
from abc import ABC, abstractmethod

import typer

from clusterauth.exceptions import AbortedError


class Prompter(ABC):
    """Show a message and block until the operator enters one line."""

    @abstractmethod
    def prompt(self, message: str) -> str:
        """
        Show ``message`` and return the line entered, without its newline.

        Raises:
            AbortedError: If input is closed before a line is read
        """
        pass


class ConsolePrompter(Prompter):
    """Prompter reading from stdin and writing prompts to the terminal."""

    def __init__(self, err: bool = False) -> None:
        """
        Args:
            err: Write prompts to stderr so stdout stays scriptable
        """
        self.err = err

    def prompt(self, message: str) -> str:
        typer.echo(message, err=self.err)
        line = sys.stdin.readline()
        if not line:
            raise AbortedError("input closed before an answer was read")
        return line.rstrip("\r\n")


def confirm(prompter: Prompter, message: str) -> bool:
    """Ask a yes/no question. Only an answer starting with y or Y is a yes."""
    answer = prompter.prompt(message).strip()
    return answer[:1] in ("y", "Y")


__all__ = ["Prompter", "ConsolePrompter", "confirm"]
