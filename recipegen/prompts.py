"""Interactive prompting used while proposing recipes.

Prompts return an :data:`Outcome` instead of raising on cancellation so callers
branch on the answer explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Union

from rich.console import Console
from rich.prompt import Confirm, Prompt


@dataclass(frozen=True)
class Accepted:
    """The user accepted (or edited) a value."""

    value: str


@dataclass(frozen=True)
class Cancelled:
    """The user declined to answer."""


Outcome = Union[Accepted, Cancelled]


class Prompter(Protocol):
    def confirm_or_edit(self, message: str, proposal: str) -> Outcome:
        """Show ``proposal`` and return it, an edited replacement, or a cancellation."""

    def ask(
        self,
        message: str,
        default: Optional[str] = None,
        choices: Optional[Sequence[str]] = None,
    ) -> Outcome:
        """Ask for a free-form (or constrained) answer."""

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question."""


class ConsolePrompter:
    """Prompter backed by ``rich`` terminal prompts."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def confirm_or_edit(self, message: str, proposal: str) -> Outcome:
        self.console.print(message)
        self.console.print(proposal.rstrip(), markup=False, highlight=False)
        try:
            action = Prompt.ask(
                "Save this recipe?",
                choices=["accept", "edit", "cancel"],
                default="accept",
                console=self.console,
            )
            if action == "cancel":
                return Cancelled()
            if action == "accept":
                return Accepted(proposal)
            edited = Prompt.ask("Recipe", default=proposal.strip(), console=self.console)
        except (EOFError, KeyboardInterrupt):
            return Cancelled()
        return Accepted(edited) if edited.strip() else Cancelled()

    def ask(
        self,
        message: str,
        default: Optional[str] = None,
        choices: Optional[Sequence[str]] = None,
    ) -> Outcome:
        try:
            if choices:
                answer = Prompt.ask(
                    message, choices=list(choices), default=default, console=self.console
                )
            elif default is not None:
                answer = Prompt.ask(message, default=default, console=self.console)
            else:
                answer = Prompt.ask(message, console=self.console)
        except (EOFError, KeyboardInterrupt):
            return Cancelled()
        if answer is None or not str(answer).strip():
            return Cancelled()
        return Accepted(str(answer).strip())

    def confirm(self, message: str, default: bool = False) -> bool:
        try:
            return bool(Confirm.ask(message, default=default, console=self.console))
        except (EOFError, KeyboardInterrupt):
            return False


class AutoPrompter:
    """Non-interactive prompter: takes every proposal and default as given."""

    def confirm_or_edit(self, message: str, proposal: str) -> Outcome:
        return Accepted(proposal)

    def ask(
        self,
        message: str,
        default: Optional[str] = None,
        choices: Optional[Sequence[str]] = None,
    ) -> Outcome:
        if default is None:
            return Cancelled()
        return Accepted(default)

    def confirm(self, message: str, default: bool = False) -> bool:
        return default


__all__ = [
    "Accepted",
    "AutoPrompter",
    "Cancelled",
    "ConsolePrompter",
    "Outcome",
    "Prompter",
]
