"""Interactive text and menu prompts used while resolving commands."""

from __future__ import annotations

import sys
from typing import Sequence


class UserInputError(ValueError):
    """Raised when interactive input is malformed or cannot be collected."""


class PromptProvider:
    """Read answers from the operator via :func:`input`.

    ``interactive=None`` detects a TTY on stdin. A non-interactive provider
    answers every menu with its default entry and refuses free-text questions,
    since there is nobody to type an account ID.
    """

    def __init__(self, interactive: bool | None = None) -> None:
        if interactive is None:
            interactive = sys.stdin is not None and sys.stdin.isatty()
        self.interactive = interactive

    def input_text(self, prompt: str, default: str | None = None) -> str:
        """Prompt for a string value, honoring an optional default."""

        if not self.interactive:
            if default is not None:
                return default
            raise UserInputError(f"{prompt} (no value supplied and input is not interactive)")
        suffix = f" [{default}]" if default is not None else ""
        print()
        while True:
            try:
                raw = input(f"{prompt}{suffix}: ").strip()
            except EOFError as exc:
                raise UserInputError(f"{prompt} (input closed)") from exc
            if raw:
                return raw
            if default is not None:
                return default
            print("Please enter a value.")

    def select(self, prompt: str, items: Sequence[str], default: int = 0) -> int:
        """Show a numbered single-choice menu and return the selected index.

        Items keep their declaration order; blank input picks *default*.
        """

        if not items:
            raise UserInputError(f"{prompt}: nothing to choose from")
        if not self.interactive:
            return default
        print()
        print(prompt)
        for index, item in enumerate(items, start=1):
            marker = ">" if index - 1 == default else " "
            print(f" {marker} [{index}] {item}")
        while True:
            try:
                raw = input(f"Selection [{default + 1}]: ").strip()
            except EOFError as exc:
                raise UserInputError(f"{prompt} (input closed)") from exc
            if not raw:
                return default
            if raw.isdigit() and 1 <= int(raw) <= len(items):
                return int(raw) - 1
            print("Invalid selection, please try again.")
