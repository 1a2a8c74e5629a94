"""Command trees reachable from the top-level ``near`` command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..resolution import ArgumentStream, RawNode, ResolutionContext, ResolvedNode, Variant
from .add import CliAdd
from .execute import CliExecute
from .transfer import CliTransfer


@dataclass(frozen=True)
class TopLevelCommand(ResolvedNode):
    child: ResolvedNode


class CliTopLevelCommand(RawNode):
    takes_value = False
    child_prompt = "Choose your action"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (
            Variant("Transfer NEAR tokens", CliTransfer),
            Variant("Execute a contract method", CliExecute),
            Variant("Add a stake proposal", CliAdd),
        )

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return TopLevelCommand(child=self.resolve_child(ctx))


def command_names() -> list[str]:
    return [variant.token for variant in CliTopLevelCommand.variants()]


def parse_command(command: str | None, tokens: list[str]) -> CliTopLevelCommand:
    """Parse ``command`` and its arguments; ``None`` leaves the choice to a menu."""

    stream = ArgumentStream(tokens)
    if command is None:
        stream.ensure_exhausted()
        return CliTopLevelCommand()
    stream = ArgumentStream([command, *tokens])
    raw = CliTopLevelCommand.from_args(stream)
    stream.ensure_exhausted()
    return raw


__all__ = ["CliTopLevelCommand", "TopLevelCommand", "command_names", "parse_command"]
