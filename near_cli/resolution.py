"""Resolution of partially specified command trees.

Every command level is a ``<keyword> [value]`` pair followed by the keyword of
its child level. :class:`RawNode` subclasses hold what was typed; resolving
one fills in the missing value (prompting, and checking account existence
when a network is selected) and then resolves the child, choosing it from a
menu when the command line stopped early. The result is a chain of
:class:`ResolvedNode` objects with every value present.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from dataclasses import dataclass, replace
from typing import Any, ClassVar, Collection, Iterable, Iterator, Optional

from .config import CLIConfig, NetworkConfig
from .prompts import PromptProvider, UserInputError
from .validation import AccountOracle, check_account_id

logger = logging.getLogger(__name__)

_ACCOUNT_ID_RE = re.compile(r"^(([a-z\d]+[\-_])*[a-z\d]+\.)*([a-z\d]+[\-_])*[a-z\d]+$")


class CommandLineError(ValueError):
    """Raised when command line tokens do not fit the command tree."""


class ArgumentStream:
    """Remaining command line tokens, consumed one level at a time."""

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._tokens = deque(tokens)

    def __bool__(self) -> bool:
        return bool(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def peek(self) -> str | None:
        return self._tokens[0] if self._tokens else None

    def pop(self) -> str:
        if not self._tokens:
            raise CommandLineError("unexpected end of arguments")
        return self._tokens.popleft()

    def pop_value(self, keywords: Collection[str]) -> str | None:
        """Pop the next token as a value unless it names a child level."""

        token = self.peek()
        if token is None or token in keywords:
            return None
        return self._tokens.popleft()

    def pop_keyword(self, keywords: Collection[str]) -> str | None:
        token = self.peek()
        if token is None:
            return None
        if token not in keywords:
            expected = ", ".join(keywords) if keywords else "nothing"
            raise CommandLineError(f"unexpected argument '{token}' (expected {expected})")
        return self._tokens.popleft()

    def ensure_exhausted(self) -> None:
        if self._tokens:
            raise CommandLineError(f"unexpected trailing arguments: {' '.join(self._tokens)}")


@dataclass(frozen=True)
class ResolutionContext:
    """Collaborators shared by every level of one resolution run."""

    prompts: PromptProvider
    oracle: AccountOracle
    config: CLIConfig
    network: NetworkConfig | None = None

    def with_network(self, network: NetworkConfig | None) -> "ResolutionContext":
        return replace(self, network=network)


@dataclass(frozen=True)
class Variant:
    """One entry of a child menu; ``raw_type()`` is its empty default node."""

    message: str
    raw_type: type["RawNode"]

    @property
    def token(self) -> str:
        return self.raw_type.keyword


def choose_variant(variants: tuple[Variant, ...], prompt: str, ctx: ResolutionContext) -> "RawNode":
    """Ask the operator to pick a variant; the first one is the default.

    A lone variant is taken without showing a menu.
    """

    if len(variants) == 1:
        return variants[0].raw_type()
    index = ctx.prompts.select(prompt, [variant.message for variant in variants], default=0)
    chosen = variants[index]
    logger.debug("Selected %s from menu '%s'", chosen.token, prompt)
    return chosen.raw_type()


def validate_account_id(account_id: str) -> str:
    if not 2 <= len(account_id) <= 64 or not _ACCOUNT_ID_RE.match(account_id):
        raise UserInputError(f"'{account_id}' is not a valid NEAR account ID")
    return account_id


def resolve_account_id(
    supplied: str | None,
    question: str,
    ctx: ResolutionContext,
    *,
    validate: bool = True,
) -> str:
    """Return a usable account ID for one level.

    A supplied value is checked against the oracle when a network is
    selected; if the account is missing the operator is told and asked
    again, as many times as it takes. Offline, a supplied value is taken as
    given, without even a format check; prompted answers are always checked
    against the account ID grammar.
    Oracle failures propagate as
    :class:`~near_cli.validation.ValidationTransportError`.
    """

    if supplied is not None:
        if ctx.network is None:
            return supplied
        validate_account_id(supplied)
        if not validate or check_account_id(ctx.oracle, supplied, ctx.network) is not False:
            return supplied
        print(f"Account <{supplied}> doesn't exist")
    while True:
        account_id = validate_account_id(ctx.prompts.input_text(question))
        if not validate or check_account_id(ctx.oracle, account_id, ctx.network) is not False:
            return account_id
        print(f"Account <{account_id}> doesn't exist")


class ResolvedNode:
    """A fully resolved command level.

    Subclasses are frozen dataclasses holding this level's value and a
    ``child`` that is ``None`` only for terminal levels.
    """

    keyword: ClassVar[str] = ""
    builder_type: ClassVar[Optional[type]] = None

    def echo_tokens(self) -> list[str]:
        return [self.keyword] if self.keyword else []

    def apply(self, builder: Any) -> None:
        """Write the field(s) this level owns into *builder*."""


def iter_chain(root: ResolvedNode) -> Iterator[ResolvedNode]:
    node: ResolvedNode | None = root
    while node is not None:
        yield node
        node = getattr(node, "child", None)


@dataclass
class RawNode:
    """A command level as typed on the command line; every part is optional."""

    value: str | None = None
    child: Optional["RawNode"] = None

    keyword: ClassVar[str] = ""
    takes_value: ClassVar[bool] = True
    child_prompt: ClassVar[str] = ""

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        """Child levels in menu order; empty for terminal levels."""

        return ()

    @classmethod
    def from_args(cls, stream: ArgumentStream) -> "RawNode":
        """Consume this level's value and its child from *stream*."""

        variants = cls.variants()
        keywords = [variant.token for variant in variants]
        value = stream.pop_value(keywords) if cls.takes_value else None
        child = None
        token = stream.pop_keyword(keywords) if variants else None
        if token is not None:
            variant = next(item for item in variants if item.token == token)
            child = variant.raw_type.from_args(stream)
        return cls(value=value, child=child)

    def resolve_child(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        variants = self.variants()
        raw = self.child if self.child is not None else choose_variant(variants, self.child_prompt, ctx)
        return raw.resolve(ctx, *ambient)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        raise NotImplementedError
