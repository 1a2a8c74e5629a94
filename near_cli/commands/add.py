"""``add stake-proposal``: propose a validator stake.

    near add stake-proposal network testnet validator pool.testnet \
        stake "30000 NEAR" public-key ed25519:...
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..prompts import UserInputError
from ..resolution import RawNode, ResolutionContext, ResolvedNode, Variant, resolve_account_id
from ..transaction import StakeAction, TransactionBuilder
from ..units import format_near_amount, parse_near_amount
from .network import CONNECTION_PROMPT, OFFLINE_MESSAGE, ONLINE_MESSAGE, CliNetwork, CliOffline

_PUBLIC_KEY_RE = re.compile(r"^ed25519:[1-9A-HJ-NP-Za-km-z]{43,44}$")


def validate_public_key(public_key: str) -> str:
    if not _PUBLIC_KEY_RE.match(public_key):
        raise UserInputError(f"'{public_key}' is not an ed25519:<base58> public key")
    return public_key


@dataclass(frozen=True)
class ResolvedAdd(ResolvedNode):
    keyword = "add"

    child: ResolvedNode


@dataclass(frozen=True)
class StakeProposal(ResolvedNode):
    keyword = "stake-proposal"

    child: ResolvedNode


@dataclass(frozen=True)
class Validator(ResolvedNode):
    keyword = "validator"

    validator_account_id: str
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.validator_account_id]

    def apply(self, builder: TransactionBuilder) -> None:
        # A stake proposal is a transaction from the validator to itself.
        builder.set_signer(self.validator_account_id)
        builder.set_receiver(self.validator_account_id)


@dataclass(frozen=True)
class StakeAmount(ResolvedNode):
    keyword = "stake"

    stake: int
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, format_near_amount(self.stake)]


@dataclass(frozen=True)
class ValidatorKey(ResolvedNode):
    keyword = "public-key"

    stake: int
    public_key: str

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.public_key]

    def apply(self, builder: TransactionBuilder) -> None:
        builder.set_payload(StakeAction(stake=self.stake, public_key=self.public_key))


class CliAdd(RawNode):
    keyword = "add"
    takes_value = False
    child_prompt = "What do you want to add?"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Add a stake proposal", CliStakeProposal),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return ResolvedAdd(child=self.resolve_child(ctx))


class CliStakeProposal(RawNode):
    keyword = "stake-proposal"
    takes_value = False
    child_prompt = CONNECTION_PROMPT

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (
            Variant(ONLINE_MESSAGE, StakeProposalNetwork),
            Variant(OFFLINE_MESSAGE, StakeProposalOffline),
        )

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return StakeProposal(child=self.resolve_child(ctx))


class StakeProposalNetwork(CliNetwork):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the validator", CliValidator),)


class StakeProposalOffline(CliOffline):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the validator", CliValidator),)


class CliValidator(RawNode):
    keyword = "validator"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the stake", CliStakeAmount),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        validator_account_id = resolve_account_id(
            self.value, "What is the account ID of the validator?", ctx
        )
        return Validator(validator_account_id=validator_account_id, child=self.resolve_child(ctx))


class CliStakeAmount(RawNode):
    keyword = "stake"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the validator public key", CliValidatorKey),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text("How many NEAR tokens do you want to stake?")
        stake = parse_near_amount(raw)
        return StakeAmount(stake=stake, child=self.resolve_child(ctx, stake))


class CliValidatorKey(RawNode):
    keyword = "public-key"

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        (stake,) = ambient
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text("What is the validator's public key? (ed25519:...)")
        return ValidatorKey(stake=stake, public_key=validate_public_key(raw))
