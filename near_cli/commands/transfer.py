"""``transfer``: send NEAR tokens from a sender to a receiver.

    near transfer network testnet sender alice.testnet receiver bob.testnet amount "1 NEAR"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..resolution import RawNode, ResolutionContext, ResolvedNode, Variant, resolve_account_id
from ..transaction import TransactionBuilder, TransferAction
from ..units import format_near_amount, parse_near_amount
from .network import CONNECTION_PROMPT, OFFLINE_MESSAGE, ONLINE_MESSAGE, CliNetwork, CliOffline


@dataclass(frozen=True)
class ResolvedTransfer(ResolvedNode):
    keyword = "transfer"

    child: ResolvedNode


@dataclass(frozen=True)
class Sender(ResolvedNode):
    keyword = "sender"

    sender_account_id: str
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.sender_account_id]

    def apply(self, builder: TransactionBuilder) -> None:
        builder.set_signer(self.sender_account_id)


@dataclass(frozen=True)
class Receiver(ResolvedNode):
    keyword = "receiver"

    receiver_account_id: str
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.receiver_account_id]

    def apply(self, builder: TransactionBuilder) -> None:
        builder.set_receiver(self.receiver_account_id)


@dataclass(frozen=True)
class TransferAmount(ResolvedNode):
    keyword = "amount"

    deposit: int

    def echo_tokens(self) -> list[str]:
        return [self.keyword, format_near_amount(self.deposit)]

    def apply(self, builder: TransactionBuilder) -> None:
        builder.set_payload(TransferAction(deposit=self.deposit))


class CliTransfer(RawNode):
    keyword = "transfer"
    takes_value = False
    child_prompt = CONNECTION_PROMPT

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (
            Variant(ONLINE_MESSAGE, TransferNetwork),
            Variant(OFFLINE_MESSAGE, TransferOffline),
        )

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return ResolvedTransfer(child=self.resolve_child(ctx))


class TransferNetwork(CliNetwork):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the sender", CliSender),)


class TransferOffline(CliOffline):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the sender", CliSender),)


class CliSender(RawNode):
    keyword = "sender"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify a receiver", CliReceiver),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        sender_account_id = resolve_account_id(
            self.value, "What is the account ID of the sender?", ctx
        )
        return Sender(
            sender_account_id=sender_account_id,
            child=self.resolve_child(ctx, sender_account_id),
        )


class CliReceiver(RawNode):
    keyword = "receiver"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the amount", CliTransferAmount),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        (sender_account_id,) = ambient
        # Transfers may create implicit accounts, so the receiver is not
        # required to exist yet.
        receiver_account_id = resolve_account_id(
            self.value, "What is the account ID of the receiver?", ctx, validate=False
        )
        return Receiver(
            receiver_account_id=receiver_account_id,
            child=self.resolve_child(ctx, sender_account_id, receiver_account_id),
        )


class CliTransferAmount(RawNode):
    keyword = "amount"

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        sender_account_id, receiver_account_id = ambient
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text(
                f"How many NEAR tokens do you want to transfer from {sender_account_id} "
                f"to {receiver_account_id}? (e.g. 1.5 NEAR)"
            )
        return TransferAmount(deposit=parse_near_amount(raw))
