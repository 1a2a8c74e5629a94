"""``execute``: call a contract method.

``change-method`` builds a signed-later function call transaction::

    near execute change-method network testnet sender alice.testnet \
        contract app.testnet call set_greeting args '{"message": "hi"}' \
        gas "30 Tgas" deposit "0 NEAR"

``view-method`` runs a read-only query and prints the result; it always
needs a network::

    near execute view-method network mainnet contract app.near call get_greeting args '{}'
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict

from ..prompts import UserInputError
from ..resolution import RawNode, ResolutionContext, ResolvedNode, Variant, resolve_account_id
from ..transaction import FunctionCallAction, TransactionBuilder, ViewBuilder
from ..units import format_gas, format_near_amount, parse_gas, parse_near_amount
from .network import CONNECTION_PROMPT, OFFLINE_MESSAGE, ONLINE_MESSAGE, CliNetwork, CliOffline

DEFAULT_GAS = "30 Tgas"
DEFAULT_DEPOSIT = "0 NEAR"


def parse_function_args(raw: str) -> Dict[str, Any]:
    try:
        args = json.loads(raw)
    except ValueError as exc:
        raise UserInputError(f"function arguments are not valid JSON: {exc}") from exc
    if not isinstance(args, dict):
        raise UserInputError("function arguments must be a JSON object")
    return args


def validate_method_name(method_name: str) -> str:
    if not method_name or any(char.isspace() for char in method_name):
        raise UserInputError(f"'{method_name}' is not a valid method name")
    return method_name


@dataclass(frozen=True)
class ResolvedExecute(ResolvedNode):
    keyword = "execute"

    child: ResolvedNode


@dataclass(frozen=True)
class ChangeMethod(ResolvedNode):
    keyword = "change-method"

    child: ResolvedNode


@dataclass(frozen=True)
class ViewMethod(ResolvedNode):
    keyword = "view-method"
    builder_type = ViewBuilder

    child: ResolvedNode


@dataclass(frozen=True)
class Signer(ResolvedNode):
    keyword = "sender"

    signer_account_id: str
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.signer_account_id]

    def apply(self, builder: TransactionBuilder) -> None:
        builder.set_signer(self.signer_account_id)


@dataclass(frozen=True)
class Contract(ResolvedNode):
    keyword = "contract"

    contract_account_id: str
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.contract_account_id]

    def apply(self, builder: TransactionBuilder | ViewBuilder) -> None:
        builder.set_receiver(self.contract_account_id)


@dataclass(frozen=True)
class CallFunction(ResolvedNode):
    keyword = "call"

    method_name: str
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.method_name]


@dataclass(frozen=True)
class FunctionArgs(ResolvedNode):
    keyword = "args"

    args: Dict[str, Any]
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, json.dumps(self.args, separators=(",", ":"))]


@dataclass(frozen=True)
class PrepaidGas(ResolvedNode):
    keyword = "gas"

    gas: int
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, format_gas(self.gas)]


@dataclass(frozen=True)
class AttachedDeposit(ResolvedNode):
    keyword = "deposit"

    method_name: str
    args: Dict[str, Any]
    gas: int
    deposit: int

    def echo_tokens(self) -> list[str]:
        return [self.keyword, format_near_amount(self.deposit)]

    def apply(self, builder: TransactionBuilder) -> None:
        builder.set_payload(
            FunctionCallAction(
                method_name=self.method_name,
                args=self.args,
                gas=self.gas,
                deposit=self.deposit,
            )
        )


@dataclass(frozen=True)
class ViewArgs(ResolvedNode):
    keyword = "args"

    method_name: str
    args: Dict[str, Any]

    def echo_tokens(self) -> list[str]:
        return [self.keyword, json.dumps(self.args, separators=(",", ":"))]

    def apply(self, builder: ViewBuilder) -> None:
        builder.set_call(self.method_name, self.args)


class CliExecute(RawNode):
    keyword = "execute"
    takes_value = False
    child_prompt = "Choose your method"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (
            Variant("Change a method", CliChangeMethod),
            Variant("View a method", CliViewMethod),
        )

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return ResolvedExecute(child=self.resolve_child(ctx))


class CliChangeMethod(RawNode):
    keyword = "change-method"
    takes_value = False
    child_prompt = CONNECTION_PROMPT

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (
            Variant(ONLINE_MESSAGE, ChangeMethodNetwork),
            Variant(OFFLINE_MESSAGE, ChangeMethodOffline),
        )

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return ChangeMethod(child=self.resolve_child(ctx))


class CliViewMethod(RawNode):
    keyword = "view-method"
    takes_value = False

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant(ONLINE_MESSAGE, ViewMethodNetwork),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return ViewMethod(child=self.resolve_child(ctx))


class ChangeMethodNetwork(CliNetwork):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the signer", CliSigner),)


class ChangeMethodOffline(CliOffline):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the signer", CliSigner),)


class ViewMethodNetwork(CliNetwork):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the contract", CliViewContract),)


class CliSigner(RawNode):
    keyword = "sender"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the contract", CliContract),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        signer_account_id = resolve_account_id(
            self.value, "What is the account ID of the signer?", ctx
        )
        return Signer(signer_account_id=signer_account_id, child=self.resolve_child(ctx))


class CliContract(RawNode):
    keyword = "contract"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the method", CliCallFunction),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        contract_account_id = resolve_account_id(
            self.value, "What is the account ID of the contract?", ctx
        )
        return Contract(contract_account_id=contract_account_id, child=self.resolve_child(ctx))


class CliViewContract(CliContract):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the method", CliViewCallFunction),)


class CliCallFunction(RawNode):
    keyword = "call"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the arguments", CliFunctionArgs),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text("What is the name of the method?")
        method_name = validate_method_name(raw)
        return CallFunction(method_name=method_name, child=self.resolve_child(ctx, method_name))


class CliViewCallFunction(CliCallFunction):
    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the arguments", CliViewArgs),)


class CliFunctionArgs(RawNode):
    keyword = "args"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the prepaid gas", CliPrepaidGas),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        (method_name,) = ambient
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text(
                f"Enter the arguments to {method_name} as JSON", default="{}"
            )
        args = parse_function_args(raw)
        return FunctionArgs(args=args, child=self.resolve_child(ctx, method_name, args))


class CliViewArgs(RawNode):
    keyword = "args"

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        (method_name,) = ambient
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text(
                f"Enter the arguments to {method_name} as JSON", default="{}"
            )
        return ViewArgs(method_name=method_name, args=parse_function_args(raw))


class CliPrepaidGas(RawNode):
    keyword = "gas"

    @classmethod
    def variants(cls) -> tuple[Variant, ...]:
        return (Variant("Specify the attached deposit", CliAttachedDeposit),)

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        method_name, args = ambient
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text("How much gas do you want to attach?", default=DEFAULT_GAS)
        gas = parse_gas(raw)
        return PrepaidGas(gas=gas, child=self.resolve_child(ctx, method_name, args, gas))


class CliAttachedDeposit(RawNode):
    keyword = "deposit"

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        method_name, args, gas = ambient
        raw = self.value
        if raw is None:
            raw = ctx.prompts.input_text(
                "How many NEAR tokens do you want to attach?", default=DEFAULT_DEPOSIT
            )
        return AttachedDeposit(
            method_name=method_name,
            args=args,
            gas=gas,
            deposit=parse_near_amount(raw),
        )
