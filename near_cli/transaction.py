"""Transaction skeletons assembled from resolved command trees.

Only the fields the command tree decides are modelled here: signer,
receiver and the single action. Nonce, block hash, public key of the signer
and the signature belong to the signing collaborator that consumes
:class:`UnsignedTransaction`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from .units import format_gas, format_near_amount


class AssemblyError(RuntimeError):
    """Raised when a transaction skeleton would be incomplete or overwritten."""


@dataclass(frozen=True)
class TransferAction:
    deposit: int

    def to_dict(self) -> Dict[str, Any]:
        return {"Transfer": {"deposit": str(self.deposit)}}

    def describe(self) -> str:
        return f"transfer {format_near_amount(self.deposit)}"


@dataclass(frozen=True)
class FunctionCallAction:
    method_name: str
    args: Dict[str, Any]
    gas: int
    deposit: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "FunctionCall": {
                "method_name": self.method_name,
                "args": self.args,
                "gas": self.gas,
                "deposit": str(self.deposit),
            }
        }

    def describe(self) -> str:
        return (
            f"call {self.method_name} with {format_gas(self.gas)} "
            f"and {format_near_amount(self.deposit)} attached"
        )


@dataclass(frozen=True)
class StakeAction:
    stake: int
    public_key: str

    def to_dict(self) -> Dict[str, Any]:
        return {"Stake": {"stake": str(self.stake), "public_key": self.public_key}}

    def describe(self) -> str:
        return f"stake {format_near_amount(self.stake)} with key {self.public_key}"


Action = Union[TransferAction, FunctionCallAction, StakeAction]


@dataclass(frozen=True)
class UnsignedTransaction:
    """A transaction skeleton with every command-decided field populated."""

    signer_id: str
    receiver_id: str
    actions: tuple[Action, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signer_id": self.signer_id,
            "receiver_id": self.receiver_id,
            "actions": [action.to_dict() for action in self.actions],
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)


@dataclass(frozen=True)
class FunctionView:
    """A read-only contract call; it is queried, never signed."""

    contract_id: str
    method_name: str
    args: Dict[str, Any] = field(default_factory=dict)


_UNSET = object()


class TransactionBuilder:
    """Collect transaction fields, each written exactly once.

    Every level of a resolved command tree calls the setter for the field it
    owns. A second write to the same field raises :class:`AssemblyError`, as
    does :meth:`build` while a field is still missing.
    """

    def __init__(self) -> None:
        self._fields: Dict[str, Any] = {
            "signer_id": _UNSET,
            "receiver_id": _UNSET,
            "payload": _UNSET,
        }

    def _set(self, name: str, value: Any) -> "TransactionBuilder":
        current = self._fields[name]
        if current is not _UNSET:
            raise AssemblyError(f"{name} already set to {current!r}; refusing to set {value!r}")
        self._fields[name] = value
        return self

    def set_signer(self, signer_id: str) -> "TransactionBuilder":
        return self._set("signer_id", signer_id)

    def set_receiver(self, receiver_id: str) -> "TransactionBuilder":
        return self._set("receiver_id", receiver_id)

    def set_payload(self, action: Action) -> "TransactionBuilder":
        return self._set("payload", action)

    def _missing(self) -> list[str]:
        return [name for name, value in self._fields.items() if value is _UNSET]

    def build(self) -> UnsignedTransaction:
        missing = self._missing()
        if missing:
            raise AssemblyError(f"transaction is missing: {', '.join(missing)}")
        return UnsignedTransaction(
            signer_id=self._fields["signer_id"],
            receiver_id=self._fields["receiver_id"],
            actions=(self._fields["payload"],),
        )


class ViewBuilder(TransactionBuilder):
    """Collect the contract and method of a read-only call."""

    def __init__(self) -> None:
        self._fields = {"receiver_id": _UNSET, "payload": _UNSET}

    def set_signer(self, signer_id: str) -> "TransactionBuilder":
        raise AssemblyError("read-only calls have no signer")

    def set_call(self, method_name: str, args: Dict[str, Any]) -> "ViewBuilder":
        self._set("payload", (method_name, args))
        return self

    def build(self) -> FunctionView:  # type: ignore[override]
        missing = self._missing()
        if missing:
            raise AssemblyError(f"view call is missing: {', '.join(missing)}")
        method_name, args = self._fields["payload"]
        return FunctionView(
            contract_id=self._fields["receiver_id"], method_name=method_name, args=args
        )
