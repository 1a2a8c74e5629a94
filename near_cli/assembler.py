"""Fold a resolved command chain into the object handed to execution."""

from __future__ import annotations

import shlex

from .commands.network import ResolvedNetwork
from .config import NetworkConfig
from .resolution import ResolvedNode, iter_chain
from .transaction import FunctionView, TransactionBuilder, UnsignedTransaction


def new_builder(root: ResolvedNode) -> TransactionBuilder:
    for node in iter_chain(root):
        if node.builder_type is not None:
            return node.builder_type()
    return TransactionBuilder()


def assemble(root: ResolvedNode) -> UnsignedTransaction | FunctionView:
    """Walk *root* top-down letting each level write the fields it owns.

    A fresh builder is used on every call, so assembling the same chain twice
    yields equal results.
    """

    builder = new_builder(root)
    for node in iter_chain(root):
        node.apply(builder)
    return builder.build()


def selected_network(root: ResolvedNode) -> NetworkConfig | None:
    for node in iter_chain(root):
        if isinstance(node, ResolvedNetwork):
            return node.network
    return None


def equivalent_command(root: ResolvedNode, prefix: str = "near") -> str:
    """Return the command line that reproduces *root* without prompts."""

    tokens = [prefix]
    for node in iter_chain(root):
        tokens.extend(node.echo_tokens())
    return " ".join(shlex.quote(token) for token in tokens)
