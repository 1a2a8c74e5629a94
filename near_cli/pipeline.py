"""Execution of assembled commands.

Resolution is blocking and finishes before anything here runs. Signing and
submitting transactions is left to an external signer: the default pipeline
prints the unsigned transaction so it can be signed later. Read-only calls
are executed directly against the selected network.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Protocol

from .config import ConfigurationError, NetworkConfig
from .rpc_client import NearRPCClient
from .transaction import FunctionView, UnsignedTransaction

logger = logging.getLogger(__name__)


class ExecutionPipeline(Protocol):
    async def process(
        self, transaction: UnsignedTransaction, network: NetworkConfig | None
    ) -> int:
        ...


class DisplayPipeline:
    """Print the unsigned transaction and the command that reproduces it."""

    def __init__(self, console_command: str | None = None) -> None:
        self.console_command = console_command

    async def process(
        self, transaction: UnsignedTransaction, network: NetworkConfig | None
    ) -> int:
        target = network.name if network is not None else "offline"
        logger.info(
            "Prepared transaction %s -> %s (%s)",
            transaction.signer_id,
            transaction.receiver_id,
            target,
        )
        print()
        for action in transaction.actions:
            print(
                f"{transaction.signer_id} -> {transaction.receiver_id}: {action.describe()}"
            )
        print("Unsigned transaction:")
        print(transaction.to_json())
        if self.console_command:
            print()
            print("Equivalent command:")
            print(f"  {self.console_command}")
        return 0


class ViewPipeline:
    """Run a read-only contract call and print its result."""

    def __init__(
        self, client_factory: Callable[[NetworkConfig], NearRPCClient] = NearRPCClient
    ) -> None:
        self._client_factory = client_factory

    async def process(self, view: FunctionView, network: NetworkConfig | None) -> int:
        if network is None:
            raise ConfigurationError("view calls need a network")
        client = self._client_factory(network)
        result: Any = await asyncio.to_thread(
            client.call_function, view.contract_id, view.method_name, view.args
        )
        print(json.dumps(result, indent=2) if not isinstance(result, str) else result)
        return 0


def run_pipeline(coro: Awaitable[int]) -> int:
    """Run *coro* as the single top-level task of this invocation."""

    async def _main() -> int:
        return await coro

    return asyncio.run(_main())
