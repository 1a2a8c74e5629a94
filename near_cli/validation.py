"""Account existence checks used while resolving account IDs."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from .config import NetworkConfig
from .rpc_client import NearRPCClient, RPCError, RPCTransportError

logger = logging.getLogger(__name__)


class ValidationTransportError(RuntimeError):
    """Raised when the existence of an account could not be determined."""

    def __init__(self, account_id: str, network: NetworkConfig, cause: Exception) -> None:
        super().__init__(
            f"Could not check whether account <{account_id}> exists on {network.name}: {cause}"
        )
        self.account_id = account_id
        self.network = network
        self.cause = cause


class AccountOracle(Protocol):
    def account_exists(self, account_id: str, network: NetworkConfig) -> bool:
        ...


class RPCAccountOracle:
    """Answer existence queries with a ``view_account`` round trip."""

    def __init__(
        self, client_factory: Callable[[NetworkConfig], NearRPCClient] = NearRPCClient
    ) -> None:
        self._client_factory = client_factory
        self._clients: dict[str, NearRPCClient] = {}

    def account_exists(self, account_id: str, network: NetworkConfig) -> bool:
        client = self._clients.get(network.name)
        if client is None:
            client = self._client_factory(network)
            self._clients[network.name] = client
        return client.account_exists(account_id)


def check_account_id(
    oracle: AccountOracle, account_id: str, network: NetworkConfig | None
) -> bool | None:
    """Return ``True``/``False`` for found/not found, ``None`` when offline.

    Without a network the oracle is never consulted. Transport and RPC
    failures are raised as :class:`ValidationTransportError`; they are never
    reported as a missing account.
    """

    if network is None:
        return None
    logger.debug("Checking account %s on %s", account_id, network.name)
    try:
        return bool(oracle.account_exists(account_id, network))
    except (RPCError, RPCTransportError) as exc:
        raise ValidationTransportError(account_id, network, exc) from exc
