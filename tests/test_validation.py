import pytest

from near_cli.config import BUILTIN_NETWORKS
from near_cli.rpc_client import RPCError
from near_cli.validation import RPCAccountOracle, ValidationTransportError, check_account_id


class StubClient:
    def __init__(self, network, existing=(), error=None) -> None:
        self.network = network
        self.existing = set(existing)
        self.error = error
        self.checked: list[str] = []

    def account_exists(self, account_id: str) -> bool:
        self.checked.append(account_id)
        if self.error is not None:
            raise self.error
        return account_id in self.existing


class RecordingFactory:
    def __init__(self, **client_kwargs) -> None:
        self.client_kwargs = client_kwargs
        self.clients: list[StubClient] = []

    def __call__(self, network) -> StubClient:
        client = StubClient(network, **self.client_kwargs)
        self.clients.append(client)
        return client


def test_offline_check_never_consults_the_oracle() -> None:
    factory = RecordingFactory()

    assert check_account_id(RPCAccountOracle(factory), "alice.testnet", None) is None
    assert factory.clients == []


def test_found_and_missing_accounts() -> None:
    oracle = RPCAccountOracle(RecordingFactory(existing={"alice.testnet"}))
    testnet = BUILTIN_NETWORKS["testnet"]

    assert check_account_id(oracle, "alice.testnet", testnet) is True
    assert check_account_id(oracle, "ghost.testnet", testnet) is False


def test_rpc_failure_is_not_reported_as_missing() -> None:
    failure = RPCError(-32000, "Server error", cause="TIMEOUT_ERROR")
    oracle = RPCAccountOracle(RecordingFactory(error=failure))

    with pytest.raises(ValidationTransportError) as excinfo:
        check_account_id(oracle, "alice.testnet", BUILTIN_NETWORKS["mainnet"])

    assert excinfo.value.cause is failure
    assert excinfo.value.network.name == "mainnet"
    assert "alice.testnet" in str(excinfo.value)


def test_oracle_keeps_one_client_per_network() -> None:
    factory = RecordingFactory(existing={"alice.testnet"})
    oracle = RPCAccountOracle(factory)

    oracle.account_exists("alice.testnet", BUILTIN_NETWORKS["testnet"])
    oracle.account_exists("bob.testnet", BUILTIN_NETWORKS["testnet"])
    oracle.account_exists("alice.near", BUILTIN_NETWORKS["mainnet"])

    assert [client.network.name for client in factory.clients] == ["testnet", "mainnet"]
    assert factory.clients[0].checked == ["alice.testnet", "bob.testnet"]
