import json

import pytest

from near_cli import cli
from near_cli.config import CLIConfig
from near_cli.prompts import PromptProvider
from near_cli.rpc_client import RPCTransportError
from near_cli.transaction import FunctionView

OFFLINE_TRANSFER = [
    "transfer",
    "offline",
    "sender",
    "alice.testnet",
    "receiver",
    "bob.testnet",
    "amount",
    "1.5 NEAR",
]


class ExistingAccounts:
    def __init__(self, *accounts: str) -> None:
        self.accounts = set(accounts)

    def account_exists(self, account_id, network) -> bool:
        return account_id in self.accounts


class RecordingPipeline:
    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.calls = []

    async def process(self, result, network) -> int:
        self.calls.append((result, network))
        return self.exit_code


@pytest.fixture
def cli_home(tmp_path, monkeypatch) -> CLIConfig:
    config = CLIConfig(home=tmp_path / "home")
    monkeypatch.setattr(cli, "load_cli_config", lambda **_kwargs: config)
    return config


def test_generate_shell_completions(capsys) -> None:
    cli.main(["generate-shell-completions", "bash"])

    assert capsys.readouterr().out == (
        'complete -W "transfer execute add generate-shell-completions" near\n'
    )


def test_offline_transfer_prints_unsigned_transaction(cli_home, capsys) -> None:
    cli.main(["--non-interactive", *OFFLINE_TRANSFER])

    out = capsys.readouterr().out
    assert "alice.testnet -> bob.testnet: transfer 1.5 NEAR" in out
    payload = out.split("Unsigned transaction:\n", 1)[1].split("\n\nEquivalent command:", 1)[0]
    assert json.loads(payload)["actions"] == [
        {"Transfer": {"deposit": "1500000000000000000000000"}}
    ]
    assert (
        "near transfer offline sender alice.testnet receiver bob.testnet amount '1.5 NEAR'" in out
    )


def test_malformed_amount_exits_with_error(cli_home, capsys) -> None:
    argv = ["--non-interactive", *OFFLINE_TRANSFER[:-1], "lots"]

    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 1
    assert "invalid NEAR amount 'lots'" in capsys.readouterr().err


def test_missing_value_without_terminal_is_an_error(cli_home, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--non-interactive", "transfer", "offline"])

    assert excinfo.value.code == 1
    assert "not interactive" in capsys.readouterr().err


def test_parse_errors_of_builtin_commands_are_not_delegated(cli_home, monkeypatch, capsys) -> None:
    def fail(*_args, **_kwargs):
        raise AssertionError("external dispatch must not run")

    monkeypatch.setattr(cli, "execute_external_subcommand", fail)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["transfer", "bogus"])

    assert excinfo.value.code == 1
    assert "unexpected argument 'bogus'" in capsys.readouterr().err


def test_run_command_sends_view_calls_to_view_pipeline(cli_home) -> None:
    view_pipeline = RecordingPipeline()
    tokens = ["view-method", "network", "testnet", "contract", "app.testnet"]
    tokens += ["call", "get_greeting", "args", '{"id": 1}']

    code = cli.run_command(
        "execute",
        tokens,
        cli_home,
        prompts=PromptProvider(interactive=False),
        oracle=ExistingAccounts("app.testnet"),
        pipeline=RecordingPipeline(exit_code=9),
        view_pipeline=view_pipeline,
    )

    assert code == 0
    view, network = view_pipeline.calls[0]
    assert view == FunctionView(contract_id="app.testnet", method_name="get_greeting", args={"id": 1})
    assert network.name == "testnet"


def test_run_command_returns_pipeline_exit_code(cli_home) -> None:
    pipeline = RecordingPipeline(exit_code=3)

    code = cli.run_command(
        "transfer",
        OFFLINE_TRANSFER[1:],
        cli_home,
        prompts=PromptProvider(interactive=False),
        oracle=ExistingAccounts(),
        pipeline=pipeline,
    )

    assert code == 3
    transaction, network = pipeline.calls[0]
    assert transaction.signer_id == "alice.testnet"
    assert network is None


class UnreachableOracle:
    def account_exists(self, account_id, network) -> bool:
        raise RPCTransportError("RPC server returned an HTTP error (429)", status_code=429)


def test_validation_transport_failure_exits_with_hint(cli_home, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "RPCAccountOracle", UnreachableOracle)
    argv = ["--non-interactive", "transfer", "network", "testnet", *OFFLINE_TRANSFER[2:]]

    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "error: Could not check whether account <alice.testnet> exists on testnet" in err
    assert "Hint: The RPC endpoint is rate limiting requests." in err


def test_textual_debug_flag_is_accepted(monkeypatch, capsys) -> None:
    monkeypatch.setenv("NEAR_CLI_DEBUG", "true")

    cli.main(["generate-shell-completions", "fish"])

    assert "complete -c near" in capsys.readouterr().out
