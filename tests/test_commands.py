import shlex

import pytest

from near_cli.assembler import assemble, equivalent_command, selected_network
from near_cli.commands import TopLevelCommand, parse_command
from near_cli.commands.network import OFFLINE_MESSAGE, ONLINE_MESSAGE, ResolvedOffline
from near_cli.commands.transfer import CliTransfer, ResolvedTransfer
from near_cli.config import ConfigurationError
from near_cli.prompts import UserInputError
from near_cli.resolution import CommandLineError
from near_cli.transaction import (
    FunctionCallAction,
    FunctionView,
    StakeAction,
    TransferAction,
    UnsignedTransaction,
)

FULL_TRANSFER = [
    "network",
    "testnet",
    "sender",
    "alice.testnet",
    "receiver",
    "bob.testnet",
    "amount",
    "1.5 NEAR",
]


def test_fully_specified_transfer_needs_no_prompts(make_ctx) -> None:
    ctx = make_ctx(existing={"alice.testnet"})

    resolved = parse_command("transfer", FULL_TRANSFER).resolve(ctx)
    transaction = assemble(resolved)

    assert transaction == UnsignedTransaction(
        signer_id="alice.testnet",
        receiver_id="bob.testnet",
        actions=(TransferAction(deposit=1_500_000_000_000_000_000_000_000),),
    )
    assert ctx.prompts.questions == []
    assert ctx.prompts.menus == []
    assert ctx.oracle.calls == [("alice.testnet", "testnet")]
    assert selected_network(resolved).name == "testnet"


def test_rejected_sender_is_replaced_by_prompted_account(make_ctx, capsys) -> None:
    tokens = list(FULL_TRANSFER)
    tokens[3] = "ghost.testnet"
    ctx = make_ctx(answers=["alice.testnet"], existing={"alice.testnet"})

    transaction = assemble(parse_command("transfer", tokens).resolve(ctx))

    assert "Account <ghost.testnet> doesn't exist" in capsys.readouterr().out
    assert transaction.signer_id == "alice.testnet"
    assert transaction.receiver_id == "bob.testnet"


def test_empty_transfer_follows_second_menu_entry(make_ctx) -> None:
    ctx = make_ctx(
        answers=["alice.testnet", "bob.testnet", "2 NEAR"],
        selections=[1],
    )

    resolved = CliTransfer().resolve(ctx)

    assert isinstance(resolved, ResolvedTransfer)
    assert isinstance(resolved.child, ResolvedOffline)
    assert ctx.prompts.menus[0][1] == [ONLINE_MESSAGE, OFFLINE_MESSAGE]
    assert ctx.oracle.calls == []
    assert assemble(resolved).actions == (TransferAction(deposit=2 * 10**24),)
    assert "from alice.testnet to bob.testnet" in ctx.prompts.questions[-1]


def test_top_level_menu_starts_with_transfer(make_ctx) -> None:
    ctx = make_ctx(answers=["alice.testnet", "bob.testnet", "1 NEAR"], selections=[0, 1])

    resolved = parse_command(None, []).resolve(ctx)

    assert isinstance(resolved, TopLevelCommand)
    assert ctx.prompts.menus[0][1][0] == "Transfer NEAR tokens"
    assert assemble(resolved).signer_id == "alice.testnet"


def test_network_menu_lists_configured_networks(make_ctx) -> None:
    ctx = make_ctx(
        answers=["alice.testnet", "bob.near", "1 NEAR"],
        selections=[0, 1],
        existing={"alice.testnet"},
    )

    resolved = parse_command("transfer", []).resolve(ctx)

    assert ctx.prompts.menus[1] == ("Select the network", ["testnet", "mainnet"])
    assert selected_network(resolved).name == "mainnet"
    assert ctx.oracle.calls == [("alice.testnet", "mainnet")]


def test_interactive_change_method_uses_prompt_defaults(make_ctx) -> None:
    ctx = make_ctx(
        answers=["alice.testnet", "app.testnet", "set_greeting", '{"message": "hi"}', "", ""],
        selections=[0, 1],
    )

    transaction = assemble(parse_command("execute", []).resolve(ctx))

    assert transaction.signer_id == "alice.testnet"
    assert transaction.receiver_id == "app.testnet"
    assert transaction.actions == (
        FunctionCallAction(
            method_name="set_greeting",
            args={"message": "hi"},
            gas=30 * 10**12,
            deposit=0,
        ),
    )


def test_view_method_resolves_to_read_only_call(make_ctx) -> None:
    ctx = make_ctx(existing={"app.near"})
    tokens = [
        "view-method",
        "network",
        "mainnet",
        "contract",
        "app.near",
        "call",
        "get_greeting",
        "args",
        "{}",
    ]

    resolved = parse_command("execute", tokens).resolve(ctx)

    assert assemble(resolved) == FunctionView(
        contract_id="app.near", method_name="get_greeting", args={}
    )
    assert selected_network(resolved).name == "mainnet"
    assert ctx.oracle.calls == [("app.near", "mainnet")]


def test_stake_proposal_uses_validator_as_signer_and_receiver(make_ctx, validator_key) -> None:
    tokens = [
        "stake-proposal",
        "offline",
        "validator",
        "pool.testnet",
        "stake",
        "30000 NEAR",
        "public-key",
        validator_key,
    ]

    transaction = assemble(parse_command("add", tokens).resolve(make_ctx()))

    assert transaction.signer_id == "pool.testnet"
    assert transaction.receiver_id == "pool.testnet"
    assert transaction.actions == (StakeAction(stake=30000 * 10**24, public_key=validator_key),)


def test_equivalent_command_replays_without_prompts(make_ctx) -> None:
    first = make_ctx(answers=["alice.testnet", "bob.testnet", "1.5 NEAR"], selections=[1])
    resolved = parse_command("transfer", []).resolve(first)

    command = equivalent_command(resolved)

    assert command == (
        "near transfer offline sender alice.testnet receiver bob.testnet amount '1.5 NEAR'"
    )
    replay_ctx = make_ctx()
    _, name, *tokens = shlex.split(command)
    replayed = parse_command(name, tokens).resolve(replay_ctx)
    assert assemble(replayed) == assemble(resolved)
    assert replay_ctx.prompts.questions == []


def test_trailing_garbage_is_a_command_line_error() -> None:
    with pytest.raises(CommandLineError):
        parse_command("transfer", ["offline", "sender", "alice.testnet", "bogus"])


def test_malformed_amount_is_fatal(make_ctx) -> None:
    tokens = ["offline", "sender", "alice.testnet", "receiver", "bob.testnet", "amount", "lots"]

    with pytest.raises(UserInputError):
        parse_command("transfer", tokens).resolve(make_ctx())


def test_function_args_must_be_a_json_object(make_ctx) -> None:
    tokens = ["change-method", "offline", "sender", "alice.testnet", "contract", "app.testnet"]
    tokens += ["call", "go", "args", "[1, 2]"]

    with pytest.raises(UserInputError):
        parse_command("execute", tokens).resolve(make_ctx())


def test_unknown_network_name_is_rejected(make_ctx) -> None:
    with pytest.raises(ConfigurationError):
        parse_command("transfer", ["network", "betanet"]).resolve(make_ctx())


def test_offline_transfer_keeps_supplied_ids_verbatim(make_ctx) -> None:
    tokens = ["offline", "sender", "Alice.testnet", "receiver", "BOB", "amount", "1 NEAR"]

    resolved = parse_command("transfer", tokens).resolve(make_ctx())

    transaction = assemble(resolved)
    assert transaction.signer_id == "Alice.testnet"
    assert transaction.receiver_id == "BOB"
    assert "sender Alice.testnet receiver BOB" in equivalent_command(resolved)
