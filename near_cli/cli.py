"""Command line interface for near-cli.

``near <command> [levels...]`` resolves the named command tree, prompting for
whatever the arguments leave out, then prints the resulting unsigned
transaction (or runs the read-only call). Unknown commands are delegated to
``near-<command>`` executables found in ``~/.near-cli/bin`` or on ``PATH``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .assembler import assemble, equivalent_command, selected_network
from .commands import command_names, parse_command
from .completions import COMPLETIONS_COMMAND, SHELLS, generate_completion_script
from .config import (
    CLIConfig,
    ConfigurationError,
    debug_enabled,
    load_cli_config,
    set_default_config_path,
)
from .dispatch import DispatchError, ExternalProcessExitError, execute_external_subcommand
from .pipeline import DisplayPipeline, ExecutionPipeline, ViewPipeline, run_pipeline
from .prompts import PromptProvider, UserInputError
from .resolution import CommandLineError, ResolutionContext
from .rpc_client import RPCError, RPCTransportError, format_rpc_hint
from .transaction import AssemblyError, FunctionView
from .validation import AccountOracle, RPCAccountOracle, ValidationTransportError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="near",
        description="near-cli is a toolbox for interacting with NEAR protocol",
        epilog=(
            f"commands: {', '.join(command_names())}, {COMPLETIONS_COMMAND}. "
            "Any other command runs the near-<command> executable if one is installed."
        ),
    )
    parser.add_argument("--config", help="Path to the YAML config file (default: ~/.near-cli.yaml)")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; menus take their first entry and missing values are errors",
    )
    parser.add_argument("command", nargs="?", help="Command to run; omit it to pick from a menu")
    parser.add_argument(
        "args", nargs=argparse.REMAINDER, help="Levels of the command, e.g. sender alice.testnet"
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    debug = verbose or debug_enabled()
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)


def cmd_generate_completions(argv: Sequence[str]) -> None:
    parser = argparse.ArgumentParser(prog=f"near {COMPLETIONS_COMMAND}")
    parser.add_argument("shell", choices=SHELLS, help="Shell to generate completions for")
    args = parser.parse_args(list(argv))
    sys.stdout.write(generate_completion_script(args.shell, command_names()))


def run_command(
    command: str | None,
    tokens: Sequence[str],
    config: CLIConfig,
    *,
    prompts: PromptProvider | None = None,
    oracle: AccountOracle | None = None,
    pipeline: ExecutionPipeline | None = None,
    view_pipeline: ViewPipeline | None = None,
) -> int:
    """Resolve, assemble and execute one command; return the exit code."""

    raw = parse_command(command, list(tokens))
    ctx = ResolutionContext(
        prompts=prompts or PromptProvider(),
        oracle=oracle or RPCAccountOracle(),
        config=config,
    )
    resolved = raw.resolve(ctx)
    result = assemble(resolved)
    network = selected_network(resolved)
    console_command = equivalent_command(resolved)
    logger.debug("Resolved command: %s", console_command)

    if isinstance(result, FunctionView):
        return run_pipeline((view_pipeline or ViewPipeline()).process(result, network))
    return run_pipeline((pipeline or DisplayPipeline(console_command)).process(result, network))


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    exit_code = 0
    try:
        if args.command == COMPLETIONS_COMMAND:
            cmd_generate_completions(args.args)
            return
        set_default_config_path(args.config)
        config = load_cli_config()
        if args.command is not None and args.command not in command_names():
            execute_external_subcommand(args.command, args.args, config.bin_dir)
            return
        prompts = PromptProvider(interactive=False if args.non_interactive else None)
        exit_code = run_command(args.command, args.args, config, prompts=prompts)
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")
        parser.exit(130)
    except ExternalProcessExitError as exc:
        sys.exit(exc.code)
    except (RPCError, RPCTransportError, ValidationTransportError) as exc:
        cause = exc.cause if isinstance(exc, ValidationTransportError) else exc
        hint = format_rpc_hint(cause) if isinstance(cause, (RPCError, RPCTransportError)) else None
        message = f"error: {exc}\n" + (f"Hint: {hint}\n" if hint else "")
        parser.exit(1, message)
    except (
        CommandLineError,
        ConfigurationError,
        UserInputError,
        AssemblyError,
        DispatchError,
    ) as exc:
        parser.exit(1, f"error: {exc}\n")
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main(sys.argv[1:])
