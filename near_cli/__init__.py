"""near-cli: build NEAR transactions from partially specified command trees."""

from .assembler import assemble, equivalent_command
from .config import CLIConfig, ConfigurationError, NetworkConfig, load_cli_config
from .dispatch import (
    DispatchExecutionError,
    DispatchNotFoundError,
    ExternalProcessExitError,
    execute_external_subcommand,
)
from .prompts import PromptProvider, UserInputError
from .resolution import ArgumentStream, CommandLineError, ResolutionContext
from .rpc_client import NearRPCClient, RPCError, RPCTransportError
from .transaction import (
    AssemblyError,
    FunctionCallAction,
    FunctionView,
    StakeAction,
    TransactionBuilder,
    TransferAction,
    UnsignedTransaction,
)
from .validation import RPCAccountOracle, ValidationTransportError, check_account_id

__all__ = [
    "ArgumentStream",
    "AssemblyError",
    "CLIConfig",
    "CommandLineError",
    "ConfigurationError",
    "DispatchExecutionError",
    "DispatchNotFoundError",
    "ExternalProcessExitError",
    "FunctionCallAction",
    "FunctionView",
    "NearRPCClient",
    "NetworkConfig",
    "PromptProvider",
    "RPCAccountOracle",
    "RPCError",
    "RPCTransportError",
    "ResolutionContext",
    "StakeAction",
    "TransactionBuilder",
    "TransferAction",
    "UnsignedTransaction",
    "UserInputError",
    "ValidationTransportError",
    "assemble",
    "check_account_id",
    "equivalent_command",
    "execute_external_subcommand",
    "load_cli_config",
]
