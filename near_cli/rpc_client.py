"""JSON-RPC client for NEAR protocol nodes.

The client backs the account-existence checks made while resolving commands
and the read-only ``view-method`` calls. It forwards well-typed requests and
surfaces errors clearly; it never signs or submits transactions.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Dict, Optional

import requests
from requests import RequestException, Response

from .config import NetworkConfig

logger = logging.getLogger(__name__)

UNKNOWN_ACCOUNT_CAUSE = "UNKNOWN_ACCOUNT"


class RPCError(RuntimeError):
    """Raised when the NEAR node responds with an RPC error."""

    def __init__(
        self,
        code: int,
        message: str,
        name: str | None = None,
        cause: str | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(f"RPC error {code}: {message}" + (f" ({cause})" if cause else ""))
        self.code = code
        self.message = message
        self.name = name
        self.cause = cause
        self.data = data

    @property
    def is_unknown_account(self) -> bool:
        if self.cause == UNKNOWN_ACCOUNT_CAUSE:
            return True
        # Older nodes only report the condition in the free-form data field.
        return "does not exist while viewing" in f"{self.message} {self.data or ''}"


class RPCTransportError(RuntimeError):
    """Raised when the RPC endpoint is unreachable or returns malformed data."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def format_rpc_hint(error_obj: RPCError | RPCTransportError | None) -> str | None:
    """Return a human-friendly hint for common NEAR JSON-RPC failures."""

    if error_obj is None:
        return None
    if isinstance(error_obj, RPCTransportError):
        if error_obj.status_code == 429:
            return (
                "The RPC endpoint is rate limiting requests. Wait a moment, or point NEAR_RPC_URL "
                "at a dedicated provider and set NEAR_RPC_API_KEY."
            )
        return None

    cause = error_obj.cause or ""
    if cause == "UNKNOWN_BLOCK":
        return "The node has not seen the requested block yet; retry once it has synced."
    if cause == "UNKNOWN_ACCESS_KEY":
        return "The access key is not registered for this account on the selected network."
    if cause == "NO_CONTRACT_CODE":
        return "The account exists but has no contract deployed; check the contract account ID."
    if "MethodNotFound" in error_obj.message or "MethodResolveError" in str(error_obj.data or ""):
        return "The contract does not export that method; double-check the method name."
    if cause == "TIMEOUT_ERROR":
        return "The node timed out processing the request; retry or switch networks."
    return None


class NearRPCClient:
    """Typed JSON-RPC client for NEAR nodes.

    Each helper maps directly to an RPC request and returns the parsed
    ``result`` member. The ``NEAR_RPC_URL`` and ``NEAR_RPC_API_KEY``
    environment variables (or ``~/.near-cli.yaml``) select the endpoint; see
    :func:`near_cli.config.load_cli_config`.
    """

    def __init__(self, network: NetworkConfig, session: requests.Session | None = None) -> None:
        self.network = network
        self._session = session or requests.Session()

    def call(self, method: str, params: Optional[Any] = None) -> Any:
        """Perform a JSON-RPC request."""

        payload = {
            "jsonrpc": "2.0",
            "id": "dontcare",
            "method": method,
            "params": params if params is not None else [],
        }
        headers = {"content-type": "application/json"}
        if self.network.api_key:
            headers["x-api-key"] = self.network.api_key
        logger.debug("RPC call %s params=%s network=%s", method, params, self.network.name)
        try:
            response = self._session.post(
                self.network.rpc_url,
                data=json.dumps(payload),
                headers=headers,
                timeout=self.network.timeout,
            )
        except RequestException as exc:
            logger.error(
                "RPC connection failed: %s",
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            raise RPCTransportError(
                f"RPC connection to {self.network.rpc_url} failed. Check your network connection "
                "and the rpc_url configured for this network."
            ) from exc
        try:
            self._raise_for_status(response)
        except requests.HTTPError as exc:
            raise RPCTransportError(
                f"RPC server returned an HTTP error ({response.status_code}); check the rpc_url "
                "and API key configured for this network.",
                status_code=response.status_code,
            ) from exc
        try:
            result = response.json()
        except ValueError as exc:
            logger.debug("RPC JSON parse error: %s", response.text, exc_info=True)
            raise RPCTransportError("RPC server returned malformed JSON") from exc
        if not isinstance(result, dict):
            raise RPCTransportError("RPC server returned an unexpected payload")
        if result.get("error"):
            raise self._rpc_error(result["error"])
        return result.get("result")

    @staticmethod
    def _rpc_error(error: Dict[str, Any]) -> RPCError:
        cause = error.get("cause")
        return RPCError(
            error.get("code", -1),
            error.get("message", "unknown"),
            name=error.get("name"),
            cause=cause.get("name") if isinstance(cause, dict) else None,
            data=error.get("data"),
        )

    def _raise_for_status(self, response: Response) -> None:
        # NEAR nodes report handler errors with a JSON body; those are
        # surfaced as RPCError by ``call`` rather than as transport errors.
        if not response.ok:
            try:
                err_body = response.json()
            except ValueError:
                err_body = response.text
            if isinstance(err_body, dict) and err_body.get("error"):
                logger.debug("RPC error body with HTTP %s: %s", response.status_code, err_body)
                return
            logger.error("RPC HTTP error %s from %s", response.status_code, response.url)
            logger.error("RPC error body: %s", err_body)
            if response.status_code == 401:
                raise RPCTransportError(
                    "Unauthorized (401). Ensure NEAR_RPC_API_KEY (or api_key in ~/.near-cli.yaml) "
                    "is valid for this endpoint.",
                    status_code=response.status_code,
                )
        response.raise_for_status()

    # Convenience wrappers -------------------------------------------------

    def status(self) -> Dict[str, Any]:
        return self.call("status", [])

    def query(self, request_type: str, **params: Any) -> Dict[str, Any]:
        body: Dict[str, Any] = {"request_type": request_type, "finality": "final"}
        body.update(params)
        return self.call("query", body)

    def view_account(self, account_id: str) -> Dict[str, Any]:
        return self.query("view_account", account_id=account_id)

    def account_exists(self, account_id: str) -> bool:
        """Return whether *account_id* exists; transport and other RPC errors propagate."""

        try:
            self.view_account(account_id)
        except RPCError as exc:
            if exc.is_unknown_account:
                logger.debug("Account %s not found on %s", account_id, self.network.name)
                return False
            raise
        return True

    def call_function(self, contract_id: str, method_name: str, args: Dict[str, Any]) -> Any:
        """Run a read-only contract method and decode its JSON result when possible."""

        args_base64 = base64.b64encode(
            json.dumps(args, separators=(",", ":")).encode("utf-8")
        ).decode("ascii")
        result = self.query(
            "call_function",
            account_id=contract_id,
            method_name=method_name,
            args_base64=args_base64,
        )
        for line in result.get("logs", []):
            logger.info("Contract log: %s", line)
        if result.get("error"):
            # Older nodes report contract failures inside a successful result.
            raise RPCError(-32000, str(result["error"]), name="CONTRACT_EXECUTION_ERROR")
        raw = bytes(result.get("result", []))
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return raw.hex()
