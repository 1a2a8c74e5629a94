"""Shared configuration loader for near-cli."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".near-cli.yaml"
DEFAULT_HOME = Path.home() / ".near-cli"
DEFAULT_TIMEOUT = 30.0
_CONFIG_PATH_OVERRIDE: Path | None = None


@dataclass(frozen=True)
class NetworkConfig:
    """Connection details for one NEAR network.

    Instances are passed by reference down the command tree and are never
    mutated after loading.
    """

    name: str
    rpc_url: str
    wallet_url: str | None = None
    explorer_url: str | None = None
    api_key: str | None = None
    timeout: float = DEFAULT_TIMEOUT


BUILTIN_NETWORKS: dict[str, NetworkConfig] = {
    "testnet": NetworkConfig(
        name="testnet",
        rpc_url="https://rpc.testnet.near.org",
        wallet_url="https://wallet.testnet.near.org",
        explorer_url="https://explorer.testnet.near.org",
    ),
    "mainnet": NetworkConfig(
        name="mainnet",
        rpc_url="https://rpc.mainnet.near.org",
        wallet_url="https://wallet.near.org",
        explorer_url="https://explorer.near.org",
    ),
}


@dataclass
class CLIConfig:
    """Resolved configuration for a single invocation."""

    networks: dict[str, NetworkConfig] = field(default_factory=lambda: dict(BUILTIN_NETWORKS))
    home: Path = DEFAULT_HOME

    @property
    def bin_dir(self) -> Path:
        return self.home / "bin"

    def network_names(self) -> list[str]:
        return list(self.networks)

    def get_network(self, name: str) -> NetworkConfig:
        try:
            return self.networks[name]
        except KeyError as exc:
            known = ", ".join(self.networks) or "none"
            raise ConfigurationError(f"Unknown network '{name}' (configured: {known})") from exc


def set_default_config_path(path: str | Path | None) -> None:
    """Remember a user-supplied config path for future loads."""

    global _CONFIG_PATH_OVERRIDE
    _CONFIG_PATH_OVERRIDE = Path(path).expanduser() if path else None


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML mapping")
    return loaded


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "no", "n", "off", ""}:
            return False
    return None


def debug_enabled(env: Mapping[str, str] | None = None) -> bool:
    """Return whether ``NEAR_CLI_DEBUG`` asks for debug logging."""

    env_map = os.environ if env is None else env
    return bool(_first_value(_coerce_bool(env_map.get("NEAR_CLI_DEBUG")), default=False))


def _coerce_timeout(raw: Any, *, source: str) -> float | None:
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid timeout in {source}: {raw}") from exc
    if value <= 0:
        raise ConfigurationError(f"Timeout in {source} must be positive: {raw}")
    return value


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def _validate_rpc_url(raw: Any, *, source: str) -> str:
    if not isinstance(raw, str) or not raw:
        raise ConfigurationError(f"Missing rpc_url in {source}")
    parsed = urlparse(raw)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise ConfigurationError(f"Invalid RPC endpoint URL in {source}: {raw}")
    return raw.rstrip("/")


def _network_from_section(name: str, section: Any, *, path: Path) -> NetworkConfig:
    if not isinstance(section, dict):
        raise ConfigurationError(f"Expected networks.{name} to be a mapping in {path}")
    base = BUILTIN_NETWORKS.get(name)
    source = f"{path} networks.{name}"
    rpc_url = _first_value(section.get("rpc_url"), base.rpc_url if base else None)
    return NetworkConfig(
        name=name,
        rpc_url=_validate_rpc_url(rpc_url, source=source),
        wallet_url=_first_value(section.get("wallet_url"), base.wallet_url if base else None),
        explorer_url=_first_value(
            section.get("explorer_url"), base.explorer_url if base else None
        ),
        api_key=section.get("api_key"),
        timeout=_first_value(
            _coerce_timeout(section.get("timeout"), source=source), default=DEFAULT_TIMEOUT
        ),
    )


def load_cli_config(
    *,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CLIConfig:
    """Load network configuration from environment variables and optional YAML."""

    env_map = os.environ if env is None else env
    env_path = env_map.get("NEAR_CLI_CONFIG")
    explicit_path = (
        config_path is not None or _CONFIG_PATH_OVERRIDE is not None or bool(env_path)
    )
    if config_path is not None:
        path = Path(config_path).expanduser()
    elif _CONFIG_PATH_OVERRIDE is not None:
        path = _CONFIG_PATH_OVERRIDE
    elif env_path:
        path = Path(env_path).expanduser()
    else:
        path = DEFAULT_CONFIG_PATH

    file_config = _load_config_file(path, required=explicit_path)
    networks_section = file_config.get("networks", {}) or {}
    if not isinstance(networks_section, dict):
        raise ConfigurationError(f"Expected 'networks' to be a mapping in {path}")

    override_map = dict(overrides or {})

    networks = dict(BUILTIN_NETWORKS)
    for name, section in networks_section.items():
        networks[str(name)] = _network_from_section(str(name), section, path=path)

    env_rpc_url = env_map.get("NEAR_RPC_URL")
    env_network = env_map.get("NEAR_NETWORK") or "testnet"
    env_api_key = env_map.get("NEAR_RPC_API_KEY")
    env_timeout = _coerce_timeout(env_map.get("NEAR_RPC_TIMEOUT"), source="environment")

    if env_rpc_url or env_api_key or env_timeout is not None:
        target = networks.get(env_network)
        rpc_url = _first_value(env_rpc_url, target.rpc_url if target else None)
        if target is None:
            target = NetworkConfig(
                name=env_network, rpc_url=_validate_rpc_url(rpc_url, source="NEAR_RPC_URL")
            )
        networks[env_network] = replace(
            target,
            rpc_url=_validate_rpc_url(rpc_url, source="environment"),
            api_key=_first_value(env_api_key, target.api_key),
            timeout=_first_value(env_timeout, target.timeout),
        )

    home = _first_value(
        override_map.get("home"),
        env_map.get("NEAR_CLI_HOME"),
        file_config.get("home"),
        DEFAULT_HOME,
    )

    return CLIConfig(networks=networks, home=Path(home).expanduser())
