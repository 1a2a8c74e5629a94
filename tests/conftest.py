from __future__ import annotations

from typing import Callable, Iterable, Sequence

import pytest

from near_cli.config import BUILTIN_NETWORKS, CLIConfig, NetworkConfig
from near_cli.resolution import ResolutionContext

VALIDATOR_KEY = "ed25519:DcA2MzgpJbrUATQLLceocVckhhAqrkingax4oJ9kZ847"


class ScriptedPrompts:
    """Answer prompts from fixed lists; an empty answer means "take the default"."""

    def __init__(self, answers: Iterable[str] = (), selections: Iterable[int] = ()) -> None:
        self.answers = list(answers)
        self.selections = list(selections)
        self.questions: list[str] = []
        self.menus: list[tuple[str, list[str]]] = []

    def input_text(self, prompt: str, default: str | None = None) -> str:
        self.questions.append(prompt)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {prompt}")
        answer = self.answers.pop(0)
        if answer == "" and default is not None:
            return default
        return answer

    def select(self, prompt: str, items: Sequence[str], default: int = 0) -> int:
        self.menus.append((prompt, list(items)))
        return self.selections.pop(0) if self.selections else default


class StubOracle:
    def __init__(self, existing: Iterable[str] = (), error: Exception | None = None) -> None:
        self.existing = set(existing)
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def account_exists(self, account_id: str, network: NetworkConfig) -> bool:
        self.calls.append((account_id, network.name))
        if self.error is not None:
            raise self.error
        return account_id in self.existing


@pytest.fixture
def cli_config(tmp_path) -> CLIConfig:
    return CLIConfig(networks=dict(BUILTIN_NETWORKS), home=tmp_path / "near-home")


@pytest.fixture
def testnet() -> NetworkConfig:
    return BUILTIN_NETWORKS["testnet"]


@pytest.fixture
def validator_key() -> str:
    return VALIDATOR_KEY


@pytest.fixture
def make_ctx(cli_config) -> Callable[..., ResolutionContext]:
    def _make(
        answers: Iterable[str] = (),
        selections: Iterable[int] = (),
        existing: Iterable[str] = (),
        error: Exception | None = None,
        network: NetworkConfig | None = None,
    ) -> ResolutionContext:
        return ResolutionContext(
            prompts=ScriptedPrompts(answers, selections),
            oracle=StubOracle(existing, error),
            config=cli_config,
            network=network,
        )

    return _make
