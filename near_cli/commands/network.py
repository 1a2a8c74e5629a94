"""Connection mode levels shared by every command tree.

``network <name>`` binds the rest of the tree to a configured network, so
account IDs below it are checked for existence. ``offline`` resolves the
rest of the tree with no network and no checks. Each command subclasses
both to name its own next level.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..config import NetworkConfig
from ..resolution import RawNode, ResolutionContext, ResolvedNode

CONNECTION_PROMPT = "Select the connection mode"
ONLINE_MESSAGE = "Online: check accounts against a NEAR network"
OFFLINE_MESSAGE = "Offline: build the transaction without contacting a network"


@dataclass(frozen=True)
class ResolvedNetwork(ResolvedNode):
    keyword = "network"

    name: str
    network: NetworkConfig
    child: ResolvedNode

    def echo_tokens(self) -> list[str]:
        return [self.keyword, self.name]


@dataclass(frozen=True)
class ResolvedOffline(ResolvedNode):
    keyword = "offline"

    child: ResolvedNode


class CliNetwork(RawNode):
    keyword = "network"

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        name = self.value
        if name is None:
            names = ctx.config.network_names()
            name = names[ctx.prompts.select("Select the network", names, default=0)]
        network = ctx.config.get_network(name)
        child = self.resolve_child(ctx.with_network(network), *ambient)
        return ResolvedNetwork(name=name, network=network, child=child)


class CliOffline(RawNode):
    keyword = "offline"
    takes_value = False

    def resolve(self, ctx: ResolutionContext, *ambient: Any) -> ResolvedNode:
        return ResolvedOffline(child=self.resolve_child(ctx.with_network(None), *ambient))
