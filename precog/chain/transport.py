"""RPC transport selection and per-chain client configuration.

Managed providers are tried in priority order (explicit overrides, QuickNode,
Alchemy); the first one with an endpoint for the chain wins and the chain's
public RPC is the last resort. Nothing here touches the network.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from precog.chain.registry import CHAINS, HARDHAT_CHAIN_ID, ChainConfig
from precog.config import Settings, get_settings
from precog.errors import UnknownChainError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainClientConfig:
    chain_id: int
    transport_url: str
    polling_interval_ms: int | None  # None: polling disabled
    fallback_urls: tuple[str, ...] = field(default_factory=tuple)

    @property
    def polling_enabled(self) -> bool:
        return self.polling_interval_ms is not None


class RpcProvider:
    """A source of RPC endpoints. ``try_resolve`` returns None when it has none."""

    name = "provider"

    def try_resolve(self, chain_id: int) -> str | None:
        raise NotImplementedError


class StaticUrlProvider(RpcProvider):
    """Explicit per-chain URLs, typically from settings overrides."""

    name = "override"

    def __init__(self, urls: Mapping[int, str]):
        self.urls = {int(k): v for k, v in urls.items() if v}

    def try_resolve(self, chain_id: int) -> str | None:
        return self.urls.get(chain_id)


class QuickNodeProvider(RpcProvider):
    name = "quicknode"

    def __init__(self, endpoint_name: str, api_key: str, chains: Mapping[int, ChainConfig] = CHAINS):
        self.endpoint_name = endpoint_name
        self.api_key = api_key
        self.chains = chains

    def try_resolve(self, chain_id: int) -> str | None:
        if not self.endpoint_name or not self.api_key:
            return None
        chain = self.chains.get(chain_id)
        if chain is None or chain.quicknode_slug is None:
            return None
        if chain.quicknode_slug:
            return f"https://{self.endpoint_name}.{chain.quicknode_slug}.quiknode.pro/{self.api_key}/"
        return f"https://{self.endpoint_name}.quiknode.pro/{self.api_key}/"


class AlchemyProvider(RpcProvider):
    name = "alchemy"

    def __init__(self, api_key: str, chains: Mapping[int, ChainConfig] = CHAINS):
        self.api_key = api_key
        self.chains = chains

    def try_resolve(self, chain_id: int) -> str | None:
        if not self.api_key:
            return None
        chain = self.chains.get(chain_id)
        if chain is None or not chain.alchemy_slug:
            return None
        return f"https://{chain.alchemy_slug}.g.alchemy.com/v2/{self.api_key}"


class TransportResolver:
    """Pick the RPC endpoint for a chain and build its client configuration."""

    def __init__(
        self,
        providers: Iterable[RpcProvider],
        chains: Mapping[int, ChainConfig] = CHAINS,
        polling_interval_ms: int = 30_000,
        local_chain_id: int = HARDHAT_CHAIN_ID,
    ):
        self.providers = tuple(providers)
        self.chains = chains
        self.polling_interval_ms = polling_interval_ms
        self.local_chain_id = local_chain_id

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TransportResolver:
        settings = settings or get_settings()
        providers = [
            StaticUrlProvider(settings.rpc_overrides),
            QuickNodeProvider(settings.quicknode_endpoint_name, settings.quicknode_api_key),
            AlchemyProvider(settings.alchemy_api_key),
        ]
        return cls(
            providers,
            polling_interval_ms=settings.polling_interval_ms,
            local_chain_id=settings.local_chain_id,
        )

    def _public_url(self, chain_id: int) -> str | None:
        chain = self.chains.get(chain_id)
        return chain.public_rpc_url if chain else None

    def transport_candidates(self, chain_id: int) -> tuple[str, ...]:
        """All usable endpoints for a chain, highest priority first."""
        urls: list[str] = []
        for provider in self.providers:
            url = provider.try_resolve(chain_id)
            if url and url not in urls:
                urls.append(url)
        public = self._public_url(chain_id)
        if public and public not in urls:
            urls.append(public)
        return tuple(urls)

    def resolve_transport_url(self, chain_id: int) -> str:
        """First provider endpoint, else the public RPC. Raises UnknownChainError if neither exists."""
        for provider in self.providers:
            url = provider.try_resolve(chain_id)
            if url:
                logger.debug(f"chain_id={chain_id}: using {provider.name} transport")
                return url
        public = self._public_url(chain_id)
        if public:
            logger.warning(f"chain_id={chain_id}: no managed provider, using public RPC")
            return public
        raise UnknownChainError(f"No RPC endpoint available for chain_id={chain_id}")

    def build_client_config(self, chain_id: int) -> ChainClientConfig:
        # The local dev node pushes updates; every other chain is polled
        polling = None if chain_id == self.local_chain_id else self.polling_interval_ms
        return ChainClientConfig(
            chain_id=chain_id,
            transport_url=self.resolve_transport_url(chain_id),
            polling_interval_ms=polling,
            fallback_urls=self.transport_candidates(chain_id),
        )
