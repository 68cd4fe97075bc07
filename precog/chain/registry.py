"""Chain registry mapping chain_id to configuration."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from precog.errors import UnknownChainError

MAINNET_CHAIN_ID = 1
HARDHAT_CHAIN_ID = 31337


@dataclass(frozen=True)
class ChainConfig:
    chain_id: int
    name: str
    native_token: str
    is_poa: bool = False
    block_time: float = 12.0  # seconds
    alchemy_slug: str | None = None
    quicknode_slug: str | None = None  # "" means the bare endpoint (mainnet)
    public_rpc_url: str | None = None
    is_testnet: bool = False


CHAINS: dict[int, ChainConfig] = {
    1: ChainConfig(
        chain_id=1, name="ethereum", native_token="ETH",
        alchemy_slug="eth-mainnet", quicknode_slug="",
        public_rpc_url="https://cloudflare-eth.com",
    ),
    11155111: ChainConfig(
        chain_id=11155111, name="sepolia", native_token="ETH", is_testnet=True,
        alchemy_slug="eth-sepolia", quicknode_slug="ethereum-sepolia",
        public_rpc_url="https://rpc.sepolia.org",
    ),
    8453: ChainConfig(
        chain_id=8453, name="base", native_token="ETH", is_poa=True, block_time=2.0,
        alchemy_slug="base-mainnet", quicknode_slug="base-mainnet",
        public_rpc_url="https://mainnet.base.org",
    ),
    84532: ChainConfig(
        chain_id=84532, name="base-sepolia", native_token="ETH", is_poa=True, block_time=2.0,
        is_testnet=True, alchemy_slug="base-sepolia", quicknode_slug="base-sepolia",
        public_rpc_url="https://sepolia.base.org",
    ),
    10: ChainConfig(
        chain_id=10, name="optimism", native_token="ETH", is_poa=True, block_time=2.0,
        alchemy_slug="opt-mainnet", quicknode_slug="optimism",
        public_rpc_url="https://mainnet.optimism.io",
    ),
    42161: ChainConfig(
        chain_id=42161, name="arbitrum", native_token="ETH", is_poa=True, block_time=0.25,
        alchemy_slug="arb-mainnet", quicknode_slug="arbitrum-mainnet",
        public_rpc_url="https://arb1.arbitrum.io/rpc",
    ),
    137: ChainConfig(
        chain_id=137, name="polygon", native_token="MATIC", is_poa=True, block_time=2.0,
        alchemy_slug="polygon-mainnet", quicknode_slug="matic",
        public_rpc_url="https://polygon-rpc.com",
    ),
    HARDHAT_CHAIN_ID: ChainConfig(
        chain_id=HARDHAT_CHAIN_ID, name="hardhat", native_token="ETH", block_time=1.0,
        is_testnet=True, public_rpc_url="http://127.0.0.1:8545",
    ),
}

CHAIN_NAME_TO_ID: dict[str, int] = {c.name: c.chain_id for c in CHAINS.values()}


def get_chain_config(chain_id: int) -> ChainConfig:
    if chain_id not in CHAINS:
        raise UnknownChainError(f"Unknown chain_id={chain_id}. Supported: {list(CHAINS.keys())}")
    return CHAINS[chain_id]


def resolve_chain(name_or_id: str | int) -> ChainConfig:
    """Resolve a chain name or ID to its config."""
    if isinstance(name_or_id, int):
        return get_chain_config(name_or_id)
    name = str(name_or_id).lower()
    if name.isdigit():
        return get_chain_config(int(name))
    if name not in CHAIN_NAME_TO_ID:
        raise UnknownChainError(f"Unknown chain '{name}'. Supported: {list(CHAIN_NAME_TO_ID.keys())}")
    return get_chain_config(CHAIN_NAME_TO_ID[name])


def resolve_target_network_set(configured: Iterable[int]) -> tuple[int, ...]:
    """Return the configured chains with mainnet appended if it is missing.

    Mainnet is always enabled (ENS resolution, ETH price). Order is kept and
    other duplicates are left as configured.
    """
    networks = tuple(configured)
    if MAINNET_CHAIN_ID in networks:
        return networks
    return networks + (MAINNET_CHAIN_ID,)
