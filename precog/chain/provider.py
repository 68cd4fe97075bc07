"""Async EVM chain provider using web3.py 7.x."""

from __future__ import annotations

from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.middleware import ExtraDataToPOAMiddleware

from precog.chain.registry import CHAINS, ChainConfig
from precog.chain.transport import ChainClientConfig, TransportResolver
from precog.contracts.registry import ContractDescriptor


class ChainProvider:
    """Read-only async web3 client for one chain, built from its client config."""

    def __init__(self, client_config: ChainClientConfig, chain_config: ChainConfig | None = None):
        self.client_config = client_config
        self.chain_config = chain_config or CHAINS.get(client_config.chain_id)
        self.w3 = AsyncWeb3(AsyncHTTPProvider(client_config.transport_url))
        if self.chain_config is not None and self.chain_config.is_poa:
            self.w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    @classmethod
    def for_chain(cls, chain_id: int, resolver: TransportResolver | None = None) -> ChainProvider:
        resolver = resolver or TransportResolver.from_settings()
        return cls(resolver.build_client_config(chain_id))

    @property
    def chain_id(self) -> int:
        return self.client_config.chain_id

    async def get_latest_block_number(self) -> int:
        return await self.w3.eth.block_number

    async def get_block_timestamp(self, block_identifier: int | str = "latest") -> int:
        block = await self.w3.eth.get_block(block_identifier)
        return block["timestamp"]

    async def get_storage_at(self, address: str, slot: int) -> bytes:
        return bytes(await self.w3.eth.get_storage_at(self.w3.to_checksum_address(address), slot))

    async def read_contract(self, descriptor: ContractDescriptor, function_name: str, *args):
        """Call a view function and return the decoded result."""
        contract = self.w3.eth.contract(address=descriptor.address, abi=list(descriptor.abi))
        function = getattr(contract.functions, function_name)
        return await function(*args).call()
