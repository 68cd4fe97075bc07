"""Read-only market queries against the master contract.

Share amounts go on-chain as 64.64 fixed point and prices come back the same
way; both cross through the codec here.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import BaseModel

from precog.chain.provider import ChainProvider
from precog.chain.transport import TransportResolver
from precog.codec.fixed_point import decode, decode_packed, encode
from precog.contracts.registry import ContractDescriptor, ContractRegistry, get_registry
from precog.markets import lmsr

logger = logging.getLogger(__name__)

MASTER_CONTRACT_NAME = "PrecogMasterV7"

# Market contracts pack alpha (high half) and beta into this storage slot
ALPHA_BETA_SLOT = 11


class BuyQuote(BaseModel):
    shares: float
    price: float = 0.0
    price_per_share: float = 0.0
    future_price: float = 0.0
    error: str | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


class SellQuote(BaseModel):
    shares: float
    collateral_to_receive: float = 0.0
    price_per_share: float = 0.0
    future_price: float = 0.0
    error: str | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


class MarketReader:
    """Price and share queries for markets managed by one master contract."""

    def __init__(self, provider: ChainProvider, master: ContractDescriptor):
        self.provider = provider
        self.master = master

    @classmethod
    def for_chain(
        cls,
        chain_id: int,
        registry: ContractRegistry | None = None,
        resolver: TransportResolver | None = None,
    ) -> MarketReader | None:
        """Reader for ``chain_id``, or None when the master contract is not deployed there."""
        registry = registry or get_registry()
        master = registry.get_contract(chain_id, MASTER_CONTRACT_NAME)
        if master is None:
            logger.warning(f"{MASTER_CONTRACT_NAME} is not deployed on chain_id={chain_id}")
            return None
        return cls(ChainProvider.for_chain(chain_id, resolver), master)

    async def buy_price(self, market_id: int, outcome: int, shares: float) -> float:
        raw = await self.provider.read_contract(
            self.master, "marketBuyPrice", market_id, outcome, encode(shares)
        )
        return decode(raw)

    async def sell_price(self, market_id: int, outcome: int, shares: float) -> float:
        raw = await self.provider.read_contract(
            self.master, "marketSellPrice", market_id, outcome, encode(shares)
        )
        return decode(raw)

    async def buy_quote(self, market_id: int, outcome: int, shares: float) -> BuyQuote:
        """Cost of ``shares`` plus the marginal price of one more share."""
        if shares <= 0:
            return BuyQuote(shares=shares, error="shares must be positive")
        if shares != int(shares):
            return BuyQuote(shares=shares, error="shares must be integral")
        try:
            price, next_total = await asyncio.gather(
                self.buy_price(market_id, outcome, shares),
                self.buy_price(market_id, outcome, shares + 1),
            )
        except Exception as e:
            logger.warning(f"Buy price failed for market {market_id} outcome {outcome}: {e}")
            return BuyQuote(shares=shares, error=str(e) or type(e).__name__)
        return BuyQuote(
            shares=shares,
            price=price,
            price_per_share=price / shares,
            future_price=next_total - price,
        )

    async def sell_quote(self, market_id: int, outcome: int, shares: float) -> SellQuote:
        """Collateral received for ``shares`` plus the marginal value of one more."""
        if shares <= 0:
            return SellQuote(shares=shares, error="shares must be positive")
        if shares != int(shares):
            return SellQuote(shares=shares, error="shares must be integral")
        try:
            collateral, next_total = await asyncio.gather(
                self.sell_price(market_id, outcome, shares),
                self.sell_price(market_id, outcome, shares + 1),
            )
        except Exception as e:
            logger.warning(f"Sell price failed for market {market_id} outcome {outcome}: {e}")
            return SellQuote(shares=shares, error=str(e) or type(e).__name__)
        return SellQuote(
            shares=shares,
            collateral_to_receive=collateral,
            price_per_share=collateral / shares,
            future_price=next_total - collateral,
        )

    async def shares_balances(self, market_id: int) -> list[float]:
        result = await self.provider.read_contract(self.master, "marketSharesInfo", market_id)
        return [decode(balance) for balance in result[1]]

    async def market_alpha(self, market_address: str) -> float:
        word = await self.provider.get_storage_at(market_address, ALPHA_BETA_SLOT)
        return decode_packed(word, high=True)

    async def estimate_shares_for_cost(
        self, market_id: int, market_address: str, outcome: int, total_cost: float
    ) -> float:
        """Client-side estimate of how many shares ``total_cost`` buys."""
        balances, alpha = await asyncio.gather(
            self.shares_balances(market_id),
            self.market_alpha(market_address),
        )
        return lmsr.market_shares_from_cost(balances, alpha, outcome, total_cost)
