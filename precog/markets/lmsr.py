"""Liquidity-sensitive LMSR pricing, mirrored client-side for quick estimates.

Cost function: ``C(q) = b(q) * ln(sum(exp(q_i / b(q))))`` with
``b(q) = alpha * sum(q)``. Outcomes holding zero shares are left out of the
sum, matching the market contract's view of an unused outcome.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

SHARES_SEARCH_ITERATIONS = 100
SHARES_SEARCH_TOLERANCE = 0.0001


def _exp_sum(shares: Sequence[float], beta: float) -> float:
    return sum(math.exp(s / beta) for s in shares if s != 0)


def market_cost(shares: Sequence[float], alpha: float) -> float:
    total = sum(shares)
    if total == 0 or alpha == 0:
        return 0.0
    beta = total * alpha
    return beta * math.log(_exp_sum(shares, beta))


def _after_trade(shares: Sequence[float], outcome: int, amount: float) -> list[float]:
    new_shares = list(shares)
    new_shares[outcome] += amount
    return new_shares


def market_trade_cost(shares: Sequence[float], alpha: float, outcome: int, amount: float) -> float:
    """Absolute collateral change for buying (or selling) ``amount`` shares of ``outcome``."""
    before = market_cost(shares, alpha)
    after = market_cost(_after_trade(shares, outcome, amount), alpha)
    return abs(after - before)


def market_price(shares: Sequence[float], alpha: float, outcome: int) -> float:
    total = sum(shares)
    if total == 0 or alpha == 0:
        return 0.0
    beta = total * alpha
    return math.exp(shares[outcome] / beta) / _exp_sum(shares, beta)


def market_price_after_trade(shares: Sequence[float], alpha: float, outcome: int, amount: float) -> float:
    return market_price(_after_trade(shares, outcome, amount), alpha, outcome)


def market_shares_from_cost(shares: Sequence[float], alpha: float, outcome: int, total_cost: float) -> float:
    """Shares of ``outcome`` that ``total_cost`` buys, found by bisection."""
    if alpha == 0:
        return 0.0
    low = 0.0
    high = total_cost * 10_000
    mid = 0.0
    for _ in range(SHARES_SEARCH_ITERATIONS):
        mid = (low + high) / 2
        if mid == 0:
            low = SHARES_SEARCH_TOLERANCE
            continue
        cost = market_trade_cost(shares, alpha, outcome, mid)
        if abs(cost - total_cost) < SHARES_SEARCH_TOLERANCE:
            return mid
        if cost < total_cost:
            low = mid
        else:
            high = mid
    return mid
