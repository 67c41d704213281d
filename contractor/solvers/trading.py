from __future__ import annotations

import math
from numbers import Real
from typing import Any, Sequence

from contractor.core.models import ValueKind
from contractor.core.registry import solver


def _is_number(x: Any) -> bool:
    return isinstance(x, Real) and not isinstance(x, bool)


def max_profit(prices: Sequence[float], k: float) -> float | None:
    """Best profit from at most ``k`` non-overlapping buy/sell pairs.

    ``k`` may be ``math.inf``. Once ``k`` reaches half the series length the
    cap can no longer bind, so that case is summed like the unlimited one.
    """
    if not isinstance(prices, (list, tuple)) or not all(_is_number(p) for p in prices):
        return None
    if not _is_number(k) or k < 0:
        return None
    if k != math.inf and not float(k).is_integer():
        return None

    n = len(prices)
    if n < 2 or k == 0:
        return 0

    if k >= n // 2:
        return sum(max(0, b - a) for a, b in zip(prices, prices[1:]))

    prev = [0] * n
    for _ in range(int(k)):
        cur = [0] * n
        holding = -prices[0]
        for i in range(1, n):
            cur[i] = max(cur[i - 1], prices[i] + holding)
            holding = max(holding, prev[i] - prices[i])
        prev = cur
    return prev[n - 1]


def stock_trader_iv(data: Sequence[Any]) -> float | None:
    # instances ship either [k, prices] or [prices, k]
    if len(data) != 2:
        return None
    a, b = data
    if _is_number(a) and isinstance(b, (list, tuple)):
        return max_profit(b, a)
    if isinstance(a, (list, tuple)) and _is_number(b):
        return max_profit(a, b)
    return None


SOLVERS = [
    solver("Algorithmic Stock Trader I", lambda prices: max_profit(prices, 1), ValueKind.SEQUENCE, ValueKind.NUMBER),
    solver("Algorithmic Stock Trader II", lambda prices: max_profit(prices, math.inf), ValueKind.SEQUENCE, ValueKind.NUMBER),
    solver("Algorithmic Stock Trader III", lambda prices: max_profit(prices, 2), ValueKind.SEQUENCE, ValueKind.NUMBER),
    solver("Algorithmic Stock Trader IV", stock_trader_iv, ValueKind.SEQUENCE, ValueKind.NUMBER),
]
