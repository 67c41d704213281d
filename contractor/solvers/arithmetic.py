from __future__ import annotations

from contractor.core.models import ValueKind
from contractor.core.registry import solver


def _is_int(n) -> bool:
    return isinstance(n, int) and not isinstance(n, bool)


def largest_prime_factor(n: int) -> int | None:
    if isinstance(n, float) and n.is_integer():
        n = int(n)
    if not _is_int(n) or n < 2:
        return None

    x = n
    largest = 1
    while x % 2 == 0:
        largest = 2
        x //= 2

    f = 3
    while f * f <= x:
        while x % f == 0:
            largest = f
            x //= f
        f += 2

    # whatever survives trial division is prime
    if x > 1:
        largest = max(largest, x)
    return largest


def total_ways_to_sum(n: int) -> int | None:
    """Partitions of ``n`` into at least two positive parts.

    Coin-change over addends 1..n-1, so ``n`` on its own is never counted.
    """
    if isinstance(n, float) and n.is_integer():
        n = int(n)
    if not _is_int(n) or n < 1:
        return None

    ways = [0] * (n + 1)
    ways[0] = 1
    for addend in range(1, n):
        for total in range(addend, n + 1):
            ways[total] += ways[total - addend]
    return ways[n]


SOLVERS = [
    solver("Find Largest Prime Factor", largest_prime_factor, ValueKind.NUMBER, ValueKind.NUMBER),
    solver("Total Ways to Sum", total_ways_to_sum, ValueKind.NUMBER, ValueKind.NUMBER),
]
