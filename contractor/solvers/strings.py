from __future__ import annotations

from contractor.core.models import ValueKind
from contractor.core.registry import solver


def _valid_octet(part: str) -> bool:
    if not 1 <= len(part) <= 3:
        return False
    if len(part) > 1 and part[0] == "0":
        return False
    return 0 <= int(part) <= 255


def generate_ip_addresses(s: str | int) -> list[str] | None:
    s = str(s).strip()
    # int() must accept every octet, so only ASCII digits
    if not (s.isascii() and s.isdigit()):
        return None

    n = len(s)
    if not 4 <= n <= 12:
        return None

    res: list[str] = []
    for i in range(1, 4):
        for j in range(1, 4):
            for k in range(1, 4):
                rest = n - (i + j + k)
                if rest < 1 or rest > 3:
                    continue
                parts = [s[:i], s[i:i + j], s[i + j:i + j + k], s[i + j + k:]]
                if all(_valid_octet(p) for p in parts):
                    res.append(".".join(parts))
    return res


SOLVERS = [
    solver(
        "Generate IP Addresses",
        generate_ip_addresses,
        accepts=(ValueKind.TEXT, ValueKind.NUMBER),
        returns=ValueKind.SEQUENCE,
    ),
]
