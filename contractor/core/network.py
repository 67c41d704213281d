from __future__ import annotations

import logging
from collections import deque
from typing import Any, Iterable, Protocol, Sequence

from contractor.core.models import PuzzleInstance


logger = logging.getLogger(__name__)

CONTRACT_EXTENSION = ".cct"


class Environment(Protocol):
    def list_adjacent(self, host: str) -> Sequence[str]: ...
    def list_instances(self, host: str) -> Sequence[str]: ...
    def classify(self, filename: str, host: str) -> str: ...
    def fetch_payload(self, filename: str, host: str) -> Any: ...
    def submit(self, answer: Any, filename: str, host: str) -> Any: ...


def scan_all(env: Environment, start: str) -> list[str]:
    """Every host reachable from ``start``, ``start`` included.

    Breadth-first; each host is queued at most once, so cycles in the
    adjacency terminate. The order of the result carries no meaning.
    """
    seen = {start}
    order = [start]
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        for nxt in env.list_adjacent(cur):
            if nxt not in seen:
                seen.add(nxt)
                order.append(nxt)
                queue.append(nxt)
    logger.debug("Discovered %d host(s) from %s", len(order), start)
    return order


def find_instances(
    env: Environment,
    hosts: Iterable[str],
    extension: str = CONTRACT_EXTENSION,
) -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    seen: set[tuple[str, str]] = set()
    for host in hosts:
        for filename in env.list_instances(host):
            key = (host, filename)
            if not filename.endswith(extension) or key in seen:
                continue
            seen.add(key)
            out.append(key)
    return out


def classify_instance(env: Environment, host: str, filename: str) -> PuzzleInstance:
    return PuzzleInstance(
        host=host,
        filename=filename,
        type=env.classify(filename, host),
        payload=env.fetch_payload(filename, host),
    )
