from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from contractor.core.config import load_yaml


_MISSING = object()


@dataclass
class SnapshotContract:
    type: str
    data: Any
    answer: Any = _MISSING
    reward: Any = "OK"


@dataclass
class NetworkSnapshot:
    """Offline stand-in for a live network, loaded from YAML.

    Implements the environment protocol. Contracts are removed once
    submitted, right or wrong, and nothing is written back to disk.
    """

    home: str
    adjacency: dict[str, list[str]]
    contracts: dict[str, dict[str, SnapshotContract]] = field(default_factory=dict)

    def list_adjacent(self, host: str) -> list[str]:
        return list(self.adjacency.get(host, []))

    def list_instances(self, host: str) -> list[str]:
        return sorted(self.contracts.get(host, {}))

    def _contract(self, filename: str, host: str) -> SnapshotContract:
        try:
            return self.contracts[host][filename]
        except KeyError:
            raise KeyError(f"no contract {filename} on {host}") from None

    def classify(self, filename: str, host: str) -> str:
        return self._contract(filename, host).type

    def fetch_payload(self, filename: str, host: str) -> Any:
        return self._contract(filename, host).data

    def submit(self, answer: Any, filename: str, host: str) -> Any:
        contract = self.contracts.get(host, {}).pop(filename, None)
        if contract is None or contract.answer is _MISSING:
            return None
        if answers_match(answer, contract.answer):
            return contract.reward
        return None


def answers_match(given: Any, expected: Any) -> bool:
    # lists of strings (e.g. IP addresses) are order-insensitive
    if isinstance(given, (list, tuple)) and isinstance(expected, (list, tuple)):
        if all(isinstance(x, str) for x in [*given, *expected]):
            return sorted(given) == sorted(expected)
        return list(given) == list(expected)
    return given == expected


def validate_snapshot(data: dict[str, Any]) -> None:
    if not isinstance(data, dict):
        raise ValueError("snapshot must be a mapping")

    hosts = data.get("hosts", {})
    if not isinstance(hosts, dict) or not hosts:
        raise ValueError("snapshot defines no hosts")

    home = data.get("home", "home")
    if not isinstance(home, str) or home not in hosts:
        raise ValueError(f"home host {home} does not exist")

    for host, spec in hosts.items():
        spec = spec or {}
        if not isinstance(spec, dict):
            raise ValueError(f"host {host} must be a mapping")

        neighbors = spec.get("neighbors", []) or []
        if not isinstance(neighbors, list):
            raise ValueError(f"neighbors of {host} must be a list")
        for neighbor in neighbors:
            if not isinstance(neighbor, str) or neighbor not in hosts:
                raise ValueError(f"neighbor {neighbor} of {host} is not a known host")

        contracts = spec.get("contracts", {}) or {}
        if not isinstance(contracts, dict):
            raise ValueError(f"contracts on {host} must be a mapping")
        for filename, contract in contracts.items():
            if not isinstance(contract, dict):
                raise ValueError(f"contract {filename} on {host} must be a mapping")
            if not contract.get("type"):
                raise ValueError(f"contract {filename} on {host} has no type")
            if "data" not in contract:
                raise ValueError(f"contract {filename} on {host} has no data")


def build_snapshot(data: dict[str, Any]) -> NetworkSnapshot:
    validate_snapshot(data)
    hosts = data["hosts"]

    adjacency: dict[str, list[str]] = {host: [] for host in hosts}
    for host, spec in hosts.items():
        for neighbor in (spec or {}).get("neighbors", []) or []:
            if neighbor not in adjacency[host]:
                adjacency[host].append(neighbor)
            if host not in adjacency[neighbor]:
                adjacency[neighbor].append(host)

    contracts: dict[str, dict[str, SnapshotContract]] = {}
    for host, spec in hosts.items():
        for filename, c in ((spec or {}).get("contracts", {}) or {}).items():
            contracts.setdefault(host, {})[filename] = SnapshotContract(
                type=str(c["type"]),
                data=c["data"],
                answer=c.get("answer", _MISSING),
                reward=c.get("reward", "OK"),
            )

    return NetworkSnapshot(home=data.get("home", "home"), adjacency=adjacency, contracts=contracts)


def load_snapshot(path: str | Path) -> NetworkSnapshot:
    return build_snapshot(load_yaml(path))
