from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import yaml

from contractor.core.network import CONTRACT_EXTENSION


CONFIG_FILENAME = "contractor.yaml"
CONFIG_ENV_VAR = "CONTRACTOR_CONFIG"


@dataclass(frozen=True)
class ContractorConfig:
    home: str = "home"
    snapshot_path: str | None = None
    extension: str = CONTRACT_EXTENSION
    submit_delay: float = 0.01
    solver_modules: list[str] = field(default_factory=list)
    audit_path: str | None = "./contractor_audit.jsonl"
    log_level: str = "INFO"


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"YAML file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {p}")
    return data


def find_config(path: str | Path = CONFIG_FILENAME) -> Path:
    """Locate the master config.

    An existing explicit path wins, then $CONTRACTOR_CONFIG. Only the default
    name is searched for in the working directory and its parents.
    """
    explicit = Path(path)
    if explicit.exists():
        return explicit

    from_env = os.getenv(CONFIG_ENV_VAR)
    if from_env and Path(from_env).exists():
        return Path(from_env)

    if explicit.name == CONFIG_FILENAME and explicit.parent == Path("."):
        cwd = Path.cwd()
        found = next((d / CONFIG_FILENAME for d in (cwd, *cwd.parents) if (d / CONFIG_FILENAME).exists()), None)
        if found is not None:
            return found
    return explicit


def _resolve(base: Path, path: str) -> str:
    if Path(path).is_absolute():
        return path
    return str((base / path).resolve())


def load_master_config(path: str | Path) -> ContractorConfig:
    master_path = Path(path).resolve()
    raw = load_yaml(master_path)
    base = master_path.parent

    network = raw.get("network", {}) or {}
    snapshot_path = network.get("snapshot")
    if snapshot_path:
        snapshot_path = _resolve(base, snapshot_path)

    modules: list[str] = []
    for ref in (raw.get("solvers", {}) or {}).get("modules", []) or []:
        ref = str(ref)
        modules.append(_resolve(base, ref) if ref.endswith(".py") else ref)

    audit = raw.get("audit", {}) or {}
    audit_path = audit.get("path", "./contractor_audit.jsonl")
    if audit_path:
        audit_path = _resolve(base, audit_path)

    delay_ms = (raw.get("run", {}) or {}).get("submit_delay_ms", 10)
    if float(delay_ms) < 0:
        raise ValueError("run.submit_delay_ms must not be negative")

    return ContractorConfig(
        home=str(network.get("home", "home")),
        snapshot_path=snapshot_path,
        extension=str((raw.get("contracts", {}) or {}).get("extension", CONTRACT_EXTENSION)),
        submit_delay=float(delay_ms) / 1000.0,
        solver_modules=modules,
        audit_path=audit_path or None,
        log_level=str((raw.get("logging", {}) or {}).get("level", "INFO")).upper(),
    )
