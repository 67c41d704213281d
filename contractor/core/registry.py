from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module, util as import_util
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator

from contractor.core.models import PayloadShapeError, PuzzleValue, ValueKind


DEFAULT_SOLVER_MODULES = (
    "contractor.solvers.arithmetic",
    "contractor.solvers.strings",
    "contractor.solvers.trading",
    "contractor.solvers.grids",
)


@dataclass(frozen=True)
class SolverEntry:
    type_name: str
    solve: Callable[[Any], Any]
    accepts: frozenset[ValueKind]
    returns: ValueKind

    def dispatch(self, payload: Any) -> Any:
        value = PuzzleValue.from_raw(payload)
        if value.kind not in self.accepts:
            expected = ", ".join(sorted(k.value for k in self.accepts))
            raise PayloadShapeError(f"{self.type_name}: expected {expected} payload, got {value.kind.value}")

        answer = self.solve(payload)
        if answer is None:
            return None

        shape = PuzzleValue.from_raw(answer)
        if shape.kind != self.returns:
            raise PayloadShapeError(
                f"{self.type_name}: solver produced {shape.kind.value}, expected {self.returns.value}"
            )
        return answer


def solver(
    type_name: str,
    fn: Callable[[Any], Any],
    accepts: ValueKind | Iterable[ValueKind],
    returns: ValueKind,
) -> SolverEntry:
    kinds = frozenset([accepts]) if isinstance(accepts, ValueKind) else frozenset(accepts)
    return SolverEntry(type_name=type_name, solve=fn, accepts=kinds, returns=returns)


class SolverRegistry:
    def __init__(self, entries: Iterable[SolverEntry]):
        table: dict[str, SolverEntry] = {}
        for entry in entries:
            if entry.type_name in table:
                raise ValueError(f"duplicate solver for contract type {entry.type_name!r}")
            table[entry.type_name] = entry
        self._entries = MappingProxyType(table)

    def lookup(self, type_name: str) -> SolverEntry | None:
        return self._entries.get(type_name)

    def types(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SolverEntry]:
        return iter(self._entries.values())


def _load_module_from_file(module_name: str, file_path: Path):
    spec = import_util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load solver module from {file_path}")
    module = import_util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _load_solver_module(ref: str):
    if ref.endswith(".py"):
        path = Path(ref)
        if not path.exists():
            raise FileNotFoundError(f"Solver module not found: {path}")
        return _load_module_from_file(f"contractor.solvers.ext_{path.stem}", path)
    return import_module(ref)


def build_registry(modules: Iterable[str]) -> SolverRegistry:
    entries: list[SolverEntry] = []
    for ref in modules:
        module = _load_solver_module(ref)
        found = getattr(module, "SOLVERS", None)
        if found is None:
            raise AttributeError(f"SOLVERS list not found in {ref}")
        entries.extend(found)
    return SolverRegistry(entries)


def default_registry(extra: Iterable[str] = ()) -> SolverRegistry:
    return build_registry([*DEFAULT_SOLVER_MODULES, *extra])
