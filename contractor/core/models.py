from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class PayloadShapeError(TypeError):
    pass


class ValueKind(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    SEQUENCE = "sequence"
    MATRIX = "matrix"


@dataclass(frozen=True)
class PuzzleValue:
    kind: ValueKind
    value: Any

    @classmethod
    def from_raw(cls, raw: Any) -> "PuzzleValue":
        if isinstance(raw, bool):
            raise PayloadShapeError("booleans are not puzzle values")
        if isinstance(raw, (int, float)):
            return cls(kind=ValueKind.NUMBER, value=raw)
        if isinstance(raw, str):
            return cls(kind=ValueKind.TEXT, value=raw)
        if isinstance(raw, (list, tuple)):
            if raw and all(isinstance(row, (list, tuple)) for row in raw):
                return cls(kind=ValueKind.MATRIX, value=raw)
            return cls(kind=ValueKind.SEQUENCE, value=raw)
        raise PayloadShapeError(f"unsupported puzzle value: {type(raw).__name__}")


@dataclass(frozen=True)
class PuzzleInstance:
    host: str
    filename: str
    type: str
    payload: Any

    @property
    def label(self) -> str:
        return f"[{self.type}] {self.host}:{self.filename}"


class Verdict(str, Enum):
    SKIP = "skip"
    DRY = "dry"
    SOLVED = "solved"
    WRONG = "wrong"
    FAILED = "failed"  # solver raised
    NO_ANSWER = "no_answer"  # solver returned None


@dataclass(frozen=True)
class InstanceReport:
    instance: PuzzleInstance
    verdict: Verdict
    answer: Any = None
    reward: Any = None
    error: str | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Tally of one run. Each report is added with ``with_report``, which
    returns a new outcome rather than mutating this one."""

    reports: tuple[InstanceReport, ...] = field(default_factory=tuple)

    def with_report(self, report: InstanceReport) -> "RunOutcome":
        return replace(self, reports=self.reports + (report,))

    def by_verdict(self, verdict: Verdict) -> list[InstanceReport]:
        return [r for r in self.reports if r.verdict == verdict]

    @property
    def found(self) -> int:
        return len(self.reports)

    @property
    def attempted(self) -> int:
        return sum(1 for r in self.reports if r.verdict != Verdict.SKIP)

    @property
    def solved(self) -> int:
        return len(self.by_verdict(Verdict.SOLVED))

    @property
    def skipped(self) -> int:
        return len(self.by_verdict(Verdict.SKIP))

    @property
    def wrong(self) -> int:
        return len(self.by_verdict(Verdict.WRONG))

    @property
    def failed(self) -> int:
        return len(self.by_verdict(Verdict.FAILED)) + len(self.by_verdict(Verdict.NO_ANSWER))

    def summary(self) -> dict[str, int]:
        return {
            "found": self.found,
            "attempted": self.attempted,
            "solved": self.solved,
            "skipped": self.skipped,
        }
