"""
Data models for NUnit result documents.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Optional


class ResultKind(Enum):
    """Presentation class of a fixture or case result."""
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    IGNORED = "ignored"
    SKIPPED = "skipped"
    OTHER = "other"

    @classmethod
    def from_result(cls, result: str) -> "ResultKind":
        try:
            return cls(result.strip().lower())
        except ValueError:
            return cls.OTHER


def format_duration(seconds: Optional[float]) -> str:
    """Render a duration the way the report shows it, e.g. ``0.25s``.

    Uses the shortest round-trip form, so ``1.234567`` keeps all six decimals.
    """
    if seconds is None:
        return ""
    text = repr(float(seconds))
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text}s"


def strip_case_namespace(name: str) -> str:
    """Remove the namespace from a test case name.

    Everything up to the last '.' before the first '(' is dropped, so dots
    inside a parameter list are kept: ``Ns.Class.Method(1.5)`` -> ``Method(1.5)``.
    """
    paren = name.find('(')
    end = paren if paren >= 0 else len(name)
    return name[name.rfind('.', 0, end) + 1:]


@dataclass(frozen=True)
class Case:
    """Represents a single executed test case."""
    name: str
    result: str
    duration: Optional[float] = None
    message: Optional[str] = None
    stack_trace: Optional[str] = None
    has_failure: bool = False

    @property
    def display_name(self) -> str:
        return strip_case_namespace(self.name)

    @property
    def kind(self) -> ResultKind:
        return ResultKind.from_result(self.result)

    @property
    def duration_text(self) -> str:
        return format_duration(self.duration)


@dataclass(frozen=True)
class Fixture:
    """Represents a TestFixture suite and its cases."""
    name: str
    namespace: str
    result: str
    duration: Optional[float] = None
    reason: str = ""
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    cases: tuple[Case, ...] = ()

    @property
    def kind(self) -> ResultKind:
        return ResultKind.from_result(self.result)

    @property
    def duration_text(self) -> str:
        # A reason replaces the duration in the panel heading
        if self.reason:
            return ""
        return format_duration(self.duration)


@dataclass(frozen=True)
class TestRun:
    """Summary of a whole NUnit run, parsed from the document root."""
    __test__ = False

    name: str
    total: int = 0
    passed: int = 0
    failed: int = 0
    inconclusive: int = 0
    skipped: int = 0
    fixtures: tuple[Fixture, ...] = field(default_factory=tuple)

    @property
    def failure_rate(self) -> Decimal:
        """Percentage of executed tests that failed, rounded to one decimal.

        Rounding only ever shortens the scale, so an exact quotient keeps
        its own: 0 failures gives ``0``, one of two gives ``50.0``.
        """
        executed = self.total - self.skipped
        if self.total <= 0 or executed <= 0:
            return Decimal(0)
        rate = Decimal(self.failed) / Decimal(executed) * 100
        if rate.as_tuple().exponent < -1:
            rate = rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_EVEN)
        return rate

    @property
    def success_rate(self) -> Decimal:
        return Decimal(100) - self.failure_rate

    @property
    def success_rate_text(self) -> str:
        return f"{self.success_rate:f}"
