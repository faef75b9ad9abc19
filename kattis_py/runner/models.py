"""Data models for local sample testing."""

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import Outcome


class Verdict(str, enum.Enum):
    """Verdict of a single sample run locally."""

    CORRECT = "Correct"
    WRONG_ANSWER = "Wrong Answer"
    RUNTIME_ERROR = "Run Time Error"
    TIMEOUT = "Time Limit Exceeded"
    BUILD_FAILED = "Build Failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Sample:
    """A public input/expected-output pair."""

    name: str
    input: str
    expected: str


@dataclass(frozen=True)
class CapturedOutput:
    """Output of one successful run of the run command."""

    stdout: str
    stderr: str = ""
    elapsed: float = 0.0


@dataclass(frozen=True)
class Diff:
    """Raw texts shown to the user when a sample fails."""

    input: str
    found: Optional[str]
    expected: str


@dataclass
class TestResult:
    """Represents the result of running one sample."""

    __test__ = False

    sample: str
    verdict: Verdict
    output: Optional[str] = None
    diff: Optional[Diff] = None
    elapsed: Optional[float] = None
    stderr: str = ""
    exact: bool = True

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.CORRECT


@dataclass
class TestReport:
    """Results of one `test` invocation, one per sample, in run order."""

    __test__ = False

    results: List[TestResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return bool(self.results) and all(r.passed for r in self.results)

    @property
    def outcome(self) -> Outcome:
        if self.passed:
            return Outcome.SUCCESS
        if any(r.verdict is Verdict.BUILD_FAILED for r in self.results):
            return Outcome.BUILD_FAILED
        return Outcome.FAILED

    def count(self, verdict: Verdict) -> int:
        return sum(1 for r in self.results if r.verdict is verdict)
