"""Data models for submissions on the judge."""

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..errors import ProtocolError


class SubmissionState(str, enum.Enum):
    """Coarse state of a submission on the judge."""

    QUEUED = "Queued"
    COMPILING = "Compiling"
    RUNNING = "Running"
    TERMINAL = "Terminal"


class JudgeVerdict(str, enum.Enum):
    """Status strings as displayed by the judge."""

    NEW = "New"
    NOT_CHECKED = "Not checked"
    COMPILING = "Compiling"
    RUNNING = "Running"
    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong Answer"
    TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"
    MEMORY_LIMIT_EXCEEDED = "Memory Limit Exceeded"
    OUTPUT_LIMIT_EXCEEDED = "Output Limit Exceeded"
    COMPILE_ERROR = "Compile Error"
    RUN_TIME_ERROR = "Run Time Error"
    JUDGE_ERROR = "Judge Error"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "JudgeVerdict":
        key = " ".join(text.split()).lower()
        for verdict in cls:
            if verdict.value.lower() == key:
                return verdict
        raise ProtocolError(f"Unknown status: {text!r}")

    @property
    def state(self) -> SubmissionState:
        if self in (JudgeVerdict.NEW, JudgeVerdict.NOT_CHECKED):
            return SubmissionState.QUEUED
        if self is JudgeVerdict.COMPILING:
            return SubmissionState.COMPILING
        if self is JudgeVerdict.RUNNING:
            return SubmissionState.RUNNING
        return SubmissionState.TERMINAL


@dataclass(frozen=True)
class SubmissionId:
    """Identifier assigned by the judge to an uploaded submission."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SubmissionFile:
    path: str
    content: bytes


@dataclass(frozen=True)
class SubmissionPackage:
    """Everything the judge needs to accept one submission."""

    problem: str
    language: str
    files: Tuple[SubmissionFile, ...]
    mainclass: Optional[str] = None


@dataclass(frozen=True)
class TestCaseVerdict:
    """Represents the judge's verdict on one hidden test case."""

    __test__ = False

    index: int
    total: int
    verdict: JudgeVerdict


@dataclass(frozen=True)
class SubmissionStatus:
    """One observation of a submission's progress."""

    state: SubmissionState
    cases_done: int = 0
    cases_total: Optional[int] = None
    test_cases: Tuple[TestCaseVerdict, ...] = field(default_factory=tuple)
    verdict: Optional[JudgeVerdict] = None
    time: Optional[str] = None
    cpu_time: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state is SubmissionState.TERMINAL
