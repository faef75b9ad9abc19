"""Local testing of a solution against its samples."""

from .compare import ComparisonRules, compare
from .models import Sample, TestReport, TestResult, Verdict
from .orchestrator import ProgressSink, TestOrchestrator
from .process import ProcessRunner
from .samples import load_samples

__all__ = [
    "ComparisonRules",
    "ProcessRunner",
    "ProgressSink",
    "Sample",
    "TestOrchestrator",
    "TestReport",
    "TestResult",
    "Verdict",
    "compare",
    "load_samples",
]
