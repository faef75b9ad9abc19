"""Running a solution against every sample and collecting a report."""

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from ..errors import BuildError, RunCrashed, RunTimeout
from .compare import compare
from .models import Diff, Sample, TestReport, TestResult, Verdict
from .process import ProcessRunner

if TYPE_CHECKING:
    from ..config.solution_config import SolutionConfig

logger = logging.getLogger(__name__)


class ProgressSink:
    """Receives one event per sample; the default implementation ignores them."""

    def build_failed(self, error: BuildError) -> None:
        pass

    def sample_started(self, sample: Sample) -> None:
        pass

    def sample_finished(self, result: TestResult) -> None:
        pass


class TestOrchestrator:
    """Builds a solution once and runs it against each sample in order."""

    __test__ = False

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        sink: Optional[ProgressSink] = None,
    ):
        self.runner = runner or ProcessRunner()
        self.sink = sink or ProgressSink()

    def run(self, config: "SolutionConfig", samples: Sequence[Sample]) -> TestReport:
        report = TestReport()

        try:
            self.runner.run_build(config.build, config.directory)
        except BuildError as err:
            logger.info("build failed, skipping %d samples", len(samples))
            self.sink.build_failed(err)
            for sample in samples:
                result = TestResult(sample=sample.name, verdict=Verdict.BUILD_FAILED)
                report.results.append(result)
                self.sink.sample_finished(result)
            return report

        for sample in samples:
            self.sink.sample_started(sample)
            result = self._run_sample(config, sample)
            report.results.append(result)
            self.sink.sample_finished(result)

        return report

    def _run_sample(self, config: "SolutionConfig", sample: Sample) -> TestResult:
        try:
            output = self.runner.run_sample(
                config.run, config.directory, sample.input, config.timeout
            )
        except RunTimeout as err:
            return TestResult(
                sample=sample.name,
                verdict=Verdict.TIMEOUT,
                output=err.stdout,
                diff=Diff(sample.input, err.stdout, sample.expected),
                elapsed=config.timeout,
            )
        except RunCrashed as err:
            return TestResult(
                sample=sample.name,
                verdict=Verdict.RUNTIME_ERROR,
                output=err.stdout,
                diff=Diff(sample.input, err.stdout, sample.expected),
                stderr=err.stderr,
            )

        comparison = compare(output.stdout, sample.expected, config.comparison)
        result = TestResult(
            sample=sample.name,
            verdict=comparison.verdict,
            output=output.stdout,
            elapsed=output.elapsed,
            stderr=output.stderr,
            exact=comparison.exact,
        )
        if comparison.verdict is not Verdict.CORRECT:
            result.diff = Diff(sample.input, output.stdout, sample.expected)
        return result
