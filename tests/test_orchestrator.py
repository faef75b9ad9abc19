"""Tests for the test orchestrator."""

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from kattis_py.config.solution_config import SolutionConfig
from kattis_py.errors import BuildError, Outcome, RunCrashed, RunTimeout
from kattis_py.runner.compare import ComparisonRules
from kattis_py.runner.models import CapturedOutput, Sample, Verdict
from kattis_py.runner.orchestrator import ProgressSink, TestOrchestrator
from kattis_py.runner.process import ProcessRunner


SAMPLES = [
    Sample(name="aaah.1", input="aaah\n", expected="go\n"),
    Sample(name="aaah.2", input="ah\n", expected="go\n"),
]


def _config(tmp_path: Path, **overrides) -> SolutionConfig:
    defaults = {
        "run": "./solution",
        "language": "Python 3",
        "directory": tmp_path,
        "build": ("make",),
        "timeout": 2.0,
    }
    defaults.update(overrides)
    return SolutionConfig(**defaults)


def _runner(outputs):
    """A runner whose run_sample returns or raises the given items in order."""
    runner = MagicMock(spec=ProcessRunner)
    runner.run_sample.side_effect = outputs
    return runner


class RecordingSink(ProgressSink):
    def __init__(self):
        self.events = []

    def build_failed(self, error):
        self.events.append(("build_failed", error.command))

    def sample_started(self, sample):
        self.events.append(("started", sample.name))

    def sample_finished(self, result):
        self.events.append(("finished", result.sample, result.verdict))


class TestBuildFailure:
    def test_every_sample_marked_and_nothing_run(self, tmp_path):
        runner = _runner([])
        runner.run_build.side_effect = BuildError("make", 2, "error: x")
        sink = RecordingSink()

        report = TestOrchestrator(runner, sink).run(_config(tmp_path), SAMPLES)

        assert [r.verdict for r in report.results] == [Verdict.BUILD_FAILED] * 2
        assert all(r.output is None for r in report.results)
        runner.run_sample.assert_not_called()
        assert report.outcome is Outcome.BUILD_FAILED
        assert sink.events[0] == ("build_failed", "make")


class TestVerdicts:
    def test_correct_and_wrong_answer(self, tmp_path):
        runner = _runner([CapturedOutput("go\n"), CapturedOutput("uh oh\n")])

        report = TestOrchestrator(runner).run(_config(tmp_path), SAMPLES)

        first, second = report.results
        assert first.verdict is Verdict.CORRECT
        assert first.diff is None
        assert second.verdict is Verdict.WRONG_ANSWER
        assert second.diff.found == "uh oh\n"
        assert second.diff.expected == "go\n"
        assert second.diff.input == "ah\n"
        assert not report.passed
        assert report.outcome is Outcome.FAILED

    def test_timeout_and_crash_do_not_stop_the_run(self, tmp_path):
        samples = SAMPLES + [Sample("aaah.3", "x\n", "go\n")]
        runner = _runner([
            RunTimeout("./solution", 2.0),
            RunCrashed("./solution", 1, "Traceback"),
            CapturedOutput("go\n"),
        ])

        report = TestOrchestrator(runner).run(_config(tmp_path), samples)

        assert [r.verdict for r in report.results] == [
            Verdict.TIMEOUT,
            Verdict.RUNTIME_ERROR,
            Verdict.CORRECT,
        ]
        assert report.results[1].stderr == "Traceback"
        assert runner.run_sample.call_count == 3

    def test_partial_output_kept_on_timeout_and_crash(self, tmp_path):
        runner = _runner([
            RunTimeout("./solution", 2.0, stdout="g"),
            RunCrashed("./solution", 1, "Traceback", stdout="go\n"),
        ])

        timeout, crash = TestOrchestrator(runner).run(_config(tmp_path), SAMPLES).results

        assert timeout.output == "g"
        assert timeout.diff.found == "g"
        assert crash.output == "go\n"
        assert crash.diff.found == "go\n"
        assert crash.diff.expected == "go\n"

    def test_samples_run_in_given_order(self, tmp_path):
        runner = _runner([CapturedOutput("go\n"), CapturedOutput("go\n")])
        sink = RecordingSink()

        report = TestOrchestrator(runner, sink).run(_config(tmp_path), SAMPLES)

        inputs = [c.args[2] for c in runner.run_sample.call_args_list]
        assert inputs == ["aaah\n", "ah\n"]
        assert [r.sample for r in report.results] == ["aaah.1", "aaah.2"]
        assert sink.events == [
            ("started", "aaah.1"),
            ("finished", "aaah.1", Verdict.CORRECT),
            ("started", "aaah.2"),
            ("finished", "aaah.2", Verdict.CORRECT),
        ]
        assert report.outcome is Outcome.SUCCESS

    def test_comparison_rules_from_config(self, tmp_path):
        runner = _runner([CapturedOutput("GO\n"), CapturedOutput("Go\n")])
        config = _config(tmp_path, comparison=ComparisonRules(case_sensitive=False))

        report = TestOrchestrator(runner).run(config, SAMPLES)

        assert report.passed


@pytest.mark.skipif(os.name != "posix", reason="uses sh")
def test_real_solution(tmp_path):
    script = tmp_path / "solution.sh"
    script.write_text(
        'read x\nif [ "$x" = aaah ]; then echo go; else echo "uh oh"; fi\n'
    )
    config = _config(tmp_path, run="sh solution.sh", build=("test -f solution.sh",))

    report = TestOrchestrator().run(config, SAMPLES)

    assert [r.verdict for r in report.results] == [Verdict.CORRECT, Verdict.WRONG_ANSWER]
    assert report.results[1].diff.found == "uh oh\n"
    assert report.results[1].diff.expected == "go\n"


@pytest.mark.skipif(os.name != "posix", reason="uses sh")
def test_real_crash_keeps_output(tmp_path):
    config = _config(tmp_path, run="echo partial; exit 3", build=())

    result = TestOrchestrator().run(config, SAMPLES[:1]).results[0]

    assert result.verdict is Verdict.RUNTIME_ERROR
    assert result.output == "partial\n"
    assert result.diff.found == "partial\n"
