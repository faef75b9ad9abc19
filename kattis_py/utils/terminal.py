"""Terminal rendering of test runs and submission progress."""

import logging
from typing import Optional, Set

from rich.console import Console
from rich.logging import RichHandler

from ..client.models import JudgeVerdict, SubmissionPackage, SubmissionStatus
from ..errors import BuildError
from ..runner.models import Sample, TestReport, TestResult, Verdict
from ..runner.orchestrator import ProgressSink

console = Console(highlight=False)


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich, on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


def clear_screen():
    """Clear the terminal screen."""
    console.clear()


def format_verdict_color(verdict) -> str:
    """Format a verdict with appropriate color."""
    text = str(verdict)

    if verdict in (Verdict.CORRECT, JudgeVerdict.ACCEPTED):
        return f"[bold green]{text}[/bold green]"
    elif verdict in (
        Verdict.TIMEOUT,
        JudgeVerdict.TIME_LIMIT_EXCEEDED,
        JudgeVerdict.MEMORY_LIMIT_EXCEEDED,
        JudgeVerdict.OUTPUT_LIMIT_EXCEEDED,
    ):
        return f"[bold magenta]{text}[/bold magenta]"
    elif verdict in (
        JudgeVerdict.NEW,
        JudgeVerdict.NOT_CHECKED,
        JudgeVerdict.COMPILING,
        JudgeVerdict.RUNNING,
    ):
        return f"[yellow]{text}[/yellow]"
    else:
        return f"[bold red]{text}[/bold red]"


def print_raw(text: str) -> None:
    """Print program text verbatim, without markup."""
    console.print(text, markup=False, end="" if text.endswith("\n") else "\n")


class ConsoleTestSink(ProgressSink):
    """Prints one block per sample as the orchestrator finishes it."""

    def build_failed(self, error: BuildError) -> None:
        console.print(f"[bold red]Build failed[/bold red] (exit code {error.exit_code})")
        console.print(f"Command: {error.command}", markup=False)
        if error.stderr:
            print_raw(error.stderr)

    def sample_started(self, sample: Sample) -> None:
        console.print("Running test case: ", end="")
        console.print(sample.name, style="bold", markup=False)

    def sample_finished(self, result: TestResult) -> None:
        if result.verdict is Verdict.BUILD_FAILED:
            return
        if result.elapsed is not None:
            console.print(f"Time: {result.elapsed:.6f}")
        console.print(format_verdict_color(result.verdict))
        if result.passed and not result.exact:
            console.print("[dim](output differs only in whitespace or formatting)[/dim]")
        if result.stderr and result.verdict is Verdict.RUNTIME_ERROR:
            print_raw(result.stderr)
        if result.diff is not None:
            console.print()
            console.print("[bold]Input:[/bold]")
            print_raw(result.diff.input)
            if result.diff.found is not None:
                console.print("[bold]Found:[/bold]")
                print_raw(result.diff.found)
            console.print("[bold]Expected:[/bold]")
            print_raw(result.diff.expected)


def print_report_summary(report: TestReport) -> None:
    passed = report.count(Verdict.CORRECT)
    total = len(report.results)
    color = "green" if report.passed else "red"
    console.print(f"\n[bold {color}]{passed}/{total} samples passed[/bold {color}]")


def print_submission(package: SubmissionPackage) -> None:
    """Summarize what is about to be submitted."""
    console.print(f"[bold]Problem:[/bold] {package.problem}")
    console.print(f"[bold]Language:[/bold] {package.language}")
    console.print("[bold]Files:[/bold]")
    for f in package.files:
        console.print(f"  - {f.path}", markup=False)
    console.print(f"[bold]Main Class:[/bold] {package.mainclass or ''}")


class SubmissionRenderer:
    """
    Prints newly judged test cases from successive statuses, and the
    final verdict once the submission terminates.
    """

    def __init__(self):
        self._displayed: Set[int] = set()
        self._last_state: Optional[str] = None

    def describe(self, status: SubmissionStatus) -> str:
        """Text for the spinner while the submission is being judged."""
        if status.cases_total:
            return f"{status.state.value} ({status.cases_done}/{status.cases_total})"
        return f"{status.state.value}..."

    def render(self, status: SubmissionStatus) -> None:
        for case in status.test_cases:
            if case.index in self._displayed:
                continue
            self._displayed.add(case.index)
            total = status.cases_total or case.total
            console.print(
                f"Test Case {case.index}/{total}: {format_verdict_color(case.verdict)}"
            )

        if not self._displayed and status.state.value != self._last_state:
            console.print(f"{status.state.value}...")
        self._last_state = status.state.value

        if status.is_terminal:
            console.print()
            console.print(f"Submission Status: {format_verdict_color(status.verdict)}")
            console.print(f"Time: {status.time or '-'}")
            console.print(f"CPU: {status.cpu_time or '-'}")
