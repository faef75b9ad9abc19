"""Command-line interface for kattis_py."""

import re
import signal
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from . import __version__
from .client import JudgeVerdict, KattisClient, StatusPoller, SubmissionId, package
from .config import Credentials, SolutionConfig
from .errors import KattisError, Outcome, PollError
from .runner import TestOrchestrator, load_samples
from .utils.terminal import (
    ConsoleTestSink,
    SubmissionRenderer,
    clear_screen,
    console,
    print_report_summary,
    print_submission,
    setup_logging,
)


def _regex(ctx, param, value) -> Optional["re.Pattern"]:
    if value is None:
        return None
    try:
        return re.compile(value)
    except re.error as err:
        raise click.BadParameter(str(err))


directory_argument = click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """kattis_py - test and submit competitive programming solutions."""
    setup_logging(verbose)


@cli.command()
@directory_argument
@click.option("--filter", "filter_", callback=_regex, help="Only run samples matching this regex")
@click.option("--ignore", callback=_regex, help="Skip samples matching this regex")
@click.option("-t", "--timeout", type=float, help="Time limit per sample in seconds")
@click.option("--clear", is_flag=True, help="Clear the screen before running")
def test(directory: Path, filter_, ignore, timeout: Optional[float], clear: bool):
    """Build a solution and run it against its samples."""
    with _exit_on_error():
        config = SolutionConfig.load(directory, overrides={"timeout": timeout})

        def selected(name: str) -> bool:
            if filter_ is not None and not filter_.search(name):
                return False
            return ignore is None or not ignore.search(name)

        samples = load_samples(config.samples_dir, selected)

        if clear:
            clear_screen()

        report = TestOrchestrator(sink=ConsoleTestSink()).run(config, samples)
        print_report_summary(report)
    sys.exit(int(report.outcome))


@cli.command()
@directory_argument
@click.option("-p", "--problem", help="Problem ID (default: from kattis.yml)")
@click.option("-l", "--language", help="Language (default: from kattis.yml)")
@click.option("-m", "--mainclass", help="Main class (default: from kattis.yml)")
@click.option("--hostname", help="Judge hostname, selects the credentials")
@click.option("-f", "--force", is_flag=True, help="Submit without asking for confirmation")
@click.option(
    "-w/-W",
    "--watch/--no-watch",
    default=True,
    help="Watch submission results (default: true)",
)
@click.option("--interval", type=float, default=1.0, show_default=True, help="Seconds between status queries")
def submit(
    directory: Path,
    problem: Optional[str],
    language: Optional[str],
    mainclass: Optional[str],
    hostname: Optional[str],
    force: bool,
    watch: bool,
    interval: float,
):
    """Submit a solution to the judge."""
    with _exit_on_error():
        config = SolutionConfig.load(directory)
        submission = package(config, problem=problem, language=language, mainclass=mainclass)

        print_submission(submission)
        if not force and not click.confirm("Proceed with the submission?", default=False):
            console.print("[yellow]Cancelled submission.[/yellow]")
            return

        credentials = Credentials.find(hostname or config.hostname)
        client = KattisClient(credentials)

        submission_id = client.submit(submission)
        console.print(f"[green]Submission ID:[/green] {submission_id}")
        console.print(client.submission_url(submission_id), markup=False)

        if watch:
            outcome = watch_submission(client, submission_id, interval)
            sys.exit(int(outcome))


def watch_submission(client: KattisClient, submission_id: SubmissionId, interval: float) -> Outcome:
    """Poll and display submission results in real-time."""
    cancel = threading.Event()
    poller = StatusPoller(client, interval=interval, cancel=cancel)
    renderer = SubmissionRenderer()
    final = None

    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    try:
        with console.status("[bold green]Judging...") as status:
            for current in poller.poll(submission_id):
                status.update(f"[bold green]{renderer.describe(current)}")
                renderer.render(current)
                final = current
    except PollError as err:
        console.print(f"[red]{escape(str(err))}[/red]")
        console.print(f"Check the result later at {client.submission_url(submission_id)}")
        return Outcome(err.outcome)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if final is None or not final.is_terminal:
        console.print(
            f"\n[yellow]Stopped watching. Submission {submission_id} is still being judged.[/yellow]"
        )
        return Outcome.SUCCESS

    if final.verdict is JudgeVerdict.ACCEPTED:
        return Outcome.SUCCESS
    return Outcome.FAILED


@contextmanager
def _exit_on_error():
    """Print KattisError messages and exit with the error's outcome code."""
    try:
        yield
    except KattisError as err:
        console.print(f"[red]Error:[/red] {escape(str(err))}")
        sys.exit(int(err.outcome))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
