"""Running build and run commands with timeouts and output capture."""

import logging
import os
import signal
import subprocess
import time
from pathlib import Path
from typing import Sequence

from ..errors import BuildError, RunCrashed, RunTimeout
from .models import CapturedOutput

log = logging.getLogger(__name__)

_POSIX = os.name == "posix"
DRAIN_TIMEOUT = 1.0


class ProcessRunner:
    """Executes solution commands through the shell."""

    def run_build(self, commands: Sequence[str], work_dir: Path) -> None:
        """Run the build commands in order, stopping at the first failure.

        Raises:
            BuildError: a command exited with a non-zero status.
        """
        for command in commands:
            log.debug('build "%s" in %s', command, work_dir)
            proc = _spawn(command, work_dir, stdin=subprocess.DEVNULL)
            try:
                stdout, stderr = proc.communicate()
            finally:
                _kill_group(proc)
            if stdout:
                log.debug("build stdout: %s", _decode(stdout))
            if proc.returncode != 0:
                raise BuildError(command, proc.returncode, _decode(stderr))

    def run_sample(
        self, command: str, work_dir: Path, input: str, time_limit: float
    ) -> CapturedOutput:
        """Run the solution once with `input` on stdin.

        Args:
            command (str): shell command line running the solution
            work_dir (Path): directory to run it in
            input (str): text written to the process' standard input
            time_limit (float): wall-clock limit in seconds

        Returns:
            CapturedOutput with the decoded stdout/stderr and elapsed time.

        Raises:
            RunTimeout: the process did not finish within time_limit. The
                process and all of its descendants are killed first; the
                output written so far is kept on the error.
            RunCrashed: the process exited with a non-zero status.
        """
        log.debug('run "%s" in %s (limit %gs)', command, work_dir, time_limit)
        start = time.monotonic()
        proc = _spawn(command, work_dir, stdin=subprocess.PIPE)
        try:
            stdout, stderr = proc.communicate(input.encode("utf-8"), timeout=time_limit)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            stdout, _ = _drain(proc)
            raise RunTimeout(command, time_limit, _decode(stdout))
        finally:
            _kill_group(proc)
        elapsed = time.monotonic() - start

        if proc.returncode != 0:
            raise RunCrashed(command, proc.returncode, _decode(stderr), _decode(stdout))
        return CapturedOutput(stdout=_decode(stdout), stderr=_decode(stderr), elapsed=elapsed)


def _spawn(command: str, work_dir: Path, stdin) -> subprocess.Popen:
    # A fresh session makes the shell and everything it starts one process
    # group, so a timeout can take down the whole tree.
    return subprocess.Popen(
        command,
        shell=True,
        cwd=str(work_dir),
        stdin=stdin,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        start_new_session=_POSIX,
    )


def _drain(proc: subprocess.Popen):
    """Collect what is left in the pipes of a killed process."""
    try:
        return proc.communicate(timeout=DRAIN_TIMEOUT)
    except subprocess.TimeoutExpired as err:
        # A process that left the group with setsid still holds the pipes.
        log.debug("pipes still open after kill: %s", proc.args)
        return err.stdout or b"", err.stderr or b""


def _kill_group(proc: subprocess.Popen) -> None:
    """Kill the process and its descendants unless it already exited."""
    if _POSIX:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass
    elif proc.poll() is None:
        proc.kill()
    if proc.poll() is None:
        proc.wait()


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace") if data else ""
