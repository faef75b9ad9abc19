"""Exception hierarchy for kattis_py."""

import enum
from pathlib import Path
from typing import Optional


class Outcome(enum.IntEnum):
    """Outcome class of a command, doubling as the CLI exit code."""

    SUCCESS = 0
    FAILED = 1
    BUILD_FAILED = 2
    REMOTE_FAILED = 3
    CONFIG_ERROR = 4


class KattisError(Exception):
    """Base class for every error surfaced to the user."""

    outcome = Outcome.CONFIG_ERROR


class ConfigurationError(KattisError):
    """A configuration file is missing, malformed or lacks a required field."""


class SampleError(KattisError):
    """The sample directory cannot be turned into a list of samples."""

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name

    @classmethod
    def mismatched(cls, name: str, missing: str) -> "SampleError":
        return cls(f"Sample '{name}' has no {missing} file", name=name)

    @classmethod
    def empty(cls, directory) -> "SampleError":
        return cls(f"No samples found in {directory}")

    @classmethod
    def missing_directory(cls, directory) -> "SampleError":
        return cls(f"The sample directory does not exist: {directory}")

    @classmethod
    def unreadable(cls, path, reason: str) -> "SampleError":
        return cls(f"Could not read sample file {path}: {reason}", name=Path(path).stem)


class BuildError(KattisError):
    """A build command exited with a non-zero status."""

    outcome = Outcome.BUILD_FAILED

    def __init__(self, command: str, exit_code: int, stderr: str = ""):
        super().__init__(f"Build command failed ({exit_code}): {command}")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class RunError(KattisError):
    """The run command did not finish normally on a sample."""

    outcome = Outcome.FAILED


class RunTimeout(RunError):
    def __init__(self, command: str, time_limit: float, stdout: str = ""):
        super().__init__(f"Run command exceeded {time_limit:g}s: {command}")
        self.command = command
        self.time_limit = time_limit
        self.stdout = stdout


class RunCrashed(RunError):
    def __init__(self, command: str, exit_code: int, stderr: str = "", stdout: str = ""):
        super().__init__(f"Run command failed ({exit_code}): {command}")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout


class PackageError(KattisError):
    """The submission could not be assembled from the solution files."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

    @classmethod
    def missing_file(cls, path: str) -> "PackageError":
        return cls(f"Submission file does not exist: {path}", path=path)


class SubmitError(KattisError):
    """Uploading the submission failed."""

    outcome = Outcome.REMOTE_FAILED


class Unauthorized(SubmitError):
    def __init__(self, message: str = "The judge rejected the credentials"):
        super().__init__(message)


class Rejected(SubmitError):
    def __init__(self, reason: str):
        super().__init__(f"The judge rejected the submission: {reason}")
        self.reason = reason


class NetworkError(SubmitError):
    def __init__(self, cause: Exception):
        super().__init__(f"Could not reach the judge: {cause}")
        self.cause = cause


class SubmissionStateUnknown(SubmitError):
    """The upload may or may not have created a submission on the judge."""

    def __init__(self, cause):
        super().__init__(
            f"Lost contact with the judge during upload ({cause}). "
            "The submission may have been received; check your submissions page."
        )
        self.cause = cause


class TransientQueryError(KattisError):
    """A status query failed in a way that may succeed when retried."""

    outcome = Outcome.REMOTE_FAILED


class ProtocolError(KattisError):
    """The judge answered with data that could not be understood."""

    outcome = Outcome.REMOTE_FAILED


class PollError(KattisError):
    """Observing the submission failed; the submission itself still exists."""

    outcome = Outcome.REMOTE_FAILED

    UNREACHABLE = "unreachable"
    PROTOCOL = "protocol"

    def __init__(self, message: str, kind: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.kind = kind
        self.cause = cause

    @classmethod
    def unreachable(cls, cause: Exception) -> "PollError":
        return cls(f"The judge stopped answering: {cause}", cls.UNREACHABLE, cause)

    @classmethod
    def protocol(cls, cause: Exception) -> "PollError":
        return cls(f"Could not read the submission status: {cause}", cls.PROTOCOL, cause)
