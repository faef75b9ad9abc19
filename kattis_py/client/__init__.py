"""Client module for judge interaction."""

from .client import KattisClient
from .models import (
    JudgeVerdict,
    SubmissionId,
    SubmissionPackage,
    SubmissionState,
    SubmissionStatus,
)
from .packager import package
from .poller import StatusPoller

__all__ = [
    "JudgeVerdict",
    "KattisClient",
    "StatusPoller",
    "SubmissionId",
    "SubmissionPackage",
    "SubmissionState",
    "SubmissionStatus",
    "package",
]
