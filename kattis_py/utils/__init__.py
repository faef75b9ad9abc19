"""Utility functions."""

from .terminal import (
    ConsoleTestSink,
    SubmissionRenderer,
    clear_screen,
    console,
    format_verdict_color,
    print_report_summary,
    print_submission,
    setup_logging,
)

__all__ = [
    "ConsoleTestSink",
    "SubmissionRenderer",
    "clear_screen",
    "console",
    "format_verdict_color",
    "print_report_summary",
    "print_submission",
    "setup_logging",
]
