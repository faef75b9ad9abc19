"""Polling the judge until a submission reaches its final verdict."""

import logging
import threading
from dataclasses import replace
from typing import Iterator, Optional

from ..errors import (
    KattisError,
    NetworkError,
    PollError,
    TransientQueryError,
)
from .client import KattisClient
from .models import SubmissionId, SubmissionStatus

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0
DEFAULT_MAX_RETRIES = 3


class StatusPoller:
    """
    Observes a submission through repeated status queries.

    Cancelling (setting `cancel`) only stops local observation; the
    submission keeps being judged.
    """

    def __init__(
        self,
        client: KattisClient,
        interval: float = DEFAULT_INTERVAL,
        max_retries: int = DEFAULT_MAX_RETRIES,
        cancel: Optional[threading.Event] = None,
    ):
        self.client = client
        self.interval = interval
        self.max_retries = max_retries
        self.cancel = cancel or threading.Event()

    def poll(self, submission_id: SubmissionId) -> Iterator[SubmissionStatus]:
        """
        Yield the submission's status after every successful query, ending
        with the first terminal status.

        Raises:
            PollError: the judge stayed unreachable for more than
                max_retries consecutive attempts, or answered with data
                that could not be read.
        """
        failures = 0
        cases_done = 0
        first = True

        while not self.cancel.is_set():
            if not first and self._wait():
                return
            first = False

            try:
                status = self.client.submission_status(submission_id)
            except (TransientQueryError, NetworkError) as err:
                failures += 1
                logger.warning(
                    "status query for %s failed (%d/%d): %s",
                    submission_id, failures, self.max_retries, err,
                )
                if failures > self.max_retries:
                    raise PollError.unreachable(err)
                continue
            except KattisError as err:
                raise PollError.protocol(err)
            failures = 0

            # The judge occasionally reports fewer finished cases than before.
            if status.cases_done < cases_done:
                status = replace(status, cases_done=cases_done)
            cases_done = status.cases_done

            yield status
            if status.is_terminal:
                return

    def _wait(self) -> bool:
        """Sleep one interval; True if cancelled meanwhile."""
        return self.cancel.wait(self.interval)
