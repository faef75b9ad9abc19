"""HTTP client for submitting to a Kattis judge and reading submission status."""

import logging
import re
from pathlib import PurePath
from typing import Optional

import requests
from bs4 import BeautifulSoup
from urllib3.exceptions import NewConnectionError

from ..config.credentials import Credentials
from ..errors import (
    NetworkError,
    ProtocolError,
    Rejected,
    SubmissionStateUnknown,
    TransientQueryError,
    Unauthorized,
)
from .models import (
    JudgeVerdict,
    SubmissionId,
    SubmissionPackage,
    SubmissionState,
    SubmissionStatus,
    TestCaseVerdict,
)

logger = logging.getLogger(__name__)

SUBMISSION_ID_RE = re.compile(r"Submission received\. Submission ID: (\d+)\.")
TEST_CASE_TITLE_RE = re.compile(r"Test case (\d+)/(\d+):\s*(.+)")

_AUTH_CODES = (401, 403)
# Raised when the connection drops while the body is being read.
_BROKEN_TRANSFER = (
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)


class KattisClient:
    """HTTP client for interacting with a Kattis judge."""

    USER_AGENT = "kattis_py"

    def __init__(self, credentials: Credentials, timeout=(10, 60)):
        """Initialize the client for the host the credentials belong to."""
        self.credentials = credentials
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["User-Agent"] = self.USER_AGENT
        self._logged_in = False

    def login(self) -> None:
        """
        Authenticate with the judge; the session keeps the cookies.
        Raises Unauthorized if the credentials are refused.
        """
        creds = self.credentials
        form = {"user": creds.username, "script": "false"}
        if creds.password:
            form["password"] = creds.password
        if creds.token:
            form["token"] = creds.token

        logger.debug("logging in to %s as %s", creds.loginurl, creds.username)
        try:
            response = self.session.post(creds.loginurl, data=form, timeout=self.timeout)
        except requests.RequestException as err:
            raise NetworkError(err)

        if response.status_code in _AUTH_CODES:
            raise Unauthorized(f"Login to {creds.hostname} failed: invalid credentials")
        if response.status_code >= 500:
            raise NetworkError(f"login failed with HTTP {response.status_code}")
        if response.status_code != 200:
            raise Rejected(f"login failed with HTTP {response.status_code}")
        self._logged_in = True

    def submit(self, package: SubmissionPackage) -> SubmissionId:
        """Upload a submission and return the identifier the judge assigned."""
        if not self._logged_in:
            self.login()

        data = {
            "submit": "true",
            "submit_ctr": "2",
            "language": package.language,
            "mainclass": package.mainclass or "",
            "problem": package.problem,
            "tag": "",
            "script": "true",
        }
        files = [
            (
                "sub_file[]",
                (PurePath(f.path).name, f.content, "application/octet-stream"),
            )
            for f in package.files
        ]

        url = self.credentials.submissionurl
        logger.debug("submitting %d files for %s to %s", len(files), package.problem, url)
        try:
            response = self.session.post(url, data=data, files=files, timeout=self.timeout)
        except requests.RequestException as err:
            if _never_sent(err):
                raise NetworkError(err)
            raise SubmissionStateUnknown(err)

        if response.status_code in _AUTH_CODES:
            raise Unauthorized()
        if response.status_code >= 500:
            raise SubmissionStateUnknown(f"HTTP {response.status_code}")
        if response.status_code != 200:
            raise Rejected(_page_text(response.text) or f"HTTP {response.status_code}")

        match = SUBMISSION_ID_RE.search(response.text)
        if match is None:
            raise Rejected(_page_text(response.text) or "no submission id in response")
        return SubmissionId(int(match.group(1)))

    def submission_url(self, submission_id: SubmissionId) -> str:
        return f"{self.credentials.submissionsurl.rstrip('/')}/{submission_id}"

    def submission_status(self, submission_id: SubmissionId) -> SubmissionStatus:
        """
        Query the judge once for a submission's status.

        Raises:
            TransientQueryError: the query failed in transport or with a
                server error and may be retried.
            ProtocolError: the judge answered with something unreadable.
            Unauthorized: the judge refused the credentials, even after
                logging in again.
        """
        if not self._logged_in:
            self._login_for_query()

        response = self._query_status(submission_id)
        if response.status_code in _AUTH_CODES:
            # The session cookie may have expired.
            self._login_for_query()
            response = self._query_status(submission_id)
            if response.status_code in _AUTH_CODES:
                raise Unauthorized()

        if response.status_code >= 500:
            raise TransientQueryError(f"HTTP {response.status_code}")
        if response.status_code != 200:
            raise ProtocolError(f"Unexpected HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as err:
            raise ProtocolError(f"Response is not JSON: {err}")
        return parse_submission_row(data)

    def _login_for_query(self) -> None:
        try:
            self.login()
        except NetworkError as err:
            raise TransientQueryError(str(err))

    def _query_status(self, submission_id: SubmissionId) -> requests.Response:
        url = f"{self.submission_url(submission_id)}?only_submission_row"
        try:
            return self.session.get(url, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout, *_BROKEN_TRANSFER) as err:
            raise TransientQueryError(str(err))
        except requests.RequestException as err:
            raise ProtocolError(str(err))


def parse_submission_row(data) -> SubmissionStatus:
    """Parse the JSON submission row returned by the judge."""
    if not isinstance(data, dict) or not isinstance(data.get("component"), str):
        raise ProtocolError("Submission row has no HTML component")

    soup = BeautifulSoup(data["component"], "html.parser")

    status_cell = soup.find("td", attrs={"data-type": "status"})
    if status_cell is None:
        raise ProtocolError("Submission contained no status")
    verdict = JudgeVerdict.parse(status_cell.get_text(" ", strip=True))

    test_cases = []
    container = soup.find("div", class_="testcases")
    if container is not None:
        for element in container.find_all(True, recursive=False):
            title = element.get("title")
            if title:
                test_cases.append(_parse_test_case(title.strip()))

    checked = tuple(
        tc for tc in test_cases
        if tc.verdict not in (JudgeVerdict.NEW, JudgeVerdict.NOT_CHECKED)
    )

    total = _int_or_none(data.get("testcases_number"))
    if not total and test_cases:
        total = test_cases[0].total

    return SubmissionStatus(
        state=verdict.state,
        cases_done=len(checked),
        cases_total=total or None,
        test_cases=checked,
        verdict=verdict if verdict.state is SubmissionState.TERMINAL else None,
        time=_cell_text(soup, "time"),
        cpu_time=_cell_text(soup, "cpu"),
    )


def _parse_test_case(title: str) -> TestCaseVerdict:
    match = TEST_CASE_TITLE_RE.fullmatch(title)
    if match is None:
        raise ProtocolError(f"Test case contained invalid title: {title!r}")
    return TestCaseVerdict(
        index=int(match.group(1)),
        total=int(match.group(2)),
        verdict=JudgeVerdict.parse(match.group(3)),
    )


def _cell_text(soup: BeautifulSoup, data_type: str) -> Optional[str]:
    cell = soup.find("td", attrs={"data-type": data_type})
    if cell is None:
        return None
    return cell.get_text(" ", strip=True) or None


def _int_or_none(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _page_text(html: str, limit: int = 300) -> str:
    text = BeautifulSoup(html, "html.parser").get_text(" ", strip=True)
    return text[:limit]


def _never_sent(err: requests.RequestException) -> bool:
    """True if the request failed before any byte could reach the judge."""
    if isinstance(err, requests.exceptions.ConnectTimeout):
        return True
    if not isinstance(err, requests.ConnectionError) or not err.args:
        return False
    reason = getattr(err.args[0], "reason", err.args[0])
    return isinstance(reason, NewConnectionError)
