"""Tests for the judge client (mocked session, no real server needed)."""

from unittest.mock import MagicMock

import pytest
import requests
from urllib3.exceptions import MaxRetryError, NewConnectionError

from kattis_py.client.client import KattisClient, parse_submission_row
from kattis_py.client.models import (
    JudgeVerdict,
    SubmissionFile,
    SubmissionId,
    SubmissionPackage,
    SubmissionState,
)
from kattis_py.config.credentials import Credentials
from kattis_py.errors import (
    NetworkError,
    ProtocolError,
    Rejected,
    SubmissionStateUnknown,
    TransientQueryError,
    Unauthorized,
)


CREDENTIALS = Credentials(
    username="alice",
    token="secret",
    hostname="open.kattis.com",
    loginurl="https://open.kattis.com/login",
    submissionurl="https://open.kattis.com/submit",
    submissionsurl="https://open.kattis.com/submissions",
)

PACKAGE = SubmissionPackage(
    problem="hello",
    language="Rust",
    files=(SubmissionFile("./src/main.rs", b"fn main() {}\n"),),
)


def _response(status_code=200, text="", json_data=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_data
    return resp


def _client(post=(), get=()):
    client = KattisClient(CREDENTIALS)
    client.session = MagicMock()
    client.session.post.side_effect = list(post)
    client.session.get.side_effect = list(get)
    return client


def _row(status, cases="", cpu="0.00 s", time="12:00:01"):
    component = (
        f'<tr><td data-type="time">{time}</td>'
        f'<td data-type="status"><span>{status}</span></td>'
        f'<td data-type="cpu">{cpu}</td>'
        f'<td><div class="testcases">{cases}</div></td></tr>'
    )
    return {"component": component, "status_id": 0, "testcases_number": 0}


def _cases(done, total, verdict="Accepted"):
    parts = []
    for i in range(1, total + 1):
        status = verdict if i <= done else "not checked"
        parts.append(f'<i class="x" title="Test case {i}/{total}: {status}"></i>')
    return "".join(parts)


LOGIN_OK = _response(200, "Login successful")
SUBMITTED = _response(200, "Submission received. Submission ID: 123456.")


class TestSubmit:
    def test_success(self):
        client = _client(post=[LOGIN_OK, SUBMITTED])

        assert client.submit(PACKAGE) == SubmissionId(123456)

        login_call, submit_call = client.session.post.call_args_list
        assert login_call.args[0] == CREDENTIALS.loginurl
        assert login_call.kwargs["data"]["token"] == "secret"
        assert login_call.kwargs["data"]["user"] == "alice"
        assert submit_call.args[0] == CREDENTIALS.submissionurl
        data = submit_call.kwargs["data"]
        assert data["language"] == "Rust"
        assert data["problem"] == "hello"
        assert data["mainclass"] == ""
        assert data["script"] == "true"
        files = submit_call.kwargs["files"]
        assert files == [("sub_file[]", ("main.rs", b"fn main() {}\n", "application/octet-stream"))]

    def test_login_server_error_is_network_error(self):
        client = _client(post=[_response(503, "Service Unavailable")])
        with pytest.raises(NetworkError):
            client.submit(PACKAGE)

    def test_login_rejected(self):
        client = _client(post=[_response(403, "Incorrect username or password")])
        with pytest.raises(Unauthorized):
            client.submit(PACKAGE)
        assert client.session.post.call_count == 1

    def test_rejected_with_reason(self):
        client = _client(post=[LOGIN_OK, _response(200, "<p>Unknown language</p>")])
        with pytest.raises(Rejected) as info:
            client.submit(PACKAGE)
        assert info.value.reason == "Unknown language"

    def test_client_error_is_rejection(self):
        client = _client(post=[LOGIN_OK, _response(404, "Problem not found")])
        with pytest.raises(Rejected, match="Problem not found"):
            client.submit(PACKAGE)

    def test_upload_unauthorized(self):
        client = _client(post=[LOGIN_OK, _response(401)])
        with pytest.raises(Unauthorized):
            client.submit(PACKAGE)

    def test_connection_refused_is_network_error(self):
        refused = requests.ConnectionError(
            MaxRetryError(None, "/submit", reason=NewConnectionError(None, "refused"))
        )
        client = _client(post=[LOGIN_OK, refused])
        with pytest.raises(NetworkError):
            client.submit(PACKAGE)

    def test_connect_timeout_is_network_error(self):
        client = _client(post=[LOGIN_OK, requests.exceptions.ConnectTimeout("slow")])
        with pytest.raises(NetworkError):
            client.submit(PACKAGE)

    def test_read_timeout_leaves_state_unknown(self):
        client = _client(post=[LOGIN_OK, requests.exceptions.ReadTimeout("slow")])
        with pytest.raises(SubmissionStateUnknown):
            client.submit(PACKAGE)

    def test_server_error_leaves_state_unknown(self):
        client = _client(post=[LOGIN_OK, _response(502, "Bad Gateway")])
        with pytest.raises(SubmissionStateUnknown):
            client.submit(PACKAGE)


class TestSubmissionStatus:
    def test_queries_submission_row(self):
        row = _row("Running", _cases(3, 5))
        client = _client(post=[LOGIN_OK], get=[_response(json_data=row)])

        status = client.submission_status(SubmissionId(42))

        url = client.session.get.call_args.args[0]
        assert url == "https://open.kattis.com/submissions/42?only_submission_row"
        assert status.state is SubmissionState.RUNNING
        assert status.cases_done == 3
        assert status.cases_total == 5
        assert status.verdict is None

    def test_relogin_on_expired_session(self):
        row = _row("Compiling")
        client = _client(
            post=[LOGIN_OK, LOGIN_OK],
            get=[_response(403), _response(json_data=row)],
        )
        status = client.submission_status(SubmissionId(1))
        assert status.state is SubmissionState.COMPILING
        assert client.session.post.call_count == 2

    def test_relogin_server_error_is_transient(self):
        client = _client(post=[LOGIN_OK, _response(503)], get=[_response(403)])
        with pytest.raises(TransientQueryError):
            client.submission_status(SubmissionId(1))

    def test_broken_transfer_is_transient(self):
        client = _client(
            post=[LOGIN_OK],
            get=[requests.exceptions.ChunkedEncodingError("connection reset mid-body")],
        )
        with pytest.raises(TransientQueryError):
            client.submission_status(SubmissionId(1))

    def test_server_error_is_transient(self):
        client = _client(post=[LOGIN_OK], get=[_response(503)])
        with pytest.raises(TransientQueryError):
            client.submission_status(SubmissionId(1))

    def test_connection_error_is_transient(self):
        client = _client(post=[LOGIN_OK], get=[requests.ConnectionError("reset")])
        with pytest.raises(TransientQueryError):
            client.submission_status(SubmissionId(1))

    def test_not_json_is_protocol_error(self):
        client = _client(post=[LOGIN_OK], get=[_response(200, "<html>")])
        with pytest.raises(ProtocolError):
            client.submission_status(SubmissionId(1))


class TestParseSubmissionRow:
    def test_accepted(self):
        status = parse_submission_row(_row("Accepted", _cases(52, 52)))
        assert status.state is SubmissionState.TERMINAL
        assert status.verdict is JudgeVerdict.ACCEPTED
        assert status.cases_done == status.cases_total == 52
        assert status.cpu_time == "0.00 s"
        assert status.time == "12:00:01"
        assert [tc.index for tc in status.test_cases] == list(range(1, 53))

    def test_wrong_answer_on_a_case(self):
        cases = (
            '<i title="Test case 1/3: Accepted"></i>'
            '<i title="Test case 2/3: Wrong Answer"></i>'
            '<i title="Test case 3/3: not checked"></i>'
        )
        status = parse_submission_row(_row("Wrong Answer", cases))
        assert status.verdict is JudgeVerdict.WRONG_ANSWER
        assert status.cases_done == 2
        assert status.test_cases[1].verdict is JudgeVerdict.WRONG_ANSWER

    def test_total_unknown_while_compiling(self):
        status = parse_submission_row(_row("Compiling", cpu=""))
        assert status.state is SubmissionState.COMPILING
        assert status.cases_total is None
        assert status.cpu_time is None

    def test_queued(self):
        assert parse_submission_row(_row("New")).state is SubmissionState.QUEUED

    def test_testcases_number_field(self):
        row = _row("Running")
        row["testcases_number"] = 17
        assert parse_submission_row(row).cases_total == 17

    @pytest.mark.parametrize("data", [
        None,
        {"status_id": 16},
        {"component": "<tr><td>nothing here</td></tr>"},
        {"component": '<td data-type="status">Exploded</td>'},
    ])
    def test_unparsable(self, data):
        with pytest.raises(ProtocolError):
            parse_submission_row(data)

    def test_bad_test_case_title(self):
        with pytest.raises(ProtocolError):
            parse_submission_row(_row("Running", '<i title="case one"></i>'))
