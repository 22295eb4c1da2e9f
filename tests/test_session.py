"""Tests for RequestSession retry and error handling."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from tenacity import wait_none

from utils.session import RequestSession


@pytest.fixture
def session():
    s = RequestSession(user_agent="funding-tests admin@example.com", timeout=5, max_attempts=3, wait=wait_none())
    s.session.get = MagicMock()
    yield s
    s.close()


class TestHeaders:
    def test_explicit_user_agent(self):
        s = RequestSession(user_agent="funding-tests admin@example.com")
        assert s.session.headers["User-Agent"] == "funding-tests admin@example.com"
        assert s.session.headers["Accept"] == "*/*"

    def test_random_user_agent_fallback(self):
        with patch("utils.session.UserAgent") as ua:
            ua.return_value.random = "Mozilla/5.0 (X11; Linux x86_64)"
            s = RequestSession()
        assert s.session.headers["User-Agent"] == "Mozilla/5.0 (X11; Linux x86_64)"


class TestGet:
    def test_success(self, session, mock_response):
        ok = mock_response(200)
        session.session.get.return_value = ok

        assert session.get("https://example.test/a") is ok
        session.session.get.assert_called_once_with("https://example.test/a", timeout=5)

    def test_explicit_timeout_wins(self, session, mock_response):
        session.session.get.return_value = mock_response(200)
        session.get("https://example.test/a", timeout=1)
        session.session.get.assert_called_once_with("https://example.test/a", timeout=1)

    def test_not_found_not_retried(self, session, mock_response):
        session.session.get.return_value = mock_response(404)

        assert session.get("https://example.test/a").status_code == 404
        assert session.session.get.call_count == 1

    def test_transient_status_retried(self, session, mock_response):
        session.session.get.side_effect = [mock_response(503), mock_response(200)]

        assert session.get("https://example.test/a").status_code == 200
        assert session.session.get.call_count == 2

    def test_transient_status_exhausted_returns_last_response(self, session, mock_response):
        session.session.get.side_effect = [mock_response(503), mock_response(502), mock_response(429)]

        res = session.get("https://example.test/a")

        assert res.status_code == 429
        assert session.session.get.call_count == 3

    def test_connection_error_retried(self, session, mock_response):
        session.session.get.side_effect = [requests.ConnectionError("reset"), mock_response(200)]
        assert session.get("https://example.test/a").status_code == 200

    def test_connection_error_exhausted_returns_none(self, session):
        session.session.get.side_effect = requests.ConnectionError("refused")

        assert session.get("https://example.test/a") is None
        assert session.session.get.call_count == 3

    def test_timeout_returns_none(self, session):
        session.session.get.side_effect = requests.Timeout("read timed out")

        assert session.get("https://example.test/a") is None
        assert session.session.get.call_count == 3

    def test_other_request_errors_propagate(self, session):
        session.session.get.side_effect = requests.exceptions.InvalidURL("bad url")

        with pytest.raises(requests.exceptions.InvalidURL):
            session.get("not a url")
        assert session.session.get.call_count == 1


class TestTimeBudget:
    def test_total_time_budget_stops_retries(self):
        s = RequestSession(user_agent="funding-tests", max_attempts=5, total_seconds=0, wait=wait_none())
        s.session.get = MagicMock(side_effect=requests.ConnectionError("refused"))

        assert s.get("https://example.test/a") is None
        assert s.session.get.call_count == 1


class TestCircuitBreaker:
    @pytest.fixture
    def fragile(self):
        s = RequestSession(
            user_agent="funding-tests",
            max_attempts=1,
            breaker_fail_max=2,
            breaker_reset_seconds=600,
            wait=wait_none(),
        )
        s.session.get = MagicMock(side_effect=requests.ConnectionError("refused"))
        yield s
        s.close()

    def test_opens_after_repeated_failures(self, fragile):
        assert fragile.get("https://example.test/a") is None
        assert fragile.breaker.current_state == "closed"

        assert fragile.get("https://example.test/a") is None
        assert fragile.breaker.current_state == "open"

    def test_open_circuit_fails_fast(self, fragile):
        fragile.get("https://example.test/a")
        fragile.get("https://example.test/a")
        calls = fragile.session.get.call_count

        assert fragile.get("https://example.test/b") is None
        assert fragile.session.get.call_count == calls

    def test_success_resets_failure_count(self, fragile, mock_response):
        fragile.session.get.side_effect = [
            requests.ConnectionError("refused"),
            mock_response(200),
            requests.ConnectionError("refused"),
        ]

        fragile.get("https://example.test/a")
        assert fragile.get("https://example.test/a").status_code == 200
        fragile.get("https://example.test/a")

        assert fragile.breaker.current_state == "closed"

    def test_transient_statuses_count_as_failures(self, fragile, mock_response):
        fragile.session.get.side_effect = [mock_response(503), mock_response(503), mock_response(200)]

        fragile.get("https://example.test/a")
        fragile.get("https://example.test/a")

        assert fragile.breaker.current_state == "open"
        assert fragile.get("https://example.test/a") is None
        assert fragile.session.get.call_count == 2
