"""
HTTP session with retry and a circuit breaker for the SEC endpoints.

RequestSession.get() returns a requests.Response (any status) or None when no
response could be obtained. Connection errors, timeouts and transient
statuses (429/5xx) are retried with jittered exponential backoff via tenacity,
bounded by an attempt count and a total time budget. Every attempt passes
through a pybreaker circuit breaker; once it opens, calls fail fast with None
until the reset timeout has passed. After retries run out the last transient
response (or None) is returned so callers can treat it as "no data". Other
requests errors propagate.
"""

import logging
from typing import Optional

import pybreaker
import requests
from fake_useragent import UserAgent
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)

TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})


class TransientResponseError(Exception):
    """Raised internally to retry a response with a transient status."""

    def __init__(self, response: requests.Response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


class BreakerLogListener(pybreaker.CircuitBreakerListener):
    """Logs circuit state transitions."""

    def state_change(self, cb, old_state, new_state):
        old = old_state.name if old_state is not None else "-"
        logger.warning(f"Circuit '{cb.name}' {old} -> {new_state.name}")


class RequestSession:
    """requests.Session wrapper with default headers, timeout, retry and circuit breaker."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff_seconds: float = 2.0,
        total_seconds: float = 60.0,
        breaker_fail_max: int = 5,
        breaker_reset_seconds: float = 30.0,
        wait=None,
    ):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent or UserAgent().random,
            "Accept": "*/*",
        })
        self.breaker = pybreaker.CircuitBreaker(
            fail_max=breaker_fail_max,
            reset_timeout=breaker_reset_seconds,
            listeners=[BreakerLogListener()],
            name="sec",
        )
        self._retrying = Retrying(
            stop=stop_after_attempt(max_attempts) | stop_after_delay(total_seconds),
            wait=wait if wait is not None else wait_exponential_jitter(initial=backoff_seconds, max=30),
            retry=retry_if_exception_type(
                (requests.ConnectionError, requests.Timeout, TransientResponseError)
            ),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state) -> None:
        logger.warning(
            f"Retrying {retry_state.args[0]} (attempt {retry_state.attempt_number}): "
            f"{retry_state.outcome.exception()}"
        )

    def _send(self, url: str, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        res = self.session.get(url, **kwargs)
        if res.status_code in TRANSIENT_STATUSES:
            raise TransientResponseError(res)
        return res

    def _guarded_send(self, url: str, **kwargs) -> requests.Response:
        return self.breaker.call(self._send, url, **kwargs)

    def get(self, url: str, **kwargs) -> Optional[requests.Response]:
        try:
            return self._retrying(self._guarded_send, url, **kwargs)
        except TransientResponseError as e:
            logger.error(f"GET {url} still failing after retries: {e}")
            return e.response
        except pybreaker.CircuitBreakerError as e:
            logger.error(f"GET {url} skipped, circuit open: {e}")
            return None
        except requests.Timeout as e:
            logger.error(f"GET {url} timed out: {e}")
            return None
        except requests.ConnectionError as e:
            logger.error(f"GET {url} connection failed: {e}")
            return None

    def close(self) -> None:
        self.session.close()
