"""Retry loop for APIC requests.

Connection failures, unreadable bodies and the statuses in RETRYABLE_STATUSES
are retried up to ``max_retries`` times with jittered exponential backoff.
Every other status ends the loop. The body is then parsed and inspected for
an APIC error code exactly once; a body that is not JSON raises DecodeError
without another attempt, since the request was already accepted.

Non-retryable 4xx statuses other than 405 are not failures by themselves: they
fall through to error-code decoding, because APIC reports most rejections as an
``error`` object in the body. A 4xx without an error code in its body is
returned like a success; check ``Res.status_code`` if that matters.
"""

import itertools
import logging
import random
import time
from collections.abc import Callable

import requests

from acigate.backoff import backoff_delay
from acigate.exceptions import APIError, DecodeError, HTTPStatusError, TransportError
from acigate.request import Req
from acigate.response import Res
from acigate.session import SessionState

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({405, 500, 501, 502, 503, 504})
ERROR_CODE_PATH = "imdata.0.error.attributes.code"
DEFAULT_TIMEOUT = 60


class RequestExecutor:
    def __init__(
        self,
        state: SessionState,
        http: requests.Session,
        timeout: float = DEFAULT_TIMEOUT,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] | None = None,
        parse: Callable[[bytes, int], Res] = Res.parse,
    ):
        self.state = state
        self.http = http
        self.timeout = timeout
        self.rng = rng or random.Random()
        self.sleep = sleep or time.sleep
        self.parse = parse

    def _debug(self, msg: str, *args) -> None:
        if self.state.logging:
            logger.debug(msg, *args)

    def backoff(self, attempt: int) -> bool:
        """Sleep before the next attempt. Returns False once retries are exhausted."""
        retry = self.state.retry
        if attempt >= retry.max_retries:
            return False
        delay = backoff_delay(attempt, retry.min_delay, retry.max_delay, retry.delay_factor, self.rng)
        self._debug("Sleeping %.2fs before retry %d of %d", delay, attempt + 1, retry.max_retries)
        self.sleep(delay)
        return True

    def do(self, req: Req) -> Res:
        """Send ``req`` until it gets a final response, fails terminally, or runs out of retries."""
        for attempt in itertools.count():
            if req.log_payload and req.body is not None:
                self._debug("HTTP request: %s %s %s", req.method, req.url, req.body.decode("utf-8", "replace"))
            else:
                self._debug("HTTP request: %s %s", req.method, req.url)

            try:
                resp = self.http.request(
                    req.method,
                    req.url,
                    data=req.body,
                    params=list(req.params) or None,
                    timeout=self.timeout,
                    stream=True,
                )
            except requests.RequestException as e:
                if not self.backoff(attempt):
                    logger.error("HTTP connection to %s failed after %d attempts: %s", req.url, attempt + 1, e)
                    raise TransportError(f"HTTP connection failed: {e}", attempts=attempt + 1) from e
                logger.warning("HTTP connection failed: %s, retries: %d", e, attempt)
                continue

            try:
                content = resp.content
            except requests.RequestException as e:
                if not self.backoff(attempt):
                    logger.error("Cannot read response body from %s: %s", req.url, e)
                    raise DecodeError(f"Cannot read response body: {e}", attempts=attempt + 1) from e
                logger.warning("Cannot read response body: %s, retries: %d", e, attempt)
                continue
            finally:
                resp.close()

            status = resp.status_code
            if status in RETRYABLE_STATUSES:
                if not self.backoff(attempt):
                    logger.error("HTTP request to %s failed: status code %d", req.url, status)
                    raise HTTPStatusError(status, attempts=attempt + 1)
                logger.warning("HTTP request failed: status code %d, retries: %d", status, attempt)
                continue
            break

        try:
            res = self.parse(content, status)
        except ValueError as e:
            logger.error("Cannot decode response body from %s (status %d): %s", req.url, status, e)
            raise DecodeError(f"Cannot decode response body: {e}", attempts=attempt + 1) from e
        if req.log_payload:
            self._debug("HTTP response: %d %s", status, res.raw)

        code = res.get(ERROR_CODE_PATH).value
        if code not in (None, ""):
            logger.error("APIC error %s on %s %s", code, req.method, req.url)
            raise APIError(str(code), res.raw, res)
        return res
