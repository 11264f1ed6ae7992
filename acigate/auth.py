"""APIC login and token refresh.

APIC tokens expire after ten minutes of inactivity; the token is refreshed once
it is older than REFRESH_INTERVAL seconds. All token mutation happens while the
session lock is held, so concurrent callers trigger at most one login or
refresh between them.
"""

import logging
import time

import requests

from acigate.exceptions import AciError, AuthenticationError
from acigate.executor import RequestExecutor
from acigate.http_client import set_token_cookie
from acigate.request import new_req, no_log_payload, no_refresh
from acigate.session import SessionState

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/aaaLogin"
REFRESH_PATH = "/api/aaaRefresh"
LOGIN_TOKEN_PATH = "imdata.0.aaaLogin.attributes.token"
REFRESH_TOKEN_PATH = "imdata.0.aaaRefresh.attributes.token"
REFRESH_INTERVAL = 480


class Authenticator:
    def __init__(self, state: SessionState, executor: RequestExecutor, http: requests.Session):
        self.state = state
        self.executor = executor
        self.http = http

    def _store(self, token: str) -> None:
        self.state.store_token(token)
        set_token_cookie(self.http, token, self.state.url)

    def login(self) -> None:
        """Authenticate with username/password. Caller must hold the session lock."""
        payload = {"aaaUser": {"attributes": {"name": self.state.username, "pwd": self.state.password}}}
        req = new_req(self.state.url, "POST", LOGIN_PATH, payload, no_refresh, no_log_payload)
        try:
            res = self.executor.do(req)
        except AciError as e:
            raise AuthenticationError(f"APIC login failed for user {self.state.username}: {e}") from e
        token = res.get(LOGIN_TOKEN_PATH).text
        if not token:
            raise AuthenticationError("APIC login response did not contain a token")
        self._store(token)
        logger.info("Logged in to %s as %s", self.state.url, self.state.username)

    def refresh(self) -> None:
        """Renew the current token. Caller must hold the session lock."""
        req = new_req(self.state.url, "GET", REFRESH_PATH, None, no_refresh, no_log_payload)
        try:
            res = self.executor.do(req)
        except AciError as e:
            raise AuthenticationError(f"APIC token refresh failed: {e}") from e
        token = res.get(REFRESH_TOKEN_PATH).text
        if not token:
            raise AuthenticationError("APIC refresh response did not contain a token")
        self._store(token)
        logger.debug("Refreshed APIC token for %s", self.state.url)

    def authenticate(self) -> None:
        """Log in if no token is held, refresh it if older than REFRESH_INTERVAL, else do nothing."""
        with self.state.lock:
            if not self.state.token:
                self.login()
            elif time.monotonic() - self.state.last_refresh > REFRESH_INTERVAL:
                self.refresh()
