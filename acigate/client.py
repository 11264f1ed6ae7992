"""Session client for the Cisco APIC REST API.

    client = AciClient("https://10.0.0.1", "admin", "secret", request_timeout=120)
    tenants = client.get_class("fvTenant")
    for tenant in tenants.items():
        print(tenant.get("fvTenant.attributes.name").text)

Each call ensures a valid token first (unless built with ``no_refresh``) and is
retried on transient failures according to the client's retry policy. One
client may be shared between threads.
"""

import random
from collections.abc import Callable
from typing import Any

import requests

from acigate.auth import Authenticator
from acigate.backoff import (
    DEFAULT_DELAY_FACTOR,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MIN_DELAY,
)
from acigate.executor import DEFAULT_TIMEOUT, RequestExecutor
from acigate.http_client import create_session
from acigate.request import Req, RequestOption, new_req
from acigate.response import Res
from acigate.session import RetryPolicy, SessionState


class AciClient:
    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        *,
        insecure: bool = True,
        request_timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_min_delay: float = DEFAULT_MIN_DELAY,
        backoff_max_delay: float = DEFAULT_MAX_DELAY,
        backoff_delay_factor: float = DEFAULT_DELAY_FACTOR,
        logging: bool = False,
        rng: random.Random | None = None,
        http: requests.Session | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        """
        Args:
            url: APIC base URL, e.g. https://10.0.0.1 (port optional)
            username: APIC username
            password: APIC password
            insecure: Skip TLS certificate verification
            request_timeout: Timeout in seconds for each transport attempt
            max_retries: Retries after the first attempt on transient failures
            backoff_min_delay: Lower bound of the retry delay in seconds
            backoff_max_delay: Upper bound of the retry delay in seconds
            backoff_delay_factor: Growth factor of the retry delay per attempt
            logging: Emit debug logs of requests and responses
            rng: Random source for backoff jitter (seed it for reproducible delays)
            http: requests.Session to use instead of a fresh one
            sleep: Replacement for time.sleep between retries
        """
        self.state = SessionState(
            url=url,
            username=username,
            password=password,
            retry=RetryPolicy(
                max_retries=max_retries,
                min_delay=backoff_min_delay,
                max_delay=backoff_max_delay,
                delay_factor=backoff_delay_factor,
            ),
            logging=logging,
        )
        self.http = http or create_session(insecure)
        self.executor = RequestExecutor(self.state, self.http, timeout=request_timeout, rng=rng, sleep=sleep)
        self.authenticator = Authenticator(self.state, self.executor, self.http)

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "AciClient":
        """Build a client from the APIC fields of a Settings instance."""
        return cls(
            settings.apic_url,
            settings.apic_username,
            settings.apic_password,
            insecure=settings.apic_insecure,
            request_timeout=settings.apic_request_timeout,
            max_retries=settings.apic_max_retries,
            backoff_min_delay=settings.apic_backoff_min_delay,
            backoff_max_delay=settings.apic_backoff_max_delay,
            backoff_delay_factor=settings.apic_backoff_delay_factor,
            logging=settings.apic_logging,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return self.state.url

    @property
    def token(self) -> str:
        return self.state.snapshot()[0]

    @property
    def last_refresh(self) -> float:
        return self.state.snapshot()[1]

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self) -> None:
        with self.state.lock:
            self.authenticator.login()

    def refresh(self) -> None:
        """Refresh the token now. Normally handled automatically once it is older than 8 minutes."""
        with self.state.lock:
            self.authenticator.refresh()

    def authenticate(self) -> None:
        self.authenticator.authenticate()

    # =========================================================================
    # Requests
    # =========================================================================

    def new_req(self, method: str, path: str, data: Any = None, *options: RequestOption) -> Req:
        return new_req(self.state.url, method, path, data, *options)

    def do(self, req: Req) -> Res:
        """Execute a request built with new_req, authenticating first if it asks for it."""
        if req.refresh:
            self.authenticator.authenticate()
        return self.executor.do(req)

    def get(self, path: str, *options: RequestOption) -> Res:
        """GET ``path``. The result is the raw APIC envelope:

            {"imdata": [{"fvTenant": {"attributes": {"dn": "uni/tn-t1", ...}}}], "totalCount": "1"}
        """
        return self.do(self.new_req("GET", path, None, *options))

    def get_class(self, class_name: str, *options: RequestOption) -> Res:
        """Query all objects of a class. Returns the ``imdata`` list."""
        return self.get(f"/api/class/{class_name}", *options).get("imdata")

    def get_dn(self, dn: str, *options: RequestOption) -> Res:
        """Fetch one object by DN. Returns the first ``imdata`` element."""
        return self.get(f"/api/mo/{dn}", *options).get("imdata.0")

    def delete_dn(self, dn: str, *options: RequestOption) -> Res:
        return self.do(self.new_req("DELETE", f"/api/mo/{dn}", None, *options))

    def post(self, dn: str, data: Any, *options: RequestOption) -> Res:
        """Create or update objects under ``dn``. ``data`` may be a str, bytes or JSON-serializable object."""
        return self.do(self.new_req("POST", f"/api/mo/{dn}", data, *options))
