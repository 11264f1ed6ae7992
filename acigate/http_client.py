"""HTTP transport for the APIC client.

Retries are handled by the executor, not by urllib3, so the session carries no
Retry adapter. APIC controllers usually present self-signed certificates, hence
verification is off by default.
"""

from urllib.parse import urlparse

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

TOKEN_COOKIE = "APIC-cookie"


def create_session(insecure: bool = True) -> requests.Session:
    """Return a requests.Session with cookie handling and the requested TLS verification."""
    session = requests.Session()
    session.verify = not insecure
    session.headers.update({"Content-Type": "application/json", "Accept": "application/json"})
    if insecure:
        urllib3.disable_warnings(InsecureRequestWarning)
    return session


def set_token_cookie(session: requests.Session, token: str, url: str) -> None:
    """Attach the APIC token so subsequent requests to the host of ``url`` are authenticated.

    The cookie is scoped to that host and path "/", replacing the cookie APIC
    set on login rather than sitting beside it.
    """
    session.cookies.set(TOKEN_COOKIE, token, domain=urlparse(url).hostname, path="/")
