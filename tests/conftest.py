import json
import random

import pytest
import requests
from unittest.mock import MagicMock

from acigate.client import AciClient


# --- Canned APIC responses ---

LOGIN_RESPONSE = {
    "totalCount": "1",
    "imdata": [
        {
            "aaaLogin": {
                "attributes": {
                    "token": "tok-login",
                    "refreshTimeoutSeconds": "600",
                    "userName": "admin",
                }
            }
        }
    ],
}

REFRESH_RESPONSE = {
    "totalCount": "1",
    "imdata": [{"aaaRefresh": {"attributes": {"token": "tok-refresh", "refreshTimeoutSeconds": "600"}}}],
}

TENANT_T1 = {
    "fvTenant": {
        "attributes": {"dn": "uni/tn-t1", "name": "t1", "descr": "first"},
        "children": [
            {"fvBD": {"attributes": {"dn": "uni/tn-t1/BD-bd1", "name": "bd1"}}},
        ],
    }
}

TENANT_T2 = {"fvTenant": {"attributes": {"dn": "uni/tn-t2", "name": "t2", "descr": ""}}}

TENANT_LIST = {"totalCount": "2", "imdata": [TENANT_T1, TENANT_T2]}

TENANT_SINGLE = {"totalCount": "1", "imdata": [TENANT_T1]}

EMPTY_RESPONSE = {"totalCount": "0", "imdata": []}

ERROR_RESPONSE = {
    "totalCount": "1",
    "imdata": [{"error": {"attributes": {"code": "400", "text": "Request failed, unresolved class for fvXYZ"}}}],
}

APIC_URL = "https://apic.example.com"


def make_response(status: int = 200, body=None) -> MagicMock:
    """Fake requests.Response. Dicts are JSON-encoded; bytes/str are used as-is."""
    resp = MagicMock()
    resp.status_code = status
    if isinstance(body, (dict, list)):
        resp.content = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        resp.content = body.encode("utf-8")
    else:
        resp.content = body or b""
    return resp


@pytest.fixture
def http():
    """Mocked requests.Session; configure http.request.side_effect / return_value per test."""
    session = MagicMock(spec=requests.Session)
    session.cookies = requests.cookies.RequestsCookieJar()
    return session


@pytest.fixture
def sleeps():
    """Collects the delays the executor would have slept for."""
    return []


@pytest.fixture
def client(http, sleeps):
    return AciClient(
        APIC_URL + "/",
        "admin",
        "secret",
        http=http,
        sleep=sleeps.append,
        rng=random.Random(1234),
    )


@pytest.fixture
def logged_in(client):
    """Client that already holds a fresh token, so requests skip login."""
    with client.state.lock:
        client.state.store_token("tok-existing")
    return client
