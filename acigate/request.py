"""Request descriptors and the options that shape them.

Options are plain functions taking and returning a ``RequestOptions`` value.
They are folded over a fresh default when a request is built, e.g.

    client.get("/api/class/fvTenant", query("rsp-subtree", "children"), no_log_payload)
"""

import dataclasses
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RequestOptions:
    params: tuple[tuple[str, str], ...] = ()
    refresh: bool = True
    log_payload: bool = True


RequestOption = Callable[[RequestOptions], RequestOptions]


def query(key: str, value: Any) -> RequestOption:
    """Append a ``key=value`` query parameter."""
    def apply(opts: RequestOptions) -> RequestOptions:
        return dataclasses.replace(opts, params=opts.params + ((key, str(value)),))
    return apply


def queries(params: Mapping[str, Any]) -> RequestOption:
    """Append several query parameters, in mapping order."""
    def apply(opts: RequestOptions) -> RequestOptions:
        extra = tuple((k, str(v)) for k, v in params.items())
        return dataclasses.replace(opts, params=opts.params + extra)
    return apply


def no_refresh(opts: RequestOptions) -> RequestOptions:
    """Send the request without ensuring authentication first."""
    return dataclasses.replace(opts, refresh=False)


def no_log_payload(opts: RequestOptions) -> RequestOptions:
    """Keep request and response bodies out of debug logs."""
    return dataclasses.replace(opts, log_payload=False)


def build_options(*options: RequestOption) -> RequestOptions:
    opts = RequestOptions()
    for option in options:
        opts = option(opts)
    return opts


@dataclass(frozen=True)
class Req:
    """One API call, ready for the executor. Bodies are buffered so retries resend identical bytes."""

    method: str
    url: str
    body: bytes | None = None
    params: tuple[tuple[str, str], ...] = ()
    refresh: bool = True
    log_payload: bool = True


def encode_body(data: Any) -> bytes | None:
    """Buffer a payload given as str, bytes or a JSON-serializable object."""
    if data is None:
        return None
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    return json.dumps(data, separators=(",", ":")).encode("utf-8")


def new_req(base_url: str, method: str, path: str, data: Any = None, *options: RequestOption) -> Req:
    """Build a request for ``base_url + path + '.json'``."""
    opts = build_options(*options)
    return Req(
        method=method,
        url=f"{base_url}{path}.json",
        body=encode_body(data),
        params=opts.params,
        refresh=opts.refresh,
        log_payload=opts.log_payload,
    )
