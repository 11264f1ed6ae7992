from functools import lru_cache

from acigate.client import AciClient
from acigate.config import get_settings
from acigate.exceptions import AuthenticationError
from acigate.models.aci import ClassQueryResult, ManagedObject, OperationResult
from acigate.models.common import StatusResponse
from acigate.request import RequestOption, queries
from acigate.response import Res


@lru_cache
def get_client() -> AciClient:
    """Process-wide client built from settings. Shared by the REST router and the MCP tools."""
    settings = get_settings()
    if not settings.apic_url:
        raise AuthenticationError("APIC_URL not configured. Set APIC_URL, APIC_USERNAME and APIC_PASSWORD in .env")
    return AciClient.from_settings(settings)


def _options(params: dict | None) -> list[RequestOption]:
    return [queries(params)] if params else []


def _object(item: Res) -> ManagedObject | None:
    return ManagedObject.from_imdata(item.value) if isinstance(item.value, dict) else None


def _objects(res: Res) -> list[ManagedObject]:
    return [obj for obj in map(_object, res.items()) if obj is not None]


def get_status() -> StatusResponse:
    client = get_client()
    age = client.state.token_age()
    return StatusResponse(url=client.url, authenticated=age is not None, token_age_seconds=age)


def get_class(class_name: str, params: dict | None = None) -> ClassQueryResult:
    """Query all objects of an APIC class, e.g. 'fvTenant'."""
    objects = _objects(get_client().get_class(class_name, *_options(params)))
    return ClassQueryResult(class_name=class_name, objects=objects, count=len(objects))


def get_object(dn: str, params: dict | None = None) -> ManagedObject | None:
    """Fetch one object by DN. Returns None if APIC has no object at that DN."""
    return _object(get_client().get_dn(dn, *_options(params)))


def post_object(dn: str, payload: dict) -> OperationResult:
    res = get_client().post(dn, payload)
    return OperationResult(dn=dn, method="POST", objects=_objects(res.get("imdata")))


def delete_object(dn: str) -> OperationResult:
    res = get_client().delete_dn(dn)
    return OperationResult(dn=dn, method="DELETE", objects=_objects(res.get("imdata")))
