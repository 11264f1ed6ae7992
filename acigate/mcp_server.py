from fastmcp import FastMCP

from acigate.exceptions import (
    APIError,
    AciError,
    AuthenticationError,
    DecodeError,
    HTTPStatusError,
    TransportError,
)
from acigate.services import aci as aci_service

mcp = FastMCP("acigate")


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, AuthenticationError):
        return {"error": "auth_error", "message": str(e), "action": "Check APIC_URL, APIC_USERNAME and APIC_PASSWORD"}
    if isinstance(e, APIError):
        return {"error": "apic_error", "code": e.code, "message": str(e)}
    if isinstance(e, HTTPStatusError):
        return {"error": "http_error", "status": e.status, "message": str(e), "action": "APIC is unhealthy, retry later"}
    if isinstance(e, (TransportError, DecodeError)):
        return {"error": "connection_error", "message": str(e), "action": "Check that the APIC is reachable"}
    return {"error": "unknown_error", "message": str(e)}


@mcp.tool
def aci_status() -> dict:
    """Show which APIC this server talks to and whether it currently holds a session token."""
    try:
        return aci_service.get_status().model_dump()
    except AciError as e:
        return _handle_mcp_error(e)


@mcp.tool
def aci_get_class(class_name: str, params: dict[str, str] | None = None) -> dict:
    """List all APIC objects of a class (e.g. 'fvTenant', 'fvBD', 'fvAEPg').
    Optional params are APIC query options such as {'query-target-filter': 'eq(fvTenant.name,"t1")'}
    or {'rsp-subtree': 'children'}."""
    try:
        return aci_service.get_class(class_name, params).model_dump()
    except AciError as e:
        return _handle_mcp_error(e)


@mcp.tool
def aci_get_dn(dn: str, params: dict[str, str] | None = None) -> dict:
    """Get one APIC object by distinguished name (e.g. 'uni/tn-mytenant').
    Returns {'found': false} if no object exists at that DN."""
    try:
        obj = aci_service.get_object(dn, params)
        if obj is None:
            return {"found": False, "dn": dn}
        return {"found": True, **obj.model_dump()}
    except AciError as e:
        return _handle_mcp_error(e)


@mcp.tool
def aci_post(dn: str, payload: dict) -> dict:
    """Create or update APIC objects under a DN. payload is raw APIC JSON, e.g.
    {'fvTenant': {'attributes': {'name': 'mytenant'}}} posted to 'uni/tn-mytenant'."""
    try:
        return aci_service.post_object(dn, payload).model_dump()
    except AciError as e:
        return _handle_mcp_error(e)


@mcp.tool
def aci_delete_dn(dn: str) -> dict:
    """Delete the APIC object at a DN, including its children."""
    try:
        return aci_service.delete_object(dn).model_dump()
    except AciError as e:
        return _handle_mcp_error(e)
