from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse

from acigate.models.aci import ClassQueryResult, ManagedObject, OperationResult
from acigate.models.common import StatusResponse
from acigate.services import aci as aci_service

router = APIRouter(prefix="/api/aci", tags=["aci"])


@router.get("/status")
def status() -> StatusResponse:
    return aci_service.get_status()


@router.get("/class/{class_name}")
def get_class(class_name: str, request: Request) -> ClassQueryResult:
    """Query string parameters (e.g. query-target-filter, rsp-subtree) are passed through to APIC."""
    return aci_service.get_class(class_name, dict(request.query_params) or None)


@router.get("/mo/{dn:path}", response_model=ManagedObject)
def get_object(dn: str, request: Request):
    obj = aci_service.get_object(dn, dict(request.query_params) or None)
    if obj is None:
        return JSONResponse(status_code=404, content={"error_code": "not_found", "message": f"No object at {dn}"})
    return obj


@router.post("/mo/{dn:path}")
def post_object(dn: str, payload: dict[str, Any] = Body(...)) -> OperationResult:
    return aci_service.post_object(dn, payload)


@router.delete("/mo/{dn:path}")
def delete_object(dn: str) -> OperationResult:
    return aci_service.delete_object(dn)
