"""
API routes for the hosts editor.

Each route maps one :class:`HostsService` operation.  Failures are
returned as ``{"success": false, "error", "details"}`` with an HTTP
status matching the error kind, the same shape the UI shows to the
operator.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core import HostRecord, OperationResult
from hostsfile import validator
from services.hosts_service import HostsService


router = APIRouter(prefix="/api")

# Singleton service, created in main.py and attached here
_service: Optional[HostsService] = None


def init_service(svc: HostsService) -> None:
    global _service
    _service = svc


def svc() -> HostsService:
    if _service is None:
        raise RuntimeError("HostsService not initialized")
    return _service


_STATUS_BY_KIND = {
    "NotFoundError": 404,
    "NoHistoryError": 409,
    "ReadError": 500,
    "WriteError": 500,
    "BackupError": 500,
    "ListError": 500,
    "InitError": 503,
}


def _respond(result: OperationResult, **payload: Any):
    if not result.success:
        return JSONResponse(result.to_json(), status_code=_STATUS_BY_KIND.get(result.kind or "", 500))
    return {"success": True, **payload}


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class HostModel(BaseModel):
    id: str = ""
    ip: str = ""
    domain: str = ""
    comment: str = ""
    is_comment: bool = False
    line_number: int = 0

    def to_record(self) -> HostRecord:
        return HostRecord(**self.model_dump())


class HostFields(BaseModel):
    ip: Optional[str] = None
    domain: Optional[str] = None
    comment: Optional[str] = None


class UpdateRequest(BaseModel):
    old: HostModel
    new: HostFields


class DeleteManyRequest(BaseModel):
    hosts: list[HostModel]


class RestoreRequest(BaseModel):
    path: str


class ValueRequest(BaseModel):
    value: str


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/status")
def status():
    """Whether the service came up and what can be undone / redone."""
    if _service is None:
        return {"ready": False, "can_undo": False, "can_redo": False}
    return {
        "ready": True,
        "can_undo": _service.can_undo(),
        "can_redo": _service.can_redo(),
    }


@router.get("/hosts")
def get_hosts():
    result = svc().get_hosts()
    hosts = [r.to_json() for r in result.value] if result.success else []
    return _respond(result, hosts=hosts)


@router.post("/hosts")
def add_host(req: HostFields):
    result = svc().add_host(req.model_dump(exclude_none=True))
    host = result.value.to_json() if result.success else None
    return _respond(result, host=host)


@router.put("/hosts")
def update_host(req: UpdateRequest):
    result = svc().update_host(req.old.to_record(), req.new.model_dump(exclude_none=True))
    host = result.value.to_json() if result.success and result.value else None
    return _respond(result, host=host)


@router.post("/hosts/delete")
def delete_host(req: HostModel):
    return _respond(svc().delete_host(req.to_record()))


@router.post("/hosts/delete-many")
def delete_hosts(req: DeleteManyRequest):
    result = svc().delete_hosts([h.to_record() for h in req.hosts])
    removed = [r.to_json() for r in result.value] if result.success else []
    return _respond(result, removed=removed)


@router.post("/undo")
def undo():
    return _respond(svc().undo())


@router.post("/redo")
def redo():
    return _respond(svc().redo())


@router.get("/can-undo")
def can_undo():
    return svc().can_undo()


@router.get("/can-redo")
def can_redo():
    return svc().can_redo()


@router.post("/backups")
def create_backup():
    result = svc().create_backup()
    return _respond(result, backupPath=str(result.value) if result.success else None)


@router.get("/backups")
def get_backups():
    result = svc().get_backups()
    backups = [b.to_json() for b in result.value] if result.success else []
    return _respond(result, backups=backups)


@router.post("/backups/restore")
def restore_backup(req: RestoreRequest):
    return _respond(svc().restore_backup(req.path))


@router.post("/validate/ip")
def validate_ip(req: ValueRequest):
    return validator.validate_ip(req.value).to_json()


@router.post("/validate/domain")
def validate_domain(req: ValueRequest):
    return validator.validate_domain(req.value).to_json()
