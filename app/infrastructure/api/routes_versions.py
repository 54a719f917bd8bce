"""Case version endpoints — history, diff, rollback, export/import."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from app.application.services.version_control import VersionControlService
from app.infrastructure.api.dependencies import get_version_service
from app.infrastructure.api.schemas import CamelModel
from app.infrastructure.api.serializers import serialize_version_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cases/{case_id}/versions", tags=["versions"])

# ── Request schemas ─────────────────────────────────────────────────


class InitialVersionRequest(CamelModel):
    snapshot: dict[str, Any]
    user_id: int
    user_name: str


class NewVersionRequest(CamelModel):
    snapshot: dict[str, Any]
    previous_snapshot: dict[str, Any]
    user_id: int
    user_name: str
    comment: str | None = None
    tags: list[str] | None = None


class RollbackRequest(CamelModel):
    target_version: int
    user_id: int
    user_name: str
    comment: str | None = None


class ImportRequest(CamelModel):
    history_json: str


# ── Writes ──────────────────────────────────────────────────────────


@router.post("/initial", status_code=201)
def create_initial_version(
    case_id: int,
    body: InitialVersionRequest,
    service: VersionControlService = Depends(get_version_service),
):
    version = service.create_initial_version(case_id, body.snapshot, body.user_id, body.user_name)
    return version.to_dict()


@router.post("", status_code=201)
def create_version(
    case_id: int,
    body: NewVersionRequest,
    service: VersionControlService = Depends(get_version_service),
):
    version = service.create_version(
        case_id,
        snapshot=body.snapshot,
        previous_snapshot=body.previous_snapshot,
        user_id=body.user_id,
        user_name=body.user_name,
        comment=body.comment,
        tags=body.tags,
    )
    return version.to_dict()


@router.post("/rollback")
def rollback(
    case_id: int,
    body: RollbackRequest,
    service: VersionControlService = Depends(get_version_service),
):
    result = service.rollback_to_version(
        case_id, body.target_version, body.user_id, body.user_name, body.comment
    )
    if not result.success:
        raise HTTPException(status_code=409, detail=result.error)
    return {"success": True, "snapshot": result.snapshot}


@router.post("/import")
def import_history(
    case_id: int,
    body: ImportRequest,
    service: VersionControlService = Depends(get_version_service),
):
    if not service.import_history(case_id, body.history_json):
        raise HTTPException(status_code=400, detail="Invalid version history payload")
    return {"success": True, "currentVersion": service.get_current_version(case_id)}


# ── Reads (fixed paths before /{version}) ───────────────────────────


@router.get("")
def get_history(case_id: int, service: VersionControlService = Depends(get_version_service)):
    history = service.get_version_history(case_id)
    return {"total": len(history), "history": [v.to_dict() for v in history]}


@router.get("/current")
def get_current_version(case_id: int, service: VersionControlService = Depends(get_version_service)):
    return {"caseId": case_id, "currentVersion": service.get_current_version(case_id)}


@router.get("/compare")
def compare_versions(
    case_id: int,
    a: int = Query(..., description="Base version"),
    b: int = Query(..., description="Target version"),
    service: VersionControlService = Depends(get_version_service),
):
    return {"diffs": [d.to_dict() for d in service.compare_versions(case_id, a, b)]}


@router.get("/changes")
def get_changes_since(
    case_id: int,
    since: int = Query(..., ge=0),
    service: VersionControlService = Depends(get_version_service),
):
    return {"changes": [d.to_dict() for d in service.get_changes_since(case_id, since)]}


@router.get("/search")
def search_by_tag(
    case_id: int,
    tag: str = Query(..., min_length=1),
    service: VersionControlService = Depends(get_version_service),
):
    return {"versions": [v.to_dict() for v in service.search_by_tag(case_id, tag)]}


@router.get("/stats")
def get_stats(case_id: int, service: VersionControlService = Depends(get_version_service)):
    return serialize_version_stats(service.get_stats(case_id))


@router.get("/export")
def export_history(case_id: int, service: VersionControlService = Depends(get_version_service)):
    return {"caseId": case_id, "historyJson": service.export_history(case_id)}


@router.get("/{version}")
def get_version(
    case_id: int,
    version: int,
    service: VersionControlService = Depends(get_version_service),
):
    found = service.get_version(case_id, version)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Version {version} not found")
    return found.to_dict()
