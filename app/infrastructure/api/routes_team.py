"""Team assignment endpoints — members, rules, routing and workload."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field

from app.application.services.team_assignment import TeamAssignmentService
from app.config import settings
from app.domain.entities.assignment import Assignment
from app.domain.entities.assignment_rule import AmountRange, AssignmentRule, RuleConditions
from app.domain.entities.team_member import TeamMember
from app.domain.value_objects.case_data import CaseData
from app.domain.value_objects.enums import (
    AssignmentPriority,
    AssignmentStatus,
    AssignmentStrategy,
    Availability,
    MemberRole,
)
from app.infrastructure.api.dependencies import get_team_service
from app.infrastructure.api.schemas import CamelModel
from app.infrastructure.api.serializers import (
    serialize_assignment,
    serialize_member,
    serialize_rule,
    serialize_workload,
)
from app.tools.seed_roster import seed_roster

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team", tags=["team"])

# ── Request schemas ─────────────────────────────────────────────────


class TeamMemberRequest(CamelModel):
    id: int
    name: str
    email: str
    role: MemberRole = MemberRole.AGENT
    skills: list[str] = Field(default_factory=list)
    max_caseload: int = Field(default=10, ge=0)
    current_caseload: int = Field(default=0, ge=0)
    availability: Availability = Availability.AVAILABLE
    avg_resolution_time: float = 0.0
    success_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class AmountRangeRequest(CamelModel):
    min: float | None = None
    max: float | None = None


class RuleConditionsRequest(CamelModel):
    carrier: list[str] | None = None
    priority: list[str] | None = None
    amount_range: AmountRangeRequest | None = None
    status: list[str] | None = None
    tags: list[str] | None = None


class RuleRequest(CamelModel):
    id: str
    name: str
    priority: int
    conditions: RuleConditionsRequest = Field(default_factory=RuleConditionsRequest)
    assign_to: AssignmentStrategy
    target_user_id: int | None = None
    auto_assign: bool = True
    notify_assignee: bool = False
    escalate_after_hours: float | None = None


class CaseDataRequest(CamelModel):
    carrier: str | None = None
    priority: str | None = None
    claimed_amount: float | None = None
    status: str | None = None
    tags: list[str] | None = None


class AssignRequest(CamelModel):
    assigned_to: int
    assigned_by: int
    priority: AssignmentPriority | None = None
    due_date: datetime | None = None
    notes: str | None = None


class AutoAssignRequest(CamelModel):
    case_data: CaseDataRequest = Field(default_factory=CaseDataRequest)
    assigned_by: int


class ReassignRequest(CamelModel):
    new_assignee: int
    reassigned_by: int
    reason: str | None = None


class EscalateRequest(CamelModel):
    escalated_to: int
    escalated_by: int
    reason: str


class StatusRequest(CamelModel):
    status: AssignmentStatus


def _to_frozenset(values: list[str] | None) -> frozenset[str] | None:
    return frozenset(values) if values is not None else None


def _require(assignment: Assignment | None, case_id: int) -> dict:
    if assignment is None:
        raise HTTPException(status_code=404, detail=f"No assignment for case {case_id}")
    return serialize_assignment(assignment)


# ── Members ─────────────────────────────────────────────────────────


@router.post("/members", status_code=201)
def add_member(body: TeamMemberRequest, service: TeamAssignmentService = Depends(get_team_service)):
    member = TeamMember(
        id=body.id,
        name=body.name,
        email=body.email,
        role=body.role,
        skills=set(body.skills),
        max_caseload=body.max_caseload,
        current_caseload=body.current_caseload,
        availability=body.availability,
        avg_resolution_time=body.avg_resolution_time,
        success_rate=body.success_rate,
    )
    service.add_team_member(member)
    return serialize_member(member)


@router.get("/members")
def list_members(
    role: MemberRole | None = None,
    availability: Availability | None = None,
    skill: list[str] | None = Query(default=None),
    service: TeamAssignmentService = Depends(get_team_service),
):
    members = service.get_all_team_members(role=role, availability=availability, skills=skill)
    return {"total": len(members), "members": [serialize_member(m) for m in members]}


@router.post("/members/ingest")
def ingest_roster(service: TeamAssignmentService = Depends(get_team_service)):
    """Load team members from the roster CSV at ROSTER_CSV_PATH."""
    if not settings.roster_csv_path:
        raise HTTPException(status_code=400, detail="ROSTER_CSV_PATH is not configured")
    csv_path = Path(settings.roster_csv_path)
    if not csv_path.is_file():
        raise HTTPException(status_code=400, detail="Configured roster file not found")

    try:
        loaded = seed_roster(service, csv_path)
    except ValueError as e:
        logger.exception("Error ingesting roster %s", csv_path)
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "loaded": loaded}


@router.get("/members/{user_id}")
def get_member(user_id: int, service: TeamAssignmentService = Depends(get_team_service)):
    member = service.get_team_member(user_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Team member not found")
    return serialize_member(member)


@router.get("/members/{user_id}/assignments")
def member_assignments(
    user_id: int,
    status: AssignmentStatus | None = None,
    service: TeamAssignmentService = Depends(get_team_service),
):
    assignments = service.get_user_assignments(user_id, status)
    return {"total": len(assignments), "assignments": [serialize_assignment(a) for a in assignments]}


# ── Rules ───────────────────────────────────────────────────────────


@router.post("/rules", status_code=201)
def add_rule(body: RuleRequest, service: TeamAssignmentService = Depends(get_team_service)):
    cond = body.conditions
    try:
        rule = AssignmentRule(
            id=body.id,
            name=body.name,
            priority=body.priority,
            assign_to=body.assign_to,
            conditions=RuleConditions(
                carrier=_to_frozenset(cond.carrier),
                priority=_to_frozenset(cond.priority),
                amount_range=(
                    AmountRange(min=cond.amount_range.min, max=cond.amount_range.max)
                    if cond.amount_range is not None
                    else None
                ),
                status=_to_frozenset(cond.status),
                tags=_to_frozenset(cond.tags),
            ),
            target_user_id=body.target_user_id,
            auto_assign=body.auto_assign,
            notify_assignee=body.notify_assignee,
            escalate_after_hours=body.escalate_after_hours,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    service.add_rule(rule)
    return serialize_rule(rule)


@router.get("/rules")
def list_rules(service: TeamAssignmentService = Depends(get_team_service)):
    return {"rules": [serialize_rule(r) for r in service.get_rules()]}


# ── Case assignment ─────────────────────────────────────────────────


@router.post("/cases/{case_id}/assign", status_code=201)
def assign_case(
    case_id: int,
    body: AssignRequest,
    service: TeamAssignmentService = Depends(get_team_service),
):
    assignment = service.assign_case(
        case_id=case_id,
        assigned_to=body.assigned_to,
        assigned_by=body.assigned_by,
        priority=body.priority,
        due_date=body.due_date,
        notes=body.notes,
    )
    return serialize_assignment(assignment)


@router.post("/cases/{case_id}/auto-assign")
def auto_assign_case(
    case_id: int,
    body: AutoAssignRequest,
    service: TeamAssignmentService = Depends(get_team_service),
):
    data = body.case_data
    case_data = CaseData(
        carrier=data.carrier,
        priority=data.priority,
        claimed_amount=data.claimed_amount,
        status=data.status,
        tags=tuple(data.tags) if data.tags is not None else None,
    )
    assignment = service.auto_assign_case(case_id, case_data, body.assigned_by)
    return {
        "assigned": assignment is not None,
        "assignment": serialize_assignment(assignment) if assignment else None,
    }


@router.post("/cases/{case_id}/reassign")
def reassign_case(
    case_id: int,
    body: ReassignRequest,
    service: TeamAssignmentService = Depends(get_team_service),
):
    assignment = service.reassign_case(case_id, body.new_assignee, body.reassigned_by, body.reason)
    return _require(assignment, case_id)


@router.post("/cases/{case_id}/escalate")
def escalate_case(
    case_id: int,
    body: EscalateRequest,
    service: TeamAssignmentService = Depends(get_team_service),
):
    try:
        assignment = service.escalate_case(case_id, body.escalated_to, body.escalated_by, body.reason)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _require(assignment, case_id)


@router.patch("/cases/{case_id}/status")
def update_status(
    case_id: int,
    body: StatusRequest,
    service: TeamAssignmentService = Depends(get_team_service),
):
    try:
        assignment = service.update_assignment_status(case_id, body.status)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _require(assignment, case_id)


@router.get("/cases/{case_id}/assignment")
def get_assignment(case_id: int, service: TeamAssignmentService = Depends(get_team_service)):
    return _require(service.get_assignment(case_id), case_id)


@router.get("/cases/{case_id}/history")
def assignment_history(case_id: int, service: TeamAssignmentService = Depends(get_team_service)):
    history = service.get_assignment_history(case_id)
    return {"total": len(history), "history": [serialize_assignment(a) for a in history]}


# ── Workload ────────────────────────────────────────────────────────


@router.get("/workload")
def workload(service: TeamAssignmentService = Depends(get_team_service)):
    return serialize_workload(service.get_workload_stats())
