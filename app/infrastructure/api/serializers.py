"""Domain → JSON dict conversion for API responses (camelCase keys)."""

from __future__ import annotations

from datetime import datetime

from app.application.services.team_assignment import WorkloadStats
from app.application.services.version_control import VersionStats
from app.domain.entities.assignment import Assignment
from app.domain.entities.assignment_rule import AssignmentRule
from app.domain.entities.team_member import TeamMember
from app.domain.value_objects.timestamps import format_timestamp


def _ts(value: datetime | None) -> str | None:
    return format_timestamp(value) if value else None


def serialize_member(m: TeamMember) -> dict:
    return {
        "id": m.id,
        "name": m.name,
        "email": m.email,
        "role": m.role.value,
        "skills": sorted(m.skills),
        "maxCaseload": m.max_caseload,
        "currentCaseload": m.current_caseload,
        "availability": m.availability.value,
        "avgResolutionTime": m.avg_resolution_time,
        "successRate": m.success_rate,
    }


def serialize_rule(r: AssignmentRule) -> dict:
    c = r.conditions
    conditions: dict = {}
    if c.carrier is not None:
        conditions["carrier"] = sorted(c.carrier)
    if c.priority is not None:
        conditions["priority"] = sorted(c.priority)
    if c.amount_range is not None:
        conditions["amountRange"] = {"min": c.amount_range.min, "max": c.amount_range.max}
    if c.status is not None:
        conditions["status"] = sorted(c.status)
    if c.tags is not None:
        conditions["tags"] = sorted(c.tags)

    return {
        "id": r.id,
        "name": r.name,
        "priority": r.priority,
        "conditions": conditions,
        "assignTo": r.assign_to.value,
        "targetUserId": r.target_user_id,
        "autoAssign": r.auto_assign,
        "notifyAssignee": r.notify_assignee,
        "escalateAfterHours": r.escalate_after_hours,
    }


def serialize_assignment(a: Assignment) -> dict:
    return {
        "id": a.id,
        "caseId": a.case_id,
        "assignedTo": a.assigned_to,
        "assignedBy": a.assigned_by,
        "assignedAt": _ts(a.assigned_at),
        "dueDate": _ts(a.due_date),
        "priority": a.priority.value,
        "status": a.status.value,
        "notes": a.notes,
        "escalatedTo": a.escalated_to,
        "escalatedAt": _ts(a.escalated_at),
    }


def serialize_version_stats(s: VersionStats) -> dict:
    return {
        "totalVersions": s.total_versions,
        "currentVersion": s.current_version,
        "uniqueUsers": s.unique_users,
        "uniqueTags": s.unique_tags,
        "totalChanges": s.total_changes,
        "firstVersion": _ts(s.first_version),
        "lastVersion": _ts(s.last_version),
    }


def serialize_workload(s: WorkloadStats) -> dict:
    return {
        "totalMembers": s.total_members,
        "available": s.available,
        "busy": s.busy,
        "away": s.away,
        "totalCaseload": s.total_caseload,
        "avgCaseload": s.avg_caseload,
        "overloaded": s.overloaded,
    }
