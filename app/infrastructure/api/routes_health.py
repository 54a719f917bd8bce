"""Health check endpoint."""

from fastapi import APIRouter, Depends

from app.application.services.team_assignment import TeamAssignmentService
from app.infrastructure.api.dependencies import get_team_service

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(service: TeamAssignmentService = Depends(get_team_service)):
    """Report liveness; state is in-memory, so there is no backing store to probe."""
    return {
        "status": "ok",
        "storage": "in-memory",
        "team_members": len(service.get_all_team_members()),
        "service": "CaseTrack - case versioning and team assignment",
    }
