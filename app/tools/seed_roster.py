"""Seed the team roster from a CSV file.

Usage:
    python -m app.tools.seed_roster data/team.csv   # parse and print a summary
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from app.adapters.csv_loader.loader import load_team_members
from app.application.services.team_assignment import TeamAssignmentService
from app.domain.entities.team_member import TeamMember
from app.domain.value_objects.enums import Availability, MemberRole

logger = logging.getLogger(__name__)


def build_member(row: dict) -> TeamMember:
    """Turn a normalized roster row into a TeamMember.

    Unknown roles fall back to agent, unknown availability to offline.
    """
    try:
        role = MemberRole(row["role"]) if row.get("role") else MemberRole.AGENT
    except ValueError:
        logger.warning("Member %s: unknown role %r, using agent", row["id"], row["role"])
        role = MemberRole.AGENT

    try:
        availability = (
            Availability(row["availability"]) if row.get("availability") else Availability.AVAILABLE
        )
    except ValueError:
        logger.warning(
            "Member %s: unknown availability %r, using offline", row["id"], row["availability"]
        )
        availability = Availability.OFFLINE

    return TeamMember(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        role=role,
        skills=set(row["skills"]),
        max_caseload=row["max_caseload"],
        current_caseload=row["current_caseload"],
        availability=availability,
        avg_resolution_time=row["avg_resolution_time"],
        success_rate=row["success_rate"],
    )


def seed_roster(service: TeamAssignmentService, csv_path: Path) -> int:
    """Load the roster into the service (upsert by id). Returns members loaded."""
    members = [build_member(row) for row in load_team_members(csv_path)]
    for member in members:
        service.add_team_member(member)
    logger.info("Seeded %d team members from %s", len(members), csv_path)
    return len(members)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Parse a team roster CSV")
    parser.add_argument("csv_path", type=Path)
    args = parser.parse_args(argv)

    if not args.csv_path.exists():
        logger.error("Roster file not found: %s", args.csv_path)
        return 1

    for row in load_team_members(args.csv_path):
        member = build_member(row)
        print(
            f"{member.id:>5}  {member.name:<30} {member.role.value:<13} "
            f"{member.availability.value:<10} {member.current_caseload}/{member.max_caseload}  "
            f"{', '.join(sorted(member.skills))}"
        )
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
    sys.exit(main())
