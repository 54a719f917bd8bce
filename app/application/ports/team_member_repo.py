"""Port interface for team member persistence."""

from abc import ABC, abstractmethod

from app.domain.entities.team_member import TeamMember


class TeamMemberRepository(ABC):
    @abstractmethod
    def save(self, member: TeamMember) -> TeamMember:
        """Insert or replace by id."""
        ...

    @abstractmethod
    def get_by_id(self, member_id: int) -> TeamMember | None:
        ...

    @abstractmethod
    def get_all(self) -> list[TeamMember]:
        """All members in registration order."""
        ...

    @abstractmethod
    def as_mapping(self) -> dict[int, TeamMember]:
        ...
