"""TeamMember entity — an agent who works dispute cases."""

from dataclasses import dataclass, field

from app.domain.value_objects.enums import Availability, MemberRole


@dataclass
class TeamMember:
    id: int
    name: str
    email: str
    role: MemberRole = MemberRole.AGENT
    skills: set[str] = field(default_factory=set)
    max_caseload: int = 10
    current_caseload: int = 0
    availability: Availability = Availability.AVAILABLE
    avg_resolution_time: float = 0.0  # hours
    success_rate: float = 0.0  # 0..1

    def has_skill(self, skill: str) -> bool:
        return skill in self.skills

    def is_available(self) -> bool:
        return self.availability == Availability.AVAILABLE

    def has_capacity(self) -> bool:
        return self.current_caseload < self.max_caseload

    def is_overloaded(self) -> bool:
        return self.current_caseload >= self.max_caseload

    def take_case(self) -> None:
        self.current_caseload += 1

    def release_case(self) -> None:
        if self.current_caseload > 0:
            self.current_caseload -= 1
