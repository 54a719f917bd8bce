"""Port interface for assignment rule storage."""

from abc import ABC, abstractmethod

from app.domain.entities.assignment_rule import AssignmentRule


class RuleRepository(ABC):
    @abstractmethod
    def add(self, rule: AssignmentRule) -> None:
        ...

    @abstractmethod
    def get_all(self) -> list[AssignmentRule]:
        """Rules ordered by priority, highest first."""
        ...
