"""Port interface for assignment persistence."""

from abc import ABC, abstractmethod

from app.domain.entities.assignment import Assignment


class AssignmentRepository(ABC):
    @abstractmethod
    def save(self, assignment: Assignment) -> Assignment:
        """Record as the case's current assignment and append to history."""
        ...

    @abstractmethod
    def get_current(self, case_id: int) -> Assignment | None:
        ...

    @abstractmethod
    def get_all_current(self) -> list[Assignment]:
        ...

    @abstractmethod
    def get_history(self, case_id: int | None = None) -> list[Assignment]:
        """Every record ever saved (optionally for one case), oldest first."""
        ...
