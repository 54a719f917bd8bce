"""Port interface for case version history."""

from abc import ABC, abstractmethod

from app.domain.entities.case_version import CaseVersion


class VersionRepository(ABC):
    @abstractmethod
    def append(self, version: CaseVersion) -> CaseVersion:
        """Append a version to its case's history and make it current."""
        ...

    @abstractmethod
    def get_history(self, case_id: int) -> list[CaseVersion]:
        """Return the case's versions in append order (empty if unknown)."""
        ...

    @abstractmethod
    def get_current_version(self, case_id: int) -> int:
        """Return the current version pointer (0 if unknown)."""
        ...

    @abstractmethod
    def replace_history(self, case_id: int, versions: list[CaseVersion], current_version: int) -> None:
        """Swap the whole history of a case in one step."""
        ...
