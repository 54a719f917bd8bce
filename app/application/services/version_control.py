"""VersionControlService — append-only case history with diff and rollback."""

from __future__ import annotations

import copy
import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.application.ports.version_repo import VersionRepository
from app.domain.entities.case_version import CaseVersion
from app.domain.policies.snapshot_diff import calculate_diff, to_json_native
from app.domain.value_objects.timestamps import new_id, utc_now
from app.domain.value_objects.version_diff import VersionDiff

logger = logging.getLogger(__name__)


@dataclass
class RollbackResult:
    """Outcome of a rollback; ``error`` is set only when ``success`` is False."""

    success: bool
    snapshot: dict[str, Any] | None = None
    error: str | None = None


@dataclass
class VersionStats:
    total_versions: int
    current_version: int
    unique_users: int
    unique_tags: int
    total_changes: int
    first_version: datetime | None
    last_version: datetime | None


class VersionControlService:
    """Tracks every change to a case as a numbered snapshot.

    Versions are never deleted or rewritten: updates and rollbacks both append.
    History grows without bound for the life of the process.
    """

    def __init__(self, repository: VersionRepository):
        self._repo = repository
        self._lock = threading.RLock()

    # ─── Writes ──────────────────────────────────────────────────────

    def create_initial_version(
        self,
        case_id: int,
        snapshot: dict[str, Any],
        user_id: int,
        user_name: str,
    ) -> CaseVersion:
        """Record version 1 of a case. The caller ensures no history exists yet.

        Raises:
            ValueError: if the snapshot cannot be represented as JSON.
        """
        stored = to_json_native(snapshot)
        version = CaseVersion(
            id=new_id("v"),
            case_id=case_id,
            version=1,
            snapshot=stored,
            changes=[],
            user_id=user_id,
            user_name=user_name,
            timestamp=utc_now(),
            comment="Initial version",
            tags=["created"],
        )
        with self._lock:
            self._repo.append(version)
        logger.info("Case %d: initial version created by %s", case_id, user_name)
        return copy.deepcopy(version)

    def create_version(
        self,
        case_id: int,
        snapshot: dict[str, Any],
        previous_snapshot: dict[str, Any],
        user_id: int,
        user_name: str,
        comment: str | None = None,
        tags: list[str] | None = None,
    ) -> CaseVersion:
        """Append ``current + 1`` with the diff from ``previous_snapshot``.

        Raises:
            ValueError: if either snapshot cannot be represented as JSON.
        """
        stored = to_json_native(snapshot)
        changes = [d.to_change() for d in calculate_diff(to_json_native(previous_snapshot), stored)]

        with self._lock:
            number = self._repo.get_current_version(case_id) + 1
            version = CaseVersion(
                id=new_id("v"),
                case_id=case_id,
                version=number,
                snapshot=stored,
                changes=changes,
                user_id=user_id,
                user_name=user_name,
                timestamp=utc_now(),
                comment=comment,
                tags=list(tags or []),
            )
            self._repo.append(version)

        logger.info(
            "Case %d: version %d created by %s (%d changes)",
            case_id, number, user_name, len(changes),
        )
        return copy.deepcopy(version)

    def rollback_to_version(
        self,
        case_id: int,
        target_version: int,
        user_id: int,
        user_name: str,
        comment: str | None = None,
    ) -> RollbackResult:
        """Append a new version equal to ``target_version``'s snapshot.

        History before the rollback stays intact; the new version's changes are
        the diff from the pre-rollback snapshot to the target snapshot.
        """
        with self._lock:
            target = self._find(case_id, target_version)
            if target is None:
                logger.warning("Case %d: rollback target v%d not found", case_id, target_version)
                return RollbackResult(success=False, error=f"Version {target_version} not found")

            current_number = self._repo.get_current_version(case_id)
            current = self._find(case_id, current_number)
            changes = (
                [d.to_change() for d in calculate_diff(current.snapshot, target.snapshot)]
                if current is not None
                else []
            )

            version = CaseVersion(
                id=new_id("v"),
                case_id=case_id,
                version=current_number + 1,
                snapshot=copy.deepcopy(target.snapshot),
                changes=changes,
                user_id=user_id,
                user_name=user_name,
                timestamp=utc_now(),
                comment=comment or f"Rolled back to version {target_version}",
                tags=["rollback", f"from-v{current_number}", f"to-v{target_version}"],
            )
            self._repo.append(version)

        logger.info(
            "Case %d: rolled back v%d → v%d as version %d",
            case_id, current_number, target_version, version.version,
        )
        return RollbackResult(success=True, snapshot=copy.deepcopy(target.snapshot))

    # ─── Reads ───────────────────────────────────────────────────────
    # Versions handed to callers are copies; mutating them never touches history.

    def get_version_history(self, case_id: int) -> list[CaseVersion]:
        return copy.deepcopy(self._repo.get_history(case_id))

    def get_version(self, case_id: int, version: int) -> CaseVersion | None:
        return copy.deepcopy(self._find(case_id, version))

    def _find(self, case_id: int, version: int) -> CaseVersion | None:
        return next((v for v in self._repo.get_history(case_id) if v.version == version), None)

    def get_current_version(self, case_id: int) -> int:
        return self._repo.get_current_version(case_id)

    def compare_versions(self, case_id: int, version_a: int, version_b: int) -> list[VersionDiff]:
        """Diff from ``version_a`` to ``version_b``; empty if either is missing."""
        ver_a = self._find(case_id, version_a)
        ver_b = self._find(case_id, version_b)
        if ver_a is None or ver_b is None:
            return []
        return copy.deepcopy(calculate_diff(ver_a.snapshot, ver_b.snapshot))

    def get_changes_since(self, case_id: int, since_version: int) -> list[VersionDiff]:
        with self._lock:
            current_number = self._repo.get_current_version(case_id)
            if since_version >= current_number:
                return []
            start = self._find(case_id, since_version)
            end = self._find(case_id, current_number)
        if start is None or end is None:
            return []
        return copy.deepcopy(calculate_diff(start.snapshot, end.snapshot))

    def search_by_tag(self, case_id: int, tag: str) -> list[CaseVersion]:
        return copy.deepcopy([v for v in self._repo.get_history(case_id) if v.has_tag(tag)])

    def get_stats(self, case_id: int) -> VersionStats:
        with self._lock:
            versions = self._repo.get_history(case_id)
            current_number = self._repo.get_current_version(case_id)

        return VersionStats(
            total_versions=len(versions),
            current_version=current_number,
            unique_users=len({v.user_name for v in versions}),
            unique_tags=len({t for v in versions for t in v.tags}),
            total_changes=sum(len(v.changes) for v in versions),
            first_version=versions[0].timestamp if versions else None,
            last_version=versions[-1].timestamp if versions else None,
        )

    # ─── Export / import ─────────────────────────────────────────────

    def export_history(self, case_id: int) -> str:
        """Serialize the case's history as a JSON array of version records."""
        versions = self._repo.get_history(case_id)
        return json.dumps([v.to_dict() for v in versions], indent=2, ensure_ascii=False)

    def import_history(self, case_id: int, history_json: str) -> bool:
        """Replace the case's history with an exported JSON array.

        The whole payload is parsed before anything is replaced. On any parse
        or validation error nothing changes and False is returned.
        """
        try:
            raw = json.loads(history_json)
            if not isinstance(raw, list):
                raise ValueError("History must be a JSON array")
            versions = [CaseVersion.from_dict(item) for item in raw]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Case %d: version history import failed: %s", case_id, e)
            return False

        current_number = max((v.version for v in versions), default=0)
        with self._lock:
            self._repo.replace_history(case_id, versions, current_number)

        logger.info(
            "Case %d: imported %d versions (current v%d)", case_id, len(versions), current_number
        )
        return True
