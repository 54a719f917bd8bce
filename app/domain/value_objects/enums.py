"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class MemberRole(str, Enum):
    AGENT = "agent"
    SENIOR_AGENT = "senior_agent"
    SUPERVISOR = "supervisor"
    MANAGER = "manager"


class Availability(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    AWAY = "away"
    OFFLINE = "offline"


class AssignmentStrategy(str, Enum):
    ROUND_ROBIN = "round_robin"
    LEAST_LOADED = "least_loaded"
    MOST_SKILLED = "most_skilled"
    SPECIFIC_USER = "specific_user"


class AssignmentPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class AssignmentStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ESCALATED = "escalated"


class DiffType(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class MissingFieldPolicy(str, Enum):
    """What a rule condition does when the case lacks that field."""

    IGNORE = "ignore"  # condition is vacuously satisfied
    REJECT = "reject"  # condition fails the match
