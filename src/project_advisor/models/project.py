"""
Domain records supplied by the caller: Project, Task, TeamMember.

Frozen pydantic models; the engine reads them and never mutates them.
Naive datetimes are treated as UTC.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ProjectStatus = Literal["planning", "active", "completed", "paused"]
TaskStatus = Literal["todo", "in_progress", "review", "completed"]
Priority = Literal["low", "medium", "high", "critical"]

TASK_STATUSES: tuple[str, ...] = ("todo", "in_progress", "review", "completed")
PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "critical")
AT_RISK_PRIORITIES = frozenset({"high", "critical"})


def to_utc(dt: datetime | None) -> datetime | None:
    """Normalize datetime to UTC for comparison. Naive datetimes are assumed UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Return current time in UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Project(_Record):
    id: str
    name: str
    description: str = ""
    start_date: datetime
    end_date: datetime
    status: ProjectStatus = "active"
    priority: Priority = "medium"
    progress: float = Field(default=0, ge=0, le=100)
    estimated_hours: float = Field(default=0, ge=0)
    actual_hours: float = Field(default=0, ge=0)
    budget: Optional[float] = Field(default=None, ge=0)
    team_size: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_date", "end_date", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)


class Task(_Record):
    id: str
    project_id: str
    title: str
    description: str = ""
    status: TaskStatus = "todo"
    priority: Priority = "medium"
    assignee_id: Optional[str] = None
    estimated_hours: float = Field(default=0, ge=0)
    actual_hours: float = Field(default=0, ge=0)
    start_date: Optional[datetime] = None
    due_date: datetime
    # Weak references to other task ids; cycles are possible and not checked here.
    dependencies: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    progress: float = Field(default=0, ge=0, le=100)
    risk_score: Optional[float] = Field(default=None, ge=0, le=1)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_date", "due_date", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    def is_overdue(self, now: datetime) -> bool:
        """Due strictly before ``now`` and not completed."""
        return self.due_date < to_utc(now) and not self.is_completed

    def is_at_risk(self) -> bool:
        """High/critical priority, under half done, not completed."""
        return self.priority in AT_RISK_PRIORITIES and self.progress < 50 and not self.is_completed


class TeamMember(_Record):
    id: str
    name: str
    email: str = ""
    role: str = ""
    skills: list[str] = Field(default_factory=list)
    current_workload: float = Field(default=0, ge=0, description="hours per week")
    max_workload: float = Field(default=40, ge=0, description="hours per week")
    efficiency: float = Field(default=1.0, ge=0, le=1)
