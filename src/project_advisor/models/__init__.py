"""Domain model for Project Advisor."""

from project_advisor.models.insight import (
    Insight,
    MemberWorkload,
    ProjectMetrics,
    ScheduleOptimization,
)
from project_advisor.models.project import Project, Task, TeamMember

__all__ = [
    "Insight",
    "MemberWorkload",
    "Project",
    "ProjectMetrics",
    "ScheduleOptimization",
    "Task",
    "TeamMember",
]
