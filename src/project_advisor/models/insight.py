"""
Value objects produced by the engine: Insight, ProjectMetrics, MemberWorkload,
ScheduleOptimization. Created fresh on each call.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from project_advisor.models.project import Task

InsightType = Literal["schedule_optimization", "risk_alert", "task_suggestion", "kpi_insight"]
InsightPriority = Literal["low", "medium", "high"]
RiskLevel = Literal["low", "medium", "high"]
Phase = Literal["initialization", "development", "finalization", "delivery"]


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)


class Insight(_Value):
    id: str
    type: InsightType
    project_id: str
    title: str
    description: str = ""
    confidence: float = Field(ge=0, le=1)
    priority: InsightPriority
    action_required: bool = False
    suggestions: list[str] = Field(default_factory=list)
    created_at: datetime


class ProjectMetrics(_Value):
    project_id: str
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    average_completion_time: float = Field(description="hours; 0 without completed tasks that logged time")
    budget_utilization: float = Field(description="0 when the project has no budget")
    team_efficiency: float = Field(ge=0, le=1)
    efficiency_sample_size: int = Field(description="tasks behind team_efficiency; 0 means the neutral prior")
    risk_score: float = Field(ge=0, le=1)
    risk_level: RiskLevel
    predicted_completion_date: date
    confidence: float = Field(ge=0, le=1)
    completion_rate: float = Field(ge=0, le=1)
    phase: Phase
    status_breakdown: dict[str, int]
    priority_breakdown: dict[str, int]


class MemberWorkload(_Value):
    member_id: str
    name: str
    role: str = ""
    task_count: int
    assigned_hours: float
    max_workload: float
    utilization: float = Field(ge=0, le=100, description="percent of weekly capacity")


class ScheduleOptimization(_Value):
    recommendations: list[str]
    confidence: float = Field(ge=0, le=1)
    optimized_tasks: list[Task]
    workload: list[MemberWorkload]
    source: Literal["advisory", "fallback"]
