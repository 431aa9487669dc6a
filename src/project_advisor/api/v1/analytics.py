"""
Analytics API v1: metrics, risk insights, schedule optimization, workload, task suggestions.

Stateless: every request carries the project, tasks and team it is about.
"""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from project_advisor.models import Project, ProjectMetrics, ScheduleOptimization, Task, TeamMember
from project_advisor.services.advisory_client import AdvisoryService, get_advisory_client
from project_advisor.services.metrics_calculator import compute_metrics
from project_advisor.services.risk_analyzer import analyze_risks
from project_advisor.services.sample_data import get_sample_project, get_sample_tasks, get_sample_team
from project_advisor.services.scheduling_advisor import compute_workload, optimize_schedule
from project_advisor.services.task_suggestions import determine_phase, suggest_tasks

router = APIRouter()


class ProjectTasksBody(BaseModel):
    project: Project
    tasks: list[Task] = Field(default_factory=list)
    now: Optional[datetime] = Field(default=None, description="Evaluation instant; defaults to server time")


class ScheduleBody(BaseModel):
    project: Project
    tasks: list[Task] = Field(default_factory=list)
    team: list[TeamMember] = Field(default_factory=list)


class WorkloadBody(BaseModel):
    tasks: list[Task] = Field(default_factory=list)
    team: list[TeamMember] = Field(default_factory=list)


class SuggestionsBody(BaseModel):
    project: Project
    tasks: list[Task] = Field(default_factory=list)
    prompt: Optional[str] = Field(default=None, description="Free-text context for the advisory service")


def get_advisory() -> Optional[AdvisoryService]:
    return get_advisory_client()


@router.post("/metrics")
async def post_metrics(body: ProjectTasksBody) -> ProjectMetrics:
    """Counts, risk score, team efficiency, budget utilization and predicted completion."""
    return compute_metrics(body.project, body.tasks, now=body.now)


@router.post("/risks")
async def post_risks(
    body: ProjectTasksBody,
    advisory: Optional[AdvisoryService] = Depends(get_advisory),
) -> dict[str, Any]:
    """Ranked risk insights (advisory analysis, or local rules when unavailable)."""
    insights = await analyze_risks(body.project, body.tasks, now=body.now, advisory=advisory)
    return {"project_id": body.project.id, "insights": insights, "count": len(insights)}


@router.post("/schedule")
async def post_schedule(
    body: ScheduleBody,
    advisory: Optional[AdvisoryService] = Depends(get_advisory),
) -> ScheduleOptimization:
    """Workload per member plus schedule optimization recommendations."""
    return await optimize_schedule(body.project, body.tasks, body.team, advisory=advisory)


@router.post("/workload")
async def post_workload(body: WorkloadBody) -> dict[str, Any]:
    return {"workload": compute_workload(body.tasks, body.team)}


@router.post("/suggestions")
async def post_suggestions(
    body: SuggestionsBody,
    advisory: Optional[AdvisoryService] = Depends(get_advisory),
) -> dict[str, Any]:
    """Up to five task titles not already covered by the existing tasks."""
    suggestions = await suggest_tasks(body.project, body.tasks, prompt=body.prompt, advisory=advisory)
    return {"project_id": body.project.id, "phase": determine_phase(body.tasks), "suggestions": suggestions}


@router.get("/sample")
async def get_sample() -> dict[str, Any]:
    """Demo project, tasks and team, shaped as request bodies for the other endpoints."""
    return {"project": get_sample_project(), "tasks": get_sample_tasks(), "team": get_sample_team()}
