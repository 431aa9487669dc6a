"""
Risk analyzer: ranked risk insights for a project.

Asks the advisory service first; on any failure falls back to three local rules:
overdue tasks, at-risk tasks due within the next week, and estimation drift.
The two paths are exclusive per call, never merged.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from project_advisor.models import Insight, Project, Task
from project_advisor.models.project import to_utc, utc_now
from project_advisor.services.advisory_client import (
    AdvisoryService,
    AdvisoryUnavailable,
    parse_confidence,
    parse_json_reply,
)

logger = logging.getLogger(__name__)

UPCOMING_WINDOW = timedelta(days=7)
DRIFT_TOLERANCE = 1.2
DEFAULT_ADVISORY_CONFIDENCE = 0.7
_PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}


def _insight_id(kind: str, now: datetime, rule: str) -> str:
    return f"{kind}_{int(now.timestamp() * 1000)}_{rule}"


def overdue_tasks(tasks: Sequence[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if t.is_overdue(now)]


def upcoming_at_risk_tasks(tasks: Sequence[Task], now: datetime) -> list[Task]:
    """At-risk tasks due in [now, now + 7 days]; already-overdue tasks are left to the overdue rule."""
    horizon = now + UPCOMING_WINDOW
    return [t for t in tasks if now <= t.due_date <= horizon and t.is_at_risk()]


def estimation_drift(tasks: Sequence[Task]) -> Optional[float]:
    """
    Ratio of mean actual hours per completed task to mean estimated hours per task.
    None when no completed task has logged hours, or nothing was estimated.
    """
    completed = [t for t in tasks if t.is_completed]
    if not any(t.actual_hours > 0 for t in completed):
        return None
    mean_estimated = sum(t.estimated_hours for t in tasks) / len(tasks)
    if mean_estimated <= 0:
        return None
    mean_actual = sum(t.actual_hours for t in completed) / len(completed)
    return mean_actual / mean_estimated


def fallback_insights(project: Project, tasks: Sequence[Task], now: datetime) -> list[Insight]:
    insights: list[Insight] = []

    overdue = overdue_tasks(tasks, now)
    if overdue:
        insights.append(Insight(
            id=_insight_id("risk_alert", now, "overdue"),
            type="risk_alert",
            project_id=project.id,
            title=f"{len(overdue)} overdue task(s) detected",
            description="Tasks are past their due date, which may delay final delivery.",
            confidence=0.9,
            priority="high",
            action_required=True,
            suggestions=[
                "Reassign overdue tasks to available team members",
                "Prioritize blocking tasks",
                "Consider extending the deadlines",
            ],
            created_at=now,
        ))

    at_risk = upcoming_at_risk_tasks(tasks, now)
    if at_risk:
        insights.append(Insight(
            id=_insight_id("risk_alert", now, "upcoming"),
            type="risk_alert",
            project_id=project.id,
            title=f"{len(at_risk)} at-risk task(s) due this week",
            description="High-priority tasks due within 7 days are less than half done.",
            confidence=0.75,
            priority="medium",
            action_required=True,
            suggestions=[
                "Add resources to these tasks",
                "Split complex tasks",
                "Hold daily check-ins",
            ],
            created_at=now,
        ))

    drift = estimation_drift(tasks)
    if drift is not None and drift > DRIFT_TOLERANCE:
        insights.append(Insight(
            id=_insight_id("risk_alert", now, "estimation"),
            type="risk_alert",
            project_id=project.id,
            title="Estimation overrun detected",
            description=f"Completed tasks take on average {drift - 1:.0%} longer than estimated.",
            confidence=0.8,
            priority="medium",
            action_required=False,
            suggestions=[
                "Re-estimate the remaining tasks",
                "Investigate the causes of the overruns",
                "Improve the estimation process",
            ],
            created_at=now,
        ))

    return insights


def build_risk_prompt(project: Project, tasks: Sequence[Task], now: datetime) -> str:
    task_lines = "\n".join(
        f"- {t.title} (status: {t.status}, priority: {t.priority}, progress: {t.progress:.0f}%, "
        f"due: {t.due_date.date().isoformat()}, estimated: {t.estimated_hours}h, actual: {t.actual_hours}h)"
        for t in tasks
    )
    return f"""Analyze delivery risks for this project as of {now.date().isoformat()}.

Project: {project.name}
Period: {project.start_date.date().isoformat()} to {project.end_date.date().isoformat()}
Tasks:
{task_lines or "- none"}

Return a single JSON object: {{"insights": [{{"title": str, "description": str, "priority": "low"|"medium"|"high", "confidence": number 0-1, "action_required": bool, "suggestions": [str]}}]}}.
Reply with only the JSON object, no markdown or explanation."""


def parse_risk_reply(text: str, project: Project, now: datetime) -> list[Insight]:
    data = parse_json_reply(text)
    items: Any = data.get("insights") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise AdvisoryUnavailable("reply has no insights list")
    insights: list[Insight] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or not item.get("title"):
            raise AdvisoryUnavailable(f"malformed insight at index {i}")
        priority = str(item.get("priority", "medium")).lower()
        if priority not in _PRIORITY_RANK:
            priority = "high" if priority == "critical" else "medium"
        confidence = parse_confidence(item.get("confidence"), DEFAULT_ADVISORY_CONFIDENCE)
        suggestions = item.get("suggestions") or []
        try:
            insights.append(Insight(
                id=_insight_id("risk_alert", now, f"advisory{i}"),
                type="risk_alert",
                project_id=project.id,
                title=str(item["title"]),
                description=str(item.get("description", "")),
                confidence=confidence,
                priority=priority,
                action_required=bool(item.get("action_required", False)),
                suggestions=[str(s) for s in suggestions if s] if isinstance(suggestions, list) else [],
                created_at=now,
            ))
        except ValidationError as e:
            raise AdvisoryUnavailable(f"invalid insight at index {i}") from e
    return insights


def rank_insights(insights: list[Insight]) -> list[Insight]:
    return sorted(insights, key=lambda i: _PRIORITY_RANK[i.priority])


async def analyze_risks(
    project: Project,
    tasks: Sequence[Task],
    now: Optional[datetime] = None,
    advisory: Optional[AdvisoryService] = None,
) -> list[Insight]:
    """Risk insights for ``project``, high priority first."""
    now = to_utc(now) if now is not None else utc_now()
    if advisory is not None:
        try:
            reply = await advisory.generate(build_risk_prompt(project, tasks, now))
            insights = parse_risk_reply(reply, project, now)
            logger.info("risk_analyzer: advisory returned %d insights", len(insights))
            return rank_insights(insights)
        except AdvisoryUnavailable as e:
            logger.warning("risk_analyzer: advisory unavailable, using rule fallback (%s)", e)
    return rank_insights(fallback_insights(project, tasks, now))
