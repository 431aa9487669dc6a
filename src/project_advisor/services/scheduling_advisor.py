"""
Scheduling advisor: per-member workload and schedule optimization recommendations.

The workload view is always computed locally. Recommendations come from the advisory
service when it answers with a usable JSON object, else from a fixed generic set.
optimized_tasks is the input task list unchanged; applying a reordering is not supported.
"""

import logging
from collections import defaultdict
from typing import Optional, Sequence

from project_advisor.models import MemberWorkload, Project, ScheduleOptimization, Task, TeamMember
from project_advisor.services.advisory_client import (
    AdvisoryService,
    AdvisoryUnavailable,
    parse_confidence,
    parse_json_reply,
)

logger = logging.getLogger(__name__)

FALLBACK_RECOMMENDATIONS = [
    "Rearrange critical tasks to run in parallel",
    "Balance the workload across team members",
    "Prioritize tasks that other tasks depend on",
    "Adjust deadlines to the team's measured velocity",
]
FALLBACK_CONFIDENCE = 0.85
DEFAULT_ADVISORY_CONFIDENCE = 0.7


def compute_workload(tasks: Sequence[Task], team: Sequence[TeamMember]) -> list[MemberWorkload]:
    """Assigned estimated hours per member and utilization of weekly capacity, capped at 100%."""
    hours: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    for t in tasks:
        if t.assignee_id:
            hours[t.assignee_id] += t.estimated_hours
            counts[t.assignee_id] += 1

    out: list[MemberWorkload] = []
    for m in team:
        assigned = hours.get(m.id, 0.0)
        if m.max_workload > 0:
            utilization = min(assigned / m.max_workload * 100, 100.0)
        else:
            utilization = 100.0 if assigned > 0 else 0.0
        out.append(MemberWorkload(
            member_id=m.id,
            name=m.name,
            role=m.role,
            task_count=counts.get(m.id, 0),
            assigned_hours=assigned,
            max_workload=m.max_workload,
            utilization=utilization,
        ))
    return out


def build_schedule_prompt(project: Project, tasks: Sequence[Task], team: Sequence[TeamMember]) -> str:
    task_lines = "\n".join(
        f"- {t.title} ({t.estimated_hours}h, priority: {t.priority}, "
        f"dependencies: {', '.join(t.dependencies) or 'none'})"
        for t in tasks
    )
    team_lines = "\n".join(
        f"- {m.name}: {m.role}, workload: {m.current_workload}/{m.max_workload}h, "
        f"efficiency: {round(m.efficiency * 100)}%"
        for m in team
    )
    return f"""Analyze this project and optimize its schedule.

Project: {project.name}
Period: {project.start_date.date().isoformat()} to {project.end_date.date().isoformat()}
Team: {len(team)} members
Tasks: {len(tasks)}

Current tasks:
{task_lines or "- none"}

Team:
{team_lines or "- none"}

Take dependencies, workload and skills into account.
Return a single JSON object: {{"recommendations": [str], "confidence": number 0-1}}.
Reply with only the JSON object, no markdown or explanation."""


def parse_schedule_reply(text: str) -> tuple[list[str], float]:
    data = parse_json_reply(text)
    if not isinstance(data, dict):
        raise AdvisoryUnavailable("reply is not a JSON object")
    recs = data.get("recommendations")
    if not isinstance(recs, list):
        raise AdvisoryUnavailable("reply has no recommendations list")
    recommendations = [str(r).strip() for r in recs if str(r).strip()]
    if not recommendations:
        raise AdvisoryUnavailable("reply has no recommendations")
    return recommendations, parse_confidence(data.get("confidence"), DEFAULT_ADVISORY_CONFIDENCE)


async def optimize_schedule(
    project: Project,
    tasks: Sequence[Task],
    team: Sequence[TeamMember],
    advisory: Optional[AdvisoryService] = None,
) -> ScheduleOptimization:
    workload = compute_workload(tasks, team)
    if advisory is not None:
        try:
            reply = await advisory.generate(build_schedule_prompt(project, tasks, team))
            recommendations, confidence = parse_schedule_reply(reply)
            logger.info("scheduling_advisor: advisory returned %d recommendations", len(recommendations))
            return ScheduleOptimization(
                recommendations=recommendations,
                confidence=confidence,
                optimized_tasks=list(tasks),
                workload=workload,
                source="advisory",
            )
        except AdvisoryUnavailable as e:
            logger.warning("scheduling_advisor: advisory unavailable, using fixed recommendations (%s)", e)
    return ScheduleOptimization(
        recommendations=list(FALLBACK_RECOMMENDATIONS),
        confidence=FALLBACK_CONFIDENCE,
        optimized_tasks=list(tasks),
        workload=workload,
        source="fallback",
    )
