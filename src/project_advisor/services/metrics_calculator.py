"""
Metrics calculator: ProjectMetrics snapshot from a project and its tasks.

Pure function of its inputs and the evaluation instant. Every division has an explicit
default so degenerate input (no tasks, no budget, no completed work) never raises.
"""

import math
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from project_advisor.config import get_settings
from project_advisor.models import Project, ProjectMetrics, Task
from project_advisor.models.project import PRIORITIES, TASK_STATUSES, to_utc, utc_now
from project_advisor.services.task_suggestions import completion_rate, determine_phase

HOURS_PER_DAY = 8.0  # capacity and default throughput assumption
EFFICIENCY_RATIO_CAP = 1.5
EFFICIENCY_PRIOR = 0.7
HIGH_SAMPLE_COMPLETED = 5


def average_completion_time(tasks: Sequence[Task]) -> float:
    logged = [t.actual_hours for t in tasks if t.is_completed and t.actual_hours > 0]
    return sum(logged) / len(logged) if logged else 0.0


def budget_utilization(project: Project, hourly_rate: float) -> float:
    if not project.budget:
        return 0.0
    return (project.actual_hours * hourly_rate) / project.budget


def team_efficiency(tasks: Sequence[Task]) -> tuple[float, int]:
    """
    Mean estimated/actual ratio over completed tasks with both hours logged.
    Each ratio is capped at 1.5 and the mean is divided by 1.5, so the result is in [0, 1].
    Returns (efficiency, sample_size); sample_size 0 means the neutral prior was used.
    """
    ratios = [
        min(t.estimated_hours / t.actual_hours, EFFICIENCY_RATIO_CAP)
        for t in tasks
        if t.is_completed and t.estimated_hours > 0 and t.actual_hours > 0
    ]
    if not ratios:
        return EFFICIENCY_PRIOR, 0
    return (sum(ratios) / len(ratios)) / EFFICIENCY_RATIO_CAP, len(ratios)


def remaining_hours(tasks: Sequence[Task]) -> float:
    return sum(t.estimated_hours for t in tasks if not t.is_completed)


def compute_risk_score(project: Project, tasks: Sequence[Task], now: datetime) -> float:
    """
    Weighted sum of time pressure, overdue ratio and capacity pressure, clamped to [0, 1].
    """
    risk = 0.0
    days_left = (project.end_date - now).total_seconds() / 86400

    # Time pressure
    if days_left < 7:
        risk += 0.4
    elif days_left < 14:
        risk += 0.2

    # Overdue ratio
    if tasks:
        overdue = sum(1 for t in tasks if t.is_overdue(now))
        risk += (overdue / len(tasks)) * 0.4

    # Capacity pressure
    if remaining_hours(tasks) > days_left * HOURS_PER_DAY:
        risk += 0.3

    return max(0.0, min(risk, 1.0))


def risk_level(score: float) -> str:
    if score >= 0.7:
        return "high"
    if score >= 0.4:
        return "medium"
    return "low"


def predict_completion(tasks: Sequence[Task], now: datetime) -> tuple[datetime, float]:
    """
    Remaining estimated hours divided by observed throughput (actual hours per completed
    task spread over a week). Confidence is a sample-size heuristic, not an interval.
    """
    completed = [t for t in tasks if t.is_completed]
    avg_hours_per_day = HOURS_PER_DAY
    if completed:
        observed = sum(t.actual_hours for t in completed) / len(completed) / 7
        if observed > 0:
            avg_hours_per_day = observed
    raw_days = remaining_hours(tasks) / avg_hours_per_day
    # Estimates past the calendar are pinned to its last representable day.
    max_days = (date.max - now.date()).days - 1
    days_needed = max_days if raw_days >= max_days else math.ceil(raw_days)
    confidence = 0.8 if len(completed) > HIGH_SAMPLE_COMPLETED else 0.5
    return now + timedelta(days=days_needed), confidence


def compute_metrics(
    project: Project,
    tasks: Sequence[Task],
    now: Optional[datetime] = None,
    hourly_rate: Optional[float] = None,
) -> ProjectMetrics:
    """Compute the metrics snapshot for ``project`` at ``now`` (default: current UTC time)."""
    now = to_utc(now) if now is not None else utc_now()
    if hourly_rate is None:
        hourly_rate = get_settings().hourly_rate

    efficiency, sample_size = team_efficiency(tasks)
    score = compute_risk_score(project, tasks, now)
    predicted, confidence = predict_completion(tasks, now)
    status_counts = Counter(t.status for t in tasks)
    priority_counts = Counter(t.priority for t in tasks)

    return ProjectMetrics(
        project_id=project.id,
        total_tasks=len(tasks),
        completed_tasks=status_counts["completed"],
        overdue_tasks=sum(1 for t in tasks if t.is_overdue(now)),
        average_completion_time=average_completion_time(tasks),
        budget_utilization=budget_utilization(project, hourly_rate),
        team_efficiency=efficiency,
        efficiency_sample_size=sample_size,
        risk_score=score,
        risk_level=risk_level(score),
        predicted_completion_date=predicted.date(),
        confidence=confidence,
        completion_rate=completion_rate(tasks),
        phase=determine_phase(tasks),
        status_breakdown={s: status_counts[s] for s in TASK_STATUSES},
        priority_breakdown={p: priority_counts[p] for p in PRIORITIES},
    )
