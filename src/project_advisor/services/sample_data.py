"""
Sample in-memory project for the demo script and the /sample endpoint.

Dates are relative to ``now`` so the analysis always shows overdue, due-this-week and
completed work.
"""

from datetime import datetime, timedelta
from typing import Optional

from project_advisor.models import Project, Task, TeamMember
from project_advisor.models.project import utc_now

SAMPLE_PROJECT_ID = "proj-web-portal"

MEMBER_NAMES: dict[str, str] = {
    "user-1": "Alex",
    "user-2": "Jordan",
    "user-3": "Sam",
    "user-4": "Casey",
}


def get_sample_project(now: Optional[datetime] = None) -> Project:
    now = now or utc_now()
    return Project(
        id=SAMPLE_PROJECT_ID,
        name="Customer web portal",
        description="Self-service portal for account management and support tickets",
        start_date=now - timedelta(days=30),
        end_date=now + timedelta(days=21),
        status="active",
        priority="high",
        progress=45,
        estimated_hours=320,
        actual_hours=150,
        budget=25000,
        team_size=len(MEMBER_NAMES),
        created_at=now - timedelta(days=35),
        updated_at=now,
    )


def get_sample_tasks(now: Optional[datetime] = None) -> list[Task]:
    """Seven tasks along one delivery chain: two done, one overdue, two due this week."""
    now = now or utc_now()

    def day(offset: int) -> datetime:
        return now + timedelta(days=offset)

    rows = [
        ("task-001", "Requirements document", "completed", "high", "user-1", 16, 20, -30, -24, [], 100),
        ("task-002", "API and data model design", "completed", "high", "user-2", 24, 30, -24, -16, ["task-001"], 100),
        ("task-003", "Backend account service", "in_progress", "critical", "user-3", 40, 28, -16, -2, ["task-002"], 60),
        ("task-004", "Frontend ticket views", "in_progress", "high", "user-4", 32, 10, -10, 4, ["task-002"], 30),
        ("task-005", "Integration and API wiring", "todo", "critical", "user-3", 24, 0, 0, 6, ["task-003", "task-004"], 0),
        ("task-006", "UAT and bug fixes", "todo", "medium", "user-4", 24, 0, 7, 14, ["task-005"], 0),
        ("task-007", "Go-live and handover", "todo", "high", "user-1", 8, 0, 15, 20, ["task-006"], 0),
    ]
    return [
        Task(
            id=task_id,
            project_id=SAMPLE_PROJECT_ID,
            title=title,
            status=status,
            priority=priority,
            assignee_id=assignee,
            estimated_hours=est,
            actual_hours=actual,
            start_date=day(start),
            due_date=day(due),
            dependencies=deps,
            progress=progress,
            created_at=day(-30),
            updated_at=now,
        )
        for task_id, title, status, priority, assignee, est, actual, start, due, deps, progress in rows
    ]


def get_sample_team() -> list[TeamMember]:
    roles = {"user-1": "Project lead", "user-2": "Architect", "user-3": "Backend developer", "user-4": "Frontend developer"}
    return [
        TeamMember(
            id=member_id,
            name=name,
            email=f"{name.lower()}@example.com",
            role=roles[member_id],
            current_workload=30,
            max_workload=40,
            efficiency=0.8,
        )
        for member_id, name in MEMBER_NAMES.items()
    ]
