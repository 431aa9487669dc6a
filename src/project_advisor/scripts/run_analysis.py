"""
Run every analysis over the sample project and log the results.

Usage (from repo root):
  PYTHONPATH=src python -m project_advisor.scripts.run_analysis

Uses the advisory service when ADVISORY_API_KEY (or OPENAI_API_KEY) is set in .env / env,
otherwise the local fallback rules.
"""

import asyncio
import logging
import random
import sys

from project_advisor.services.advisory_client import get_advisory_client
from project_advisor.services.metrics_calculator import compute_metrics
from project_advisor.services.risk_analyzer import analyze_risks
from project_advisor.services.sample_data import get_sample_project, get_sample_tasks, get_sample_team
from project_advisor.services.scheduling_advisor import optimize_schedule
from project_advisor.services.task_suggestions import suggest_tasks

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def run() -> int:
    project = get_sample_project()
    tasks = get_sample_tasks()
    team = get_sample_team()
    advisory = get_advisory_client()
    logger.info("Analyzing project_id=%s (%d tasks, %d members)", project.id, len(tasks), len(team))

    metrics = compute_metrics(project, tasks)
    logger.info("Metrics: %s", metrics.model_dump_json(indent=2))

    for insight in await analyze_risks(project, tasks, advisory=advisory):
        logger.info("[%s] %s (confidence %.0f%%)", insight.priority, insight.title, insight.confidence * 100)

    schedule = await optimize_schedule(project, tasks, team, advisory=advisory)
    for w in schedule.workload:
        logger.info("Workload %s: %.0fh, %.0f%%", w.name, w.assigned_hours, w.utilization)
    for rec in schedule.recommendations:
        logger.info("Recommendation (%s): %s", schedule.source, rec)

    for title in await suggest_tasks(project, tasks, advisory=advisory, rng=random.Random()):
        logger.info("Suggested task: %s", title)
    return 0


def main() -> int:
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
