"""
Task suggestion engine: candidate task titles not already represented among existing tasks.

Uses the advisory service when configured (optionally steered by a free-text prompt);
otherwise, or on any failure, draws from a curated catalog filtered by lexical overlap.
The catalog draw is shuffled on purpose, so pass a seeded random.Random for a fixed order.
"""

import logging
import random
import re
from typing import Optional, Sequence

from project_advisor.models import Project, Task
from project_advisor.services.advisory_client import AdvisoryService, AdvisoryUnavailable

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5
SIGNIFICANT_WORD_MIN_LEN = 4

SUGGESTION_CATALOG: dict[str, list[str]] = {
    "planning": [
        "Define detailed acceptance criteria",
        "Create an integration test plan",
        "Establish a code review process",
        "Configure the staging environment",
        "Schedule end-user training",
    ],
    "technical": [
        "Implement performance monitoring",
        "Configure automated backups",
        "Set up error logging",
        "Optimize database queries",
        "Write technical documentation",
    ],
    "quality": [
        "Run load tests",
        "Validate interface accessibility",
        "Verify GDPR compliance",
        "Test cross-browser compatibility",
        "Conduct a security audit",
    ],
    "management": [
        "Hold a team retrospective",
        "Update the project dashboard",
        "Prepare the stakeholder presentation",
        "Document lessons learned",
        "Plan the handover to maintenance",
    ],
}

PHASE_SUGGESTIONS: dict[str, list[str]] = {
    "initialization": [
        "Define functional requirements",
        "Design the technical architecture",
        "Set up the development environment",
        "Plan the sprints",
        "Assemble the project team",
    ],
    "development": [
        "Implement core features",
        "Write unit tests",
        "Configure continuous integration",
        "Review the code",
        "Document the API",
    ],
    "finalization": [
        "Run full integration tests",
        "Tune performance",
        "Run user acceptance tests",
        "Fix critical bugs",
        "Prepare the deployment",
    ],
    "delivery": [
        "Deploy to production",
        "Train the users",
        "Write user documentation",
        "Draw up a maintenance plan",
        "Hold a project post-mortem",
    ],
}

_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


def completion_rate(tasks: Sequence[Task]) -> float:
    if not tasks:
        return 0.0
    return sum(1 for t in tasks if t.is_completed) / len(tasks)


def determine_phase(tasks: Sequence[Task]) -> str:
    """Lifecycle bucket from the share of completed tasks."""
    rate = completion_rate(tasks)
    if rate < 0.2:
        return "initialization"
    if rate < 0.5:
        return "development"
    if rate < 0.8:
        return "finalization"
    return "delivery"


def _significant_words(title: str) -> list[str]:
    return [w for w in title.lower().split() if len(w) >= SIGNIFICANT_WORD_MIN_LEN]


def filter_catalog(existing_tasks: Sequence[Task], candidates: Optional[Sequence[str]] = None) -> list[str]:
    """
    Drop candidates whose significant words (longer than 3 chars) appear in any existing
    task title, case-insensitively. Defaults to the whole catalog.
    """
    if candidates is None:
        candidates = [c for group in SUGGESTION_CATALOG.values() for c in group]
    existing_titles = [t.title.lower() for t in existing_tasks]
    return [
        c for c in candidates
        if not any(word in title for title in existing_titles for word in _significant_words(c))
    ]


def fallback_suggestions(
    existing_tasks: Sequence[Task],
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Catalog draw; the phase's fixed set when the catalog is exhausted."""
    rng = rng or random.Random()
    candidates = filter_catalog(existing_tasks)
    if not candidates:
        phase = determine_phase(existing_tasks)
        logger.info("task_suggestions: catalog exhausted, using %s phase set", phase)
        return filter_catalog(existing_tasks, PHASE_SUGGESTIONS[phase])[:MAX_SUGGESTIONS]
    rng.shuffle(candidates)
    return candidates[:MAX_SUGGESTIONS]


def build_suggestion_prompt(project: Project, existing_tasks: Sequence[Task], prompt: Optional[str] = None) -> str:
    titles = ", ".join(t.title.lower() for t in existing_tasks) or "none"
    lines = [
        f'Project in phase "{determine_phase(existing_tasks)}":',
        f"Name: {project.name}",
        f"Description: {project.description}",
        f"Existing tasks: {titles}",
    ]
    if prompt:
        lines.append(f"Additional context from the user: {prompt.strip()}")
    lines.append(
        f"Suggest {MAX_SUGGESTIONS} relevant tasks that may be missing for this kind of project. "
        "Reply only with the list of tasks, one per line."
    )
    return "\n".join(lines)


def parse_suggestion_lines(text: str, existing_tasks: Sequence[Task]) -> list[str]:
    existing = {t.title.strip().lower() for t in existing_tasks}
    out: list[str] = []
    for line in text.splitlines():
        item = _BULLET_RE.sub("", line).strip()
        if not item or item.lower() in existing or item in out:
            continue
        out.append(item)
    return out[:MAX_SUGGESTIONS]


async def suggest_tasks(
    project: Project,
    existing_tasks: Sequence[Task],
    prompt: Optional[str] = None,
    advisory: Optional[AdvisoryService] = None,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Up to five task titles to add to ``project``."""
    if advisory is not None:
        try:
            reply = await advisory.generate(build_suggestion_prompt(project, existing_tasks, prompt))
            suggestions = parse_suggestion_lines(reply, existing_tasks)
            if not suggestions:
                raise AdvisoryUnavailable("no suggestions in reply")
            logger.info("task_suggestions: advisory returned %d suggestions", len(suggestions))
            return suggestions
        except AdvisoryUnavailable as e:
            logger.warning("task_suggestions: advisory unavailable, using catalog fallback (%s)", e)
    return fallback_suggestions(existing_tasks, rng)
