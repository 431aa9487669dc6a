"""
Tests for the task suggestion engine.

The catalog fallback shuffles on purpose; order is only asserted with a seeded random.Random.
"""

import asyncio
import random

import pytest

from project_advisor.services.task_suggestions import (
    PHASE_SUGGESTIONS,
    SUGGESTION_CATALOG,
    determine_phase,
    fallback_suggestions,
    filter_catalog,
    parse_suggestion_lines,
    suggest_tasks,
)

ALL_CATALOG = [c for group in SUGGESTION_CATALOG.values() for c in group]


def _shares_significant_word(suggestion: str, titles: list[str]) -> bool:
    words = [w for w in suggestion.lower().split() if len(w) > 3]
    return any(w in t.lower() for t in titles for w in words)


class TestDeterminePhase:
    @pytest.mark.parametrize(
        "completed,total,phase",
        [(0, 0, "initialization"), (1, 10, "initialization"), (2, 10, "development"), (4, 10, "development"),
         (5, 10, "finalization"), (7, 10, "finalization"), (8, 10, "delivery"), (10, 10, "delivery")],
    )
    def test_thresholds(self, make_task, completed: int, total: int, phase: str) -> None:
        tasks = [make_task(status="completed") for _ in range(completed)]
        tasks += [make_task() for _ in range(total - completed)]
        assert determine_phase(tasks) == phase


class TestFilterCatalog:
    def test_no_existing_tasks_keeps_everything(self) -> None:
        assert filter_catalog([]) == ALL_CATALOG

    def test_drops_overlapping_candidates(self, make_task) -> None:
        kept = filter_catalog([make_task(title="Run LOAD tests on checkout")])
        assert "Run load tests" not in kept
        assert "Create an integration test plan" not in kept
        assert "Configure the staging environment" in kept
        assert not any(_shares_significant_word(c, ["Run LOAD tests on checkout"]) for c in kept)

    def test_short_words_do_not_count(self, make_task) -> None:
        assert filter_catalog([make_task(title="set up the")], ["Set up error logging"]) == ["Set up error logging"]


class TestFallbackSuggestions:
    def test_at_most_five_and_never_duplicates(self, make_task) -> None:
        titles = ["Security review", "Database tuning", "Project retrospective"]
        tasks = [make_task(title=t) for t in titles]
        out = fallback_suggestions(tasks, random.Random(1))
        assert 0 < len(out) <= 5
        assert len(set(out)) == len(out)
        assert not any(_shares_significant_word(s, titles) for s in out)

    def test_seeded_order_is_reproducible(self, make_task) -> None:
        tasks = [make_task(title="Write unit tests")]
        assert fallback_suggestions(tasks, random.Random(42)) == fallback_suggestions(tasks, random.Random(42))

    def test_exhausted_catalog_uses_phase_set(self, make_task) -> None:
        blocker = " ".join(ALL_CATALOG)
        out = fallback_suggestions([make_task(title=blocker)], random.Random(0))
        assert set(out) <= set(PHASE_SUGGESTIONS["initialization"])
        assert not any(_shares_significant_word(s, [blocker]) for s in out)


class TestSuggestTasks:
    def test_without_advisory_uses_catalog(self, make_project) -> None:
        out = asyncio.run(suggest_tasks(make_project(), [], rng=random.Random(3)))
        assert len(out) == 5
        assert set(out) <= set(ALL_CATALOG)

    def test_failure_uses_catalog(self, make_project, failing_advisory) -> None:
        out = asyncio.run(suggest_tasks(make_project(), [], advisory=failing_advisory, rng=random.Random(3)))
        assert failing_advisory.calls == 1
        assert set(out) <= set(ALL_CATALOG)

    def test_advisory_lines_with_prompt(self, make_project, make_task, canned_advisory) -> None:
        advisory = canned_advisory("- Threat modelling\n2. Pen test\n\n* Rotate secrets\n- Existing task\n")
        out = asyncio.run(suggest_tasks(
            make_project(), [make_task(title="Existing task")], prompt="focus on security", advisory=advisory
        ))
        assert out == ["Threat modelling", "Pen test", "Rotate secrets"]
        assert "focus on security" in advisory.prompts[0]
        assert "existing task" in advisory.prompts[0]

    def test_empty_reply_uses_catalog(self, make_project, canned_advisory) -> None:
        out = asyncio.run(suggest_tasks(make_project(), [], advisory=canned_advisory("\n - \n"), rng=random.Random(5)))
        assert set(out) <= set(ALL_CATALOG)


class TestParseSuggestionLines:
    def test_caps_at_five(self) -> None:
        text = "\n".join(f"Item {i}" for i in range(8))
        assert parse_suggestion_lines(text, []) == [f"Item {i}" for i in range(5)]
