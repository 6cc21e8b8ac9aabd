"""Tests for the request handler's strategy ordering and fallbacks."""
from unittest.mock import MagicMock, patch

from fakes import failing_complete, static_complete

from workout_timer_api.extractors import ExtractorChain
from workout_timer_api.models import IntervalBlock, TabataBlock
from workout_timer_api.services.workout_generator import WorkoutGenerator


class TestAiFirst:
    """Default order: generative, then extractors, then the safe default."""

    def test_provider_answer_is_used(self, canonical_tabata):
        schedule = WorkoutGenerator(complete=static_complete(canonical_tabata)).generate("tabata burpees")

        assert schedule.debug.used_ai is True
        assert schedule.blocks[0].exercise == "Burpees"

    def test_provider_down_falls_back_to_extractors(self):
        schedule = WorkoutGenerator(complete=failing_complete).generate("Tabata 8 rounds, 20s work, 10s rest")

        assert schedule.debug.used_ai is False
        assert schedule.debug.inferred_mode == "TABATA"
        assert schedule.total_minutes == 4
        assert "AI failed" in schedule.debug.notes

    def test_malformed_provider_text_falls_back(self):
        schedule = WorkoutGenerator(complete=static_complete("I can't do that")).generate("10 rounds, 30s work, 30s rest")

        assert schedule.debug.inferred_mode == "INTERVAL"

    def test_unrecognised_shape_falls_back(self):
        generator = WorkoutGenerator(complete=static_complete({"answer": 42}))
        schedule = generator.generate("10 rounds, 30s work, 30s rest")

        assert schedule.debug.used_ai is False
        assert schedule.debug.inferred_mode == "INTERVAL"

    def test_everything_fails_gives_safe_default(self):
        schedule = WorkoutGenerator(complete=failing_complete).generate("go for a nice walk")

        block = schedule.blocks[0]
        assert isinstance(block, IntervalBlock)
        assert (block.sets, block.work_seconds, block.rest_seconds) == (20, 40, 20)
        assert schedule.total_minutes == 20
        assert schedule.debug.inferred_mode == "FALLBACK"
        assert "no extractor matched" in schedule.debug.notes

    def test_empty_text_gives_safe_default(self):
        schedule = WorkoutGenerator(complete=failing_complete).generate("")
        assert schedule.debug.inferred_mode == "FALLBACK"

    def test_none_text_treated_as_empty(self):
        schedule = WorkoutGenerator(complete=failing_complete).generate(None)
        assert schedule.debug.inferred_mode == "FALLBACK"

    def test_level_reaches_the_prompt(self, canonical_tabata):
        complete = MagicMock(side_effect=static_complete(canonical_tabata))
        WorkoutGenerator(complete=complete).generate("tabata", level="advanced")

        system_prompt, user_prompt = complete.call_args.args
        assert "[ATHLETE_LEVEL]" in user_prompt

    def test_single_provider_attempt(self):
        complete = MagicMock(side_effect=RuntimeError("timeout"))
        WorkoutGenerator(complete=complete).generate("go for a walk")

        assert complete.call_count == 1

    def test_uses_llm_service_when_no_provider_injected(self, canonical_tabata):
        with patch(
            "workout_timer_api.services.workout_generator.LLMService.complete",
            side_effect=static_complete(canonical_tabata),
        ):
            schedule = WorkoutGenerator().generate("tabata")

        assert schedule.debug.used_ai is True

    def test_missing_credentials_still_answer(self):
        """No API key configured: the deterministic chain answers."""
        schedule = WorkoutGenerator().generate("EMOM 12 min burpees")

        assert schedule.debug.inferred_mode == "EMOM"
        assert schedule.total_minutes == 12


class TestExtractorsFirst:
    def test_extractor_match_skips_provider(self):
        complete = MagicMock(side_effect=failing_complete)
        generator = WorkoutGenerator(complete=complete, order="extractors_first")

        schedule = generator.generate("Tabata squats")

        assert isinstance(schedule.blocks[0], TabataBlock)
        complete.assert_not_called()

    def test_provider_used_when_no_extractor_matches(self, exercise_list_response):
        generator = WorkoutGenerator(complete=static_complete(exercise_list_response), order="extractors_first")

        schedule = generator.generate("run and squat")

        assert schedule.debug.used_ai is True
        assert schedule.debug.inferred_mode == "INTERVAL"
        assert schedule.debug.notes == "exercise list"

    def test_strategy_order(self):
        assert [name for name, _ in WorkoutGenerator(order="extractors_first").strategies()] == [
            "extractors",
            "generative",
        ]
        assert [name for name, _ in WorkoutGenerator(order="ai_first").strategies()] == [
            "generative",
            "extractors",
        ]


class TestStrategyErrors:
    def test_raising_extractor_chain_does_not_escape(self):
        chain = MagicMock(spec=ExtractorChain)
        chain.extract.side_effect = RuntimeError("boom")

        schedule = WorkoutGenerator(complete=failing_complete, extractor_chain=chain).generate("anything")

        assert schedule.debug.inferred_mode == "FALLBACK"
        assert "extractors: boom" in schedule.debug.notes
