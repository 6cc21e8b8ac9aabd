"""Verify all modules can be imported without errors."""


def test_core_module_imports():
    """Import core modules to catch bad import paths."""
    import workout_timer_api.main
    import workout_timer_api.models
    import workout_timer_api.config
    import workout_timer_api.utils


def test_api_imports():
    import workout_timer_api.api.routes


def test_service_imports():
    """Import service modules."""
    import workout_timer_api.services.defaults
    import workout_timer_api.services.duration
    import workout_timer_api.services.llm_service
    import workout_timer_api.services.schedule_normalizer
    import workout_timer_api.services.timeline
    import workout_timer_api.services.workout_generator
    import workout_timer_api.services.prompts.schedule_prompt


def test_extractor_and_ai_imports():
    import workout_timer_api.extractors
    import workout_timer_api.ai
    import workout_timer_api.ai.client_factory
