"""Request handler: turn workout text into a canonical schedule, always.

Strategies run in order and each returns a schedule or None:

    ai_first:         generative -> extractors -> safe default
    extractors_first: extractors -> generative -> safe default

Provider failures, malformed responses and unrecognised shapes are logged and
treated as "no result"; they never reach the caller.
"""
import logging
from typing import Callable, List, Optional, Tuple

from workout_timer_api.config import settings
from workout_timer_api.extractors import ExtractorChain
from workout_timer_api.models import Schedule
from workout_timer_api.services.duration import safe_default_schedule
from workout_timer_api.services.llm_service import LLMService
from workout_timer_api.services.schedule_normalizer import normalize

logger = logging.getLogger(__name__)

# complete(system_prompt, user_prompt) -> raw provider text
CompleteFn = Callable[[str, str], str]
Strategy = Callable[[str, Optional[str], List[str]], Optional[Schedule]]


class WorkoutGenerator:
    """Orchestrates the generative path, the extractor chain and the safe default."""

    def __init__(
        self,
        complete: Optional[CompleteFn] = None,
        extractor_chain: Optional[ExtractorChain] = None,
        order: Optional[str] = None,
    ):
        self.complete = complete
        self.extractor_chain = extractor_chain or ExtractorChain()
        self.order = order or settings.PIPELINE_ORDER

    def strategies(self) -> List[Tuple[str, Strategy]]:
        generative = ("generative", self._try_generative)
        extractors = ("extractors", self._try_extractors)
        if self.order == "extractors_first":
            return [extractors, generative]
        return [generative, extractors]

    def generate(self, text: str, level: Optional[str] = None) -> Schedule:
        """
        Produce a schedule for the text.

        Args:
            text: Free-text workout description (may be empty)
            level: Optional athlete level, used only in the prompt

        Returns:
            Canonical schedule; the hardcoded default when nothing else works
        """
        text = text or ""
        logger.info(f'Processing: "{text[:100]}..."')

        failures: List[str] = []
        for name, strategy in self.strategies():
            try:
                schedule = strategy(text, level, failures)
            except Exception as e:
                logger.exception(f"Strategy {name} raised: {e}")
                failures.append(f"{name}: {e}")
                continue
            if schedule is not None:
                if failures and not schedule.debug.notes:
                    schedule.debug.notes = "; ".join(failures)
                return schedule

        logger.warning(f"All strategies failed, using safe default: {failures}")
        return safe_default_schedule(notes="; ".join(failures) or None)

    def _try_generative(self, text: str, level: Optional[str], failures: List[str]) -> Optional[Schedule]:
        try:
            loose = LLMService.generate_loose_object(text, level, complete=self.complete)
        except Exception as e:
            logger.warning(f"Generative path failed: {e}")
            failures.append(f"AI failed: {e}")
            return None

        schedule = normalize(loose, text)
        if schedule is None:
            failures.append("AI response could not be normalized")
        return schedule

    def _try_extractors(self, text: str, level: Optional[str], failures: List[str]) -> Optional[Schedule]:
        schedule = self.extractor_chain.extract(text)
        if schedule is None:
            failures.append("no extractor matched")
        return schedule
