"""Deterministic extractor chain for workout text."""
import logging
from typing import List, Optional, Sequence

from workout_timer_api.models import Schedule

from .base import BaseExtractor
from .emom_extractor import EmomExtractor
from .tabata_extractor import TabataExtractor
from .hiit_sequence_extractor import HiitSequenceExtractor
from .interval_extractor import IntervalExtractor
from .work_rest_extractor import WorkRestPatternExtractor

logger = logging.getLogger(__name__)


def default_extractors() -> List[BaseExtractor]:
    """Extractors in fixed priority order, most specific cue first.

    The first structural match wins; there is no confidence scoring.
    """
    return [
        EmomExtractor(),
        TabataExtractor(),
        HiitSequenceExtractor(),
        IntervalExtractor(),
        WorkRestPatternExtractor(),
    ]


class ExtractorChain:
    """Try each extractor in order and return the first schedule produced."""

    def __init__(self, extractors: Optional[Sequence[BaseExtractor]] = None):
        self.extractors = list(extractors) if extractors is not None else default_extractors()

    def extract(self, text: str) -> Optional[Schedule]:
        text = text or ""
        for extractor in self.extractors:
            try:
                schedule = extractor.extract(text)
            except Exception as e:
                logger.warning(f"{type(extractor).__name__} failed: {e}")
                continue
            if schedule is not None:
                logger.info(f"Extractor match: {schedule.debug.inferred_mode}")
                return schedule
        logger.info("No extractor matched")
        return None


__all__ = [
    "BaseExtractor",
    "EmomExtractor",
    "TabataExtractor",
    "HiitSequenceExtractor",
    "IntervalExtractor",
    "WorkRestPatternExtractor",
    "ExtractorChain",
    "default_extractors",
]
