"""
Base Extractor

Abstract base class for the deterministic workout-text extractors.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from workout_timer_api.models import Block, Schedule
from workout_timer_api.services.defaults import MAX_REPEATS, MAX_TOTAL_MINUTES
from workout_timer_api.services.duration import build_schedule, total_minutes
from workout_timer_api.utils import clock_to_seconds

logger = logging.getLogger(__name__)

# Seconds suffix shared by every extractor ("45s", "45 sec", "45 seconds")
SECONDS_UNIT = r'(?:seconds?|secs?|s)\b'


class BaseExtractor(ABC):
    """Recognises one workout archetype in free text, or declines."""

    #: Value reported in debug.inferred_mode
    mode: str = ""

    # Regex patterns for common workout notations
    ROUNDS_PATTERN = re.compile(r'(\d+)\s*rounds?\b', re.IGNORECASE)  # "8 rounds"
    TIME_PATTERN = re.compile(
        r'(\d+:\d{2}|\d+)\s*(minutes?|mins?|m|seconds?|secs?|s)?\b',
        re.IGNORECASE,
    )  # "2:30", "90s", "2 min"

    @abstractmethod
    def extract(self, text: str) -> Optional[Schedule]:
        """
        Build a canonical schedule from raw text.

        Args:
            text: Free-text workout description

        Returns:
            Schedule, or None when the archetype's required cues are absent
        """
        pass

    def build(self, title: str, blocks: Sequence[Block], notes: Optional[str] = None) -> Optional[Schedule]:
        """Wrap blocks into a schedule tagged as a deterministic match.

        Declines (returns None) when the workout would run past MAX_TOTAL_MINUTES.
        """
        minutes = total_minutes(blocks)
        if minutes > MAX_TOTAL_MINUTES:
            logger.info(f"{self.mode} match declined: {minutes} min exceeds {MAX_TOTAL_MINUTES}")
            return None
        return build_schedule(title, blocks, used_ai=False, inferred_mode=self.mode, notes=notes)

    def find_rounds(self, text: str) -> Optional[int]:
        """Extract the first "<n> rounds" count"""
        match = self.ROUNDS_PATTERN.search(text)
        if match:
            return int(match.group(1))
        return None

    @staticmethod
    def within_repeat_limit(count: Optional[int]) -> bool:
        """True for a positive rounds/sets/minutes count no larger than MAX_REPEATS."""
        return count is not None and 0 < count <= MAX_REPEATS

    @staticmethod
    def time_to_seconds(amount: str, unit: Optional[str] = None) -> Optional[int]:
        """Convert a captured amount + unit ("2:30", "90"+"s", "2"+"min") to seconds."""
        if ":" in amount:
            return clock_to_seconds(amount)
        try:
            value = int(amount)
        except ValueError:
            return None
        if unit and unit.lower().startswith("m"):
            return value * 60
        return value

    @staticmethod
    def clean_label(label: str) -> str:
        """Normalize a captured exercise label"""
        label = " ".join(label.split())
        return label.strip(" ,;:-*•")

    @staticmethod
    def split_clauses(text: str) -> List[str]:
        """Split text into newline/comma separated clauses."""
        return [c.strip() for c in re.split(r'[\n,]', text) if c.strip()]
