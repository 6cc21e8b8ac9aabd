"""TABATA extractor: "Tabata 8 rounds, 20s work, 10s rest"."""
import re
from typing import Optional

from workout_timer_api.models import Schedule, TabataBlock
from workout_timer_api.services.defaults import default_for

from .base import BaseExtractor, SECONDS_UNIT

# Words that can follow "tabata" without naming an exercise
_NOT_AN_EXERCISE = {"round", "rounds", "work", "rest", "x", "style", "workout", "protocol"}


class TabataExtractor(BaseExtractor):
    """Tabata: rounds of (work, rest) on one exercise, 8/20/10 unless stated."""

    mode = "TABATA"

    CUE_PATTERN = re.compile(r'\btabata\b', re.IGNORECASE)
    WORK_PATTERN = re.compile(rf'(\d+)\s*{SECONDS_UNIT}\s*(?:of\s+)?work\b', re.IGNORECASE)
    REST_PATTERN = re.compile(rf'(\d+)\s*{SECONDS_UNIT}\s*(?:of\s+)?rest\b', re.IGNORECASE)
    EXERCISE_PATTERN = re.compile(
        r'\btabata\b\s*[:\-–]?\s*(?:of\s+)?([A-Za-z][A-Za-z \-]*)',
        re.IGNORECASE,
    )

    def extract(self, text: str) -> Optional[Schedule]:
        if not self.CUE_PATTERN.search(text):
            return None

        rounds = self.find_rounds(text) or default_for("TABATA", "rounds")
        if not self.within_repeat_limit(rounds):
            return None
        work = self._capture(self.WORK_PATTERN, text) or default_for("TABATA", "work_seconds")
        rest = self._capture(self.REST_PATTERN, text, allow_zero=True)
        if rest is None:
            rest = default_for("TABATA", "rest_seconds")
        exercise = self.find_exercise(text)

        block = TabataBlock(rounds=rounds, work_seconds=work, rest_seconds=rest, exercise=exercise)
        title = "Tabata" if exercise == default_for("TABATA", "exercise") else f"Tabata {exercise}"
        return self.build(title, [block])

    def find_exercise(self, text: str) -> str:
        match = self.EXERCISE_PATTERN.search(text)
        if match:
            name = self.clean_label(match.group(1))
            if name and name.split()[0].lower() not in _NOT_AN_EXERCISE:
                return name
        return default_for("TABATA", "exercise")

    @staticmethod
    def _capture(pattern: re.Pattern, text: str, allow_zero: bool = False) -> Optional[int]:
        match = pattern.search(text)
        if match and (allow_zero or int(match.group(1)) > 0):
            return int(match.group(1))
        return None
