"""
Work/rest pattern extractor.

Handles programming written as

    4 Rounds
    :45 WORK // :15 REST
    Run
    Squat
    *Rest 2:30 after each round

Every exercise but the last in a round is followed by a fixed short rest, and
the between-round rest becomes the block-level rest.
"""
import re
from typing import List, Optional

from workout_timer_api.models import IntervalBlock, Schedule, SequenceItem
from workout_timer_api.services.defaults import default_for

from .base import BaseExtractor

_STRUCTURAL_LINE = re.compile(r'\b(?:rounds?|work|rest)\b', re.IGNORECASE)


class WorkRestPatternExtractor(BaseExtractor):
    mode = "WORK_REST"

    WORK_MARKER = re.compile(r':(\d{1,2})\s*WORK\b', re.IGNORECASE)
    REST_MARKER = re.compile(r':(\d{1,2})\s*REST\b', re.IGNORECASE)
    ROUND_REST_CLAUSE = re.compile(r'\bRest\b([^,\n]*?)\bafter\s+each\s+round', re.IGNORECASE)

    def extract(self, text: str) -> Optional[Schedule]:
        work_marker = self.WORK_MARKER.search(text)
        if not work_marker or not self.REST_MARKER.search(text):
            return None
        clause = self.ROUND_REST_CLAUSE.search(text)
        if not clause:
            return None

        names = self.find_exercise_names(text)
        if not names:
            return None

        rounds = self.find_rounds(text) or 1
        if not self.within_repeat_limit(rounds):
            return None
        work = int(work_marker.group(1)) or default_for("WORK_REST", "work_seconds")
        round_rest = self._clause_seconds(clause.group(1))
        exercise_rest = default_for("WORK_REST", "exercise_rest_seconds")

        sequence = [
            SequenceItem(
                name=name,
                seconds=work,
                rest_after_seconds=exercise_rest if i < len(names) - 1 else None,
            )
            for i, name in enumerate(names)
        ]
        block = IntervalBlock(sets=rounds, work_seconds=work, rest_seconds=round_rest, sequence=sequence)
        return self.build(f"{rounds} Rounds Workout", [block])

    def find_exercise_names(self, text: str) -> List[str]:
        """Every clause that is not a rounds/work/rest keyword line."""
        names = []
        for clause in self.split_clauses(text):
            if _STRUCTURAL_LINE.search(clause):
                continue
            name = self.clean_label(clause)
            if name:
                names.append(name)
        return names

    def _clause_seconds(self, fragment: str) -> int:
        match = self.TIME_PATTERN.search(fragment)
        if match:
            seconds = self.time_to_seconds(match.group(1), match.group(2))
            if seconds:
                return seconds
        return default_for("WORK_REST", "round_rest_seconds")
