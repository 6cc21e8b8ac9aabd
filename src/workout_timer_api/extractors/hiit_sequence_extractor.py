"""HIIT-sequence extractor: "4 rounds: 45s Run, 15s rest, 45s Squats, 2:30 rest between rounds"."""
import re
from typing import List, Optional, Tuple

from workout_timer_api.models import CircuitBlock, CircuitExercise, Schedule
from workout_timer_api.services.defaults import default_for

from .base import BaseExtractor, SECONDS_UNIT

# Labels that describe timing rather than an exercise
_TIMING_WORDS = {"work", "on", "off", "rest", "recovery"}

_TIME = r'(\d+:\d{2}|\d+)\s*(minutes?|mins?|m|seconds?|secs?|s)?'


class HiitSequenceExtractor(BaseExtractor):
    """Rounds of timed, named exercises, optionally separated by rests."""

    mode = "HIIT"

    TOTAL_ROUNDS_PATTERN = re.compile(r'\btotal\s+(?:of\s+)?(\d+)\s*rounds?\b', re.IGNORECASE)
    ITEM_PATTERN = re.compile(
        rf"(\d+)\s*{SECONDS_UNIT}\s*(?:of\s+)?([A-Za-z][A-Za-z \-']*?)\s*(?=[,;.\n(]|\d|$)",
        re.IGNORECASE,
    )
    # Between-round rest, most explicit form first
    ROUND_REST_PATTERNS = [
        re.compile(rf'{_TIME}\s*(?:of\s+)?rest\s+between\s+rounds', re.IGNORECASE),
        re.compile(rf'rest\s+between\s+rounds\s*[:=\-]?\s*{_TIME}', re.IGNORECASE),
        re.compile(rf'\brest\b\s*(?:of\s+|for\s+|[:=\-]\s*)?{_TIME}\b', re.IGNORECASE),
    ]

    def extract(self, text: str) -> Optional[Schedule]:
        rounds = self.find_total_rounds(text)
        if not self.within_repeat_limit(rounds):
            return None

        items = self.find_items(text)
        if not any(not is_rest and name.lower() not in _TIMING_WORDS for name, _, is_rest in items):
            return None

        round_rest = 0
        if re.search(r'\brest\b', text, re.IGNORECASE) and not items[-1][2]:
            round_rest = self.find_round_rest(text)

        exercises = [CircuitExercise(name=name, seconds=seconds) for name, seconds, _ in items]
        block = CircuitBlock(
            rounds=rounds,
            exercises=exercises,
            rest_between_rounds_seconds=round_rest,
        )
        return self.build(f"{rounds} Rounds Workout", [block])

    def find_total_rounds(self, text: str) -> Optional[int]:
        """"total <n> rounds" wins over a bare "<n> rounds"."""
        match = self.TOTAL_ROUNDS_PATTERN.search(text)
        rounds = int(match.group(1)) if match else self.find_rounds(text)
        if rounds is not None and rounds > 0:
            return rounds
        return None

    def find_items(self, text: str) -> List[Tuple[str, int, bool]]:
        """(name, seconds, is_rest) for every "<n>s <label>" capture, in order."""
        items = []
        for match in self.ITEM_PATTERN.finditer(text):
            seconds = int(match.group(1))
            label = self.clean_label(match.group(2))
            if seconds <= 0 or not label:
                continue
            is_rest = "rest" in label.lower()
            items.append(("Rest" if is_rest else label, seconds, is_rest))
        return items

    def find_round_rest(self, text: str) -> int:
        for pattern in self.ROUND_REST_PATTERNS:
            matches = list(pattern.finditer(text))
            if matches:
                last = matches[-1]
                seconds = self.time_to_seconds(last.group(1), last.group(2))
                if seconds:
                    return seconds
        return default_for("HIIT", "round_rest_seconds")
