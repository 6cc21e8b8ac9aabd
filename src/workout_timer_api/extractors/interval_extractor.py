"""Generic interval extractor: "10 rounds 30s on 15s off"."""
import re
from typing import Optional

from workout_timer_api.models import IntervalBlock, Schedule

from .base import BaseExtractor, SECONDS_UNIT


class IntervalExtractor(BaseExtractor):
    """Least specific timing archetype; only the work/rest pattern extractor runs after it."""

    mode = "INTERVAL"

    COUNT_PATTERN = re.compile(r'(\d+)\s*(?:rounds?|sets?|times|x)\b', re.IGNORECASE)
    WORK_PATTERN = re.compile(rf'(\d+)\s*{SECONDS_UNIT}\s*(?:of\s+)?(?:work|on)\b', re.IGNORECASE)
    BARE_SECONDS_PATTERN = re.compile(
        rf'(\d+)\s*{SECONDS_UNIT}(?!\s*(?:of\s+)?(?:rest|off|recovery)\b)',
        re.IGNORECASE,
    )
    REST_PATTERN = re.compile(rf'(\d+)\s*{SECONDS_UNIT}\s*(?:of\s+)?(?:rest|off|recovery)\b', re.IGNORECASE)

    def extract(self, text: str) -> Optional[Schedule]:
        count_match = self.COUNT_PATTERN.search(text)
        if not count_match or not self.within_repeat_limit(int(count_match.group(1))):
            return None
        sets = int(count_match.group(1))

        work_match = self.WORK_PATTERN.search(text) or self.BARE_SECONDS_PATTERN.search(text)
        if not work_match or int(work_match.group(1)) <= 0:
            return None
        work = int(work_match.group(1))

        rest_match = self.REST_PATTERN.search(text)
        rest = int(rest_match.group(1)) if rest_match else 0

        block = IntervalBlock(sets=sets, work_seconds=work, rest_seconds=rest)
        return self.build(f"{sets} x {work}s Intervals", [block])
