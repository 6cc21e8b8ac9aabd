"""EMOM extractor: "EMOM 20 min: odd 12 burpees, even 45s plank"."""
import re
from typing import List, Optional

from workout_timer_api.models import EmomBlock, EmomInstruction, Schedule
from workout_timer_api.services.defaults import default_for

from .base import BaseExtractor


class EmomExtractor(BaseExtractor):
    """Every Minute On the Minute workouts."""

    mode = "EMOM"

    CUE_PATTERN = re.compile(r'\bEMOM\b|\bevery\s+minute\b', re.IGNORECASE)
    MINUTES_PATTERN = re.compile(r'(\d+)\s*-?\s*min(?:ute)?s?\b', re.IGNORECASE)
    # Phrase runs to the next clause boundary or the opposite parity keyword
    ODD_PATTERN = re.compile(
        r'\bodd\b(?:\s+minutes?)?\s*[:\-–]?\s*(.+?)\s*(?=,?\s*\beven\b|[.;\n]|$)',
        re.IGNORECASE,
    )
    EVEN_PATTERN = re.compile(
        r'\beven\b(?:\s+minutes?)?\s*[:\-–]?\s*(.+?)\s*(?=,?\s*\bodd\b|[.;\n]|$)',
        re.IGNORECASE,
    )

    def extract(self, text: str) -> Optional[Schedule]:
        if not self.CUE_PATTERN.search(text):
            return None
        minutes_match = self.MINUTES_PATTERN.search(text)
        if not minutes_match:
            return None
        minutes = int(minutes_match.group(1))
        if not self.within_repeat_limit(minutes):
            return None

        block = EmomBlock(minutes=minutes, instructions=self.find_instructions(text))
        return self.build(f"EMOM {minutes} min", [block])

    def find_instructions(self, text: str) -> List[EmomInstruction]:
        """Odd/even instructions, or a single generic one."""
        instructions = []
        odd = self.ODD_PATTERN.search(text)
        if odd and self.clean_label(odd.group(1)):
            instructions.append(EmomInstruction(minute_mod="odd", name=self.clean_label(odd.group(1))))
        even = self.EVEN_PATTERN.search(text)
        if even and self.clean_label(even.group(1)):
            instructions.append(EmomInstruction(minute_mod="even", name=self.clean_label(even.group(1))))
        if not instructions:
            instructions.append(EmomInstruction(name=default_for("EMOM", "instruction_name")))
        return instructions
