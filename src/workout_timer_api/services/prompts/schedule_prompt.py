"""Prompt builder for the workout-timer schedule request.

The system prompt is the output contract for the generative provider. It is
fixed; only the user message varies with the request.

Usage::

    from workout_timer_api.services.prompts.schedule_prompt import build_prompt

    prompt = build_prompt("Tabata 8 rounds, 20s work, 10s rest", level="beginner")
    prompt.system  # instruction document
    prompt.user    # raw workout text + level hint
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SCHEDULE_SYSTEM_PROMPT = """You are a workout timer expert. Convert a free-text workout description into a timer schedule.

Output ONLY valid JSON with this structure:
{
  "title": "string",
  "total_minutes": number,
  "blocks": [ <one block> ]
}

Each block has a "type" and the fields for that type:

EMOM (one instruction at the start of every minute):
{"type": "EMOM", "minutes": number, "instructions": [{"minute_mod": "odd" | "even", "name": "string"}]}
- Omit "minute_mod" and give a single instruction when every minute is the same.

TABATA (rounds of work/rest on one exercise, default 8 x 20s/10s):
{"type": "TABATA", "rounds": number, "work_seconds": number, "rest_seconds": number, "exercise": "string"}

CIRCUIT (rounds of an exercise list, rest only between rounds):
{"type": "CIRCUIT", "rounds": number, "exercises": [{"name": "string", "seconds": number, "reps": number | null}], "rest_between_rounds_seconds": number}

INTERVAL (sets of work/rest):
{"type": "INTERVAL", "sets": number, "work_seconds": number, "rest_seconds": number}

INTERVAL with a named sequence (each set runs the whole sequence):
{"type": "INTERVAL", "sets": number, "work_seconds": number, "rest_seconds": 0,
 "sequence": [{"name": "string", "seconds": number, "rest_after_seconds": number | null}]}

RULES:
- All durations are whole seconds, except EMOM "minutes".
- Never list a rest as its own exercise; put it in "rest_after_seconds" of the exercise before it.
- "total_minutes" is the whole workout rounded up to the next minute.
- Use exactly one block.

EXAMPLE:
"4 Rounds: 45s Run, 15s rest, 45s Squats, 15s rest, 45s Plank" ->
{
  "title": "4 Rounds Workout",
  "total_minutes": 11,
  "blocks": [
    {
      "type": "INTERVAL",
      "sets": 4,
      "work_seconds": 45,
      "rest_seconds": 0,
      "sequence": [
        {"name": "Run", "seconds": 45, "rest_after_seconds": 15},
        {"name": "Squats", "seconds": 45, "rest_after_seconds": 15},
        {"name": "Plank", "seconds": 45, "rest_after_seconds": null}
      ]
    }
  ]
}

Remember: Output ONLY valid JSON matching this exact schema."""

# Level is a whitelist value; never interpolate free text here
_LEVEL_HINTS: dict[str, str] = {
    "beginner": "The athlete is a beginner: prefer the lower end of any range and generous rests.",
    "intermediate": "The athlete is intermediate.",
    "advanced": "The athlete is advanced: prefer the upper end of any range.",
}


@dataclass(frozen=True)
class SchedulePrompt:
    """System + user message pair sent to the provider."""
    system: str
    user: str


def build_user_prompt(text: str, level: Optional[str] = None) -> str:
    """Embed the raw workout text in the user message."""
    parts = [f"Workout description:\n{text}"]
    hint = _LEVEL_HINTS.get((level or "").lower())
    if hint:
        parts.append(f"[ATHLETE_LEVEL]: {hint}")
    parts.append("Create the timer schedule. Return valid JSON only.")
    return "\n\n".join(parts)


def build_prompt(text: str, level: Optional[str] = None) -> SchedulePrompt:
    return SchedulePrompt(system=SCHEDULE_SYSTEM_PROMPT, user=build_user_prompt(text, level))
