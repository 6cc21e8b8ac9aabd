"""Derived-field calculator.

Every producer of a canonical schedule (extractors, normalizer, safe default)
goes through build_schedule() so total_minutes and cues are computed in one
place.
"""
import math
from typing import Iterable, Optional, Sequence

from workout_timer_api.models import (
    Block,
    CircuitBlock,
    Cues,
    DebugInfo,
    EmomBlock,
    IntervalBlock,
    Schedule,
    TabataBlock,
)
from workout_timer_api.services.defaults import (
    HALFWAY_MIN_REPEATS,
    HALFWAY_MIN_TOTAL_MINUTES,
    SAFE_DEFAULT_REST_SECONDS,
    SAFE_DEFAULT_SETS,
    SAFE_DEFAULT_TITLE,
    SAFE_DEFAULT_WORK_SECONDS,
)


def block_seconds(block: Block) -> int:
    """Total duration of one block in seconds."""
    if isinstance(block, EmomBlock):
        return block.minutes * 60
    if isinstance(block, TabataBlock):
        return block.rounds * (block.work_seconds + block.rest_seconds)
    if isinstance(block, CircuitBlock):
        per_round = sum(ex.seconds for ex in block.exercises)
        return block.rounds * per_round + (block.rounds - 1) * block.rest_between_rounds_seconds
    if isinstance(block, IntervalBlock):
        if block.is_sequenced:
            per_set = sum(item.seconds + (item.rest_after_seconds or 0) for item in block.sequence)
            return block.sets * per_set
        return block.sets * (block.work_seconds + block.rest_seconds)
    raise TypeError(f"Unknown block type: {type(block).__name__}")


def total_minutes(blocks: Iterable[Block]) -> int:
    """ceil(sum of block seconds / 60), never below one minute."""
    seconds = sum(block_seconds(b) for b in blocks)
    return max(1, math.ceil(seconds / 60))


def block_repeats(block: Block) -> int:
    """How many times the block's unit of work repeats."""
    if isinstance(block, EmomBlock):
        return block.minutes
    if isinstance(block, IntervalBlock):
        return block.sets
    return block.rounds


def derive_cues(blocks: Sequence[Block], minutes: int) -> Cues:
    halfway = minutes >= HALFWAY_MIN_TOTAL_MINUTES or any(
        block_repeats(b) >= HALFWAY_MIN_REPEATS for b in blocks
    )
    return Cues(start=True, halfway=halfway, last_round=True, tts=True)


def build_schedule(
    title: str,
    blocks: Sequence[Block],
    *,
    used_ai: bool,
    inferred_mode: str,
    notes: Optional[str] = None,
) -> Schedule:
    """Assemble a canonical schedule, recomputing every derived field."""
    minutes = total_minutes(blocks)
    return Schedule(
        title=(title or "").strip() or "Workout",
        total_minutes=minutes,
        blocks=list(blocks),
        cues=derive_cues(blocks, minutes),
        debug=DebugInfo(used_ai=used_ai, inferred_mode=inferred_mode, notes=notes),
    )


def safe_default_schedule(notes: Optional[str] = None) -> Schedule:
    """The hardcoded terminal fallback schedule."""
    block = IntervalBlock(
        sets=SAFE_DEFAULT_SETS,
        work_seconds=SAFE_DEFAULT_WORK_SECONDS,
        rest_seconds=SAFE_DEFAULT_REST_SECONDS,
    )
    return build_schedule(
        SAFE_DEFAULT_TITLE,
        [block],
        used_ai=False,
        inferred_mode="FALLBACK",
        notes=notes,
    )
