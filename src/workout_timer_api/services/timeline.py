"""Expand a canonical schedule into a flat, pre-timed event timeline."""
from typing import List

from workout_timer_api.models import (
    Block,
    CircuitBlock,
    EmomBlock,
    IntervalBlock,
    Schedule,
    TabataBlock,
    TimelineEvent,
    TimelineResponse,
)


def _emom_label(block: EmomBlock, minute: int) -> str:
    parity = "odd" if minute % 2 else "even"
    for instruction in block.instructions:
        if instruction.minute_mod == parity:
            return instruction.name
    # No parity-specific instruction: rotate through the list
    return block.instructions[(minute - 1) % len(block.instructions)].name


def expand_block(block: Block) -> List[TimelineEvent]:
    """Events for one block; round numbers restart at 1 per block."""
    events: List[TimelineEvent] = []

    if isinstance(block, EmomBlock):
        for minute in range(1, block.minutes + 1):
            events.append(TimelineEvent(kind="work", label=_emom_label(block, minute), seconds=60, round=minute))

    elif isinstance(block, TabataBlock):
        for rnd in range(1, block.rounds + 1):
            events.append(TimelineEvent(kind="work", label=block.exercise, seconds=block.work_seconds, round=rnd))
            if block.rest_seconds:
                events.append(TimelineEvent(kind="rest", label="Rest", seconds=block.rest_seconds, round=rnd))

    elif isinstance(block, CircuitBlock):
        for rnd in range(1, block.rounds + 1):
            for exercise in block.exercises:
                events.append(TimelineEvent(kind="work", label=exercise.name, seconds=exercise.seconds, round=rnd))
            if rnd < block.rounds and block.rest_between_rounds_seconds:
                events.append(TimelineEvent(
                    kind="round_rest",
                    label="Rest between rounds",
                    seconds=block.rest_between_rounds_seconds,
                    round=rnd,
                ))

    elif isinstance(block, IntervalBlock) and block.is_sequenced:
        for rnd in range(1, block.sets + 1):
            for item in block.sequence:
                events.append(TimelineEvent(kind="work", label=item.name, seconds=item.seconds, round=rnd))
                if item.rest_after_seconds:
                    events.append(TimelineEvent(kind="rest", label="Rest", seconds=item.rest_after_seconds, round=rnd))

    elif isinstance(block, IntervalBlock):
        for rnd in range(1, block.sets + 1):
            events.append(TimelineEvent(kind="work", label="Work", seconds=block.work_seconds, round=rnd))
            if block.rest_seconds:
                events.append(TimelineEvent(kind="rest", label="Rest", seconds=block.rest_seconds, round=rnd))

    return events


def expand_schedule(schedule: Schedule) -> TimelineResponse:
    """Flatten every block, numbering events in playback order."""
    timeline: List[TimelineEvent] = []
    for block in schedule.blocks:
        timeline.extend(expand_block(block))
    for index, event in enumerate(timeline):
        event.index = index

    return TimelineResponse(
        title=schedule.title,
        total_seconds=sum(e.seconds for e in timeline),
        timeline=timeline,
        debug=schedule.debug,
    )
