"""Tests for flat timeline expansion."""
import pytest

from workout_timer_api.models import (
    CircuitBlock,
    CircuitExercise,
    EmomBlock,
    EmomInstruction,
    IntervalBlock,
    SequenceItem,
    TabataBlock,
)
from workout_timer_api.services.duration import block_seconds, build_schedule
from workout_timer_api.services.timeline import expand_block, expand_schedule


def _kinds(events):
    return [(e.kind, e.label, e.seconds) for e in events]


class TestExpandBlock:
    def test_emom_alternates_odd_even(self):
        block = EmomBlock(
            minutes=4,
            instructions=[
                EmomInstruction(minute_mod="odd", name="Burpees"),
                EmomInstruction(minute_mod="even", name="Plank"),
            ],
        )
        events = expand_block(block)

        assert [e.label for e in events] == ["Burpees", "Plank", "Burpees", "Plank"]
        assert all(e.kind == "work" and e.seconds == 60 for e in events)
        assert [e.round for e in events] == [1, 2, 3, 4]

    def test_tabata_work_rest_pairs(self):
        events = expand_block(TabataBlock(rounds=2, work_seconds=20, rest_seconds=10, exercise="Squats"))

        assert _kinds(events) == [
            ("work", "Squats", 20),
            ("rest", "Rest", 10),
            ("work", "Squats", 20),
            ("rest", "Rest", 10),
        ]

    def test_zero_rest_emits_no_rest_events(self):
        events = expand_block(TabataBlock(rounds=3, work_seconds=30, rest_seconds=0))
        assert [e.kind for e in events] == ["work", "work", "work"]

    def test_circuit_round_rest_not_after_last_round(self):
        block = CircuitBlock(
            rounds=2,
            exercises=[CircuitExercise(name="Run", seconds=45), CircuitExercise(name="Squat", seconds=45)],
            rest_between_rounds_seconds=60,
        )
        events = expand_block(block)

        assert [e.kind for e in events] == ["work", "work", "round_rest", "work", "work"]
        assert [e.round for e in events] == [1, 1, 1, 2, 2]

    def test_sequenced_interval_uses_item_rests(self):
        block = IntervalBlock(
            sets=2,
            work_seconds=45,
            rest_seconds=150,
            sequence=[SequenceItem(name="Run", seconds=45, rest_after_seconds=15), SequenceItem(name="Squat", seconds=45)],
        )
        events = expand_block(block)

        assert _kinds(events) == [
            ("work", "Run", 45),
            ("rest", "Rest", 15),
            ("work", "Squat", 45),
            ("work", "Run", 45),
            ("rest", "Rest", 15),
            ("work", "Squat", 45),
        ]


class TestExpandSchedule:
    """Timeline totals must agree with the derived block durations."""

    @pytest.mark.parametrize("block", [
        EmomBlock(minutes=3, instructions=[EmomInstruction(name="Swings")]),
        TabataBlock(rounds=8, work_seconds=20, rest_seconds=10),
        CircuitBlock(rounds=3, exercises=[CircuitExercise(name="Row", seconds=60)], rest_between_rounds_seconds=30),
        IntervalBlock(sets=10, work_seconds=30, rest_seconds=30),
        IntervalBlock(sets=4, work_seconds=45, sequence=[SequenceItem(name="Run", seconds=45, rest_after_seconds=15)]),
    ])
    def test_total_seconds_matches_block_duration(self, block):
        schedule = build_schedule("T", [block], used_ai=False, inferred_mode=block.type)

        timeline = expand_schedule(schedule)

        assert timeline.total_seconds == block_seconds(block)

    def test_events_indexed_across_blocks(self):
        schedule = build_schedule(
            "Combo",
            [
                EmomBlock(minutes=2, instructions=[EmomInstruction(name="Swings")]),
                IntervalBlock(sets=2, work_seconds=30, rest_seconds=15),
            ],
            used_ai=True,
            inferred_mode="EMOM+INTERVAL",
        )

        timeline = expand_schedule(schedule)

        assert [e.index for e in timeline.timeline] == list(range(6))
        assert timeline.total_seconds == 120 + 90
        assert timeline.title == "Combo"
        assert timeline.debug.inferred_mode == "EMOM+INTERVAL"
