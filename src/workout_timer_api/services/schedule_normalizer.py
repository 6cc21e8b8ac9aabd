"""Map a loosely typed provider response onto the canonical schedule.

The provider has answered in several dialects over time. Each recognised shape
is a ShapeKind with its own converter; detect_shape() checks them in a fixed
order and the first match wins:

1. TIMELINE       {"timeline": [{"kind": "work", ...}, ...]}
2. CANONICAL      {"title": str, "blocks": [...]}
3. ARCHETYPE      {"type": "TABATA", "rounds": 8, ...}  (a bare block)
4. EXERCISE_LIST  {"blocks": [{"exercises": [...]}]} or {"workout_type": "INTERVAL", "exercises": [...]}
5. TEXT_CUE       shape unknown, but the original text has an EMOM/Tabata cue

normalize() never raises. Any failure is logged and reported as None so the
caller can fall back to the deterministic extractors.
"""
import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from workout_timer_api.extractors import EmomExtractor, TabataExtractor
from workout_timer_api.models import (
    BLOCK_TYPES,
    Block,
    CircuitBlock,
    CircuitExercise,
    EmomBlock,
    EmomInstruction,
    IntervalBlock,
    Schedule,
    SequenceItem,
    TabataBlock,
)
from workout_timer_api.services.defaults import MAX_REPEATS, default_for
from workout_timer_api.services.duration import build_schedule
from workout_timer_api.utils import positive_int, to_int, to_seconds

logger = logging.getLogger(__name__)

_REST_WORD_RE = re.compile(r'\brest\b', re.IGNORECASE)

_emom = EmomExtractor()
_tabata = TabataExtractor()


class NormalizationError(ValueError):
    """Raised inside a converter when the loose object cannot be mapped."""


class ShapeKind(str, Enum):
    TIMELINE = "timeline"
    CANONICAL = "canonical"
    ARCHETYPE = "archetype"
    EXERCISE_LIST = "exercise_list"
    TEXT_CUE = "text_cue"


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    """First non-None value among synonymous keys."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _positive_seconds(value: Any, default: int) -> int:
    seconds = to_seconds(value)
    if seconds is None or seconds <= 0:
        return default
    return seconds


def _non_negative_seconds(value: Any, default: Optional[int]) -> Optional[int]:
    seconds = to_seconds(value)
    if seconds is None or seconds < 0:
        return default
    return seconds


def _bounded(count: int) -> int:
    if count > MAX_REPEATS:
        raise NormalizationError(f"Repeat count {count} exceeds {MAX_REPEATS}")
    return count


def _repeat_count(value: Any, default: int) -> int:
    """Rounds, sets or minutes: positive, defaulted, and capped at MAX_REPEATS."""
    return _bounded(positive_int(value, default))


def _type_tag(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip().upper() in BLOCK_TYPES:
        return value.strip().upper()
    return None


def _item_name(raw: Dict[str, Any], default: str) -> str:
    name = _pick(raw, "name", "label", "exercise", "title")
    name = " ".join(str(name).split()) if name is not None else ""
    return name or default


def _item_seconds(raw: Dict[str, Any], default: int) -> int:
    """Duration lookup order: duration, seconds, duration_seconds."""
    return _positive_seconds(_pick(raw, "duration", "seconds", "duration_seconds"), default)


def _as_dict_items(items: Any) -> List[Dict[str, Any]]:
    """List items as dicts; bare strings become {"name": ...}."""
    if not isinstance(items, list):
        return []
    result = []
    for item in items:
        if isinstance(item, dict):
            result.append(item)
        elif isinstance(item, str) and item.strip():
            result.append({"name": item.strip()})
    return result


# ---------------------------------------------------------------------------
# Sequence Rectifier
# ---------------------------------------------------------------------------


def rectify_sequence(raw_items: Any, original_text: str) -> List[SequenceItem]:
    """
    Turn raw sequence items into exercises with trailing rests.

    Items whose name contains "rest" are never emitted. Each one adds its own
    duration to the rest_after_seconds of the exercise immediately before it
    (consecutive rests accumulate on that exercise; a rest with no exercise
    before it is dropped).

    If no exercise ends up with a rest but the original text mentions "rest",
    the final exercise gets a default rest.
    """
    item_default = default_for("SEQUENCE", "item_seconds")
    name_default = default_for("SEQUENCE", "item_name")

    rectified: List[Dict[str, Any]] = []
    for raw in _as_dict_items(raw_items):
        name = _item_name(raw, name_default)
        seconds = _item_seconds(raw, item_default)

        if "rest" in name.lower():
            if rectified:
                previous = rectified[-1]
                previous["rest_after_seconds"] = (previous["rest_after_seconds"] or 0) + seconds
            else:
                logger.debug(f"Dropping rest item with no preceding exercise: {name!r}")
            continue

        rectified.append({
            "name": name,
            "seconds": seconds,
            "rest_after_seconds": _non_negative_seconds(
                _pick(raw, "rest_after_seconds", "rest_after", "rest_sec"), None
            ),
        })

    if (
        rectified
        and not any(item["rest_after_seconds"] for item in rectified)
        and _REST_WORD_RE.search(original_text or "")
    ):
        rectified[-1]["rest_after_seconds"] = default_for("SEQUENCE", "forced_rest_seconds")

    return [SequenceItem(**item) for item in rectified]


def validate_sequence(raw_items: Any) -> List[SequenceItem]:
    """
    Take an already-canonical sequence as given.

    Names, durations and explicit rest_after_seconds are repaired field by
    field, but nothing is folded, dropped or forced: an item called
    "Forest run" stays an exercise, and a sequence without rests keeps none.
    """
    return [
        SequenceItem(
            name=_item_name(raw, default_for("SEQUENCE", "item_name")),
            seconds=_item_seconds(raw, default_for("SEQUENCE", "item_seconds")),
            rest_after_seconds=_non_negative_seconds(
                _pick(raw, "rest_after_seconds", "rest_after", "rest_sec"), None
            ),
        )
        for raw in _as_dict_items(raw_items)
    ]


# ---------------------------------------------------------------------------
# Block coercion (shared by CANONICAL and ARCHETYPE)
# ---------------------------------------------------------------------------


def _coerce_emom(raw: Dict[str, Any], text: str) -> EmomBlock:
    minutes = positive_int(_pick(raw, "minutes", "duration_minutes"), 0)
    if not minutes:
        scanned = _emom.MINUTES_PATTERN.search(text or "")
        minutes = int(scanned.group(1)) if scanned and int(scanned.group(1)) > 0 else default_for("EMOM", "minutes")
    minutes = _bounded(minutes)

    instructions = []
    for item in _as_dict_items(_pick(raw, "instructions", "exercises")):
        mod = str(item.get("minute_mod") or "").lower()
        instructions.append(EmomInstruction(
            minute_mod=mod if mod in ("odd", "even") else None,
            name=_item_name(item, default_for("EMOM", "instruction_name")),
        ))
    if not instructions:
        instructions = [EmomInstruction(name=default_for("EMOM", "instruction_name"))]
    return EmomBlock(minutes=minutes, instructions=instructions)


def _coerce_tabata(raw: Dict[str, Any], text: str) -> TabataBlock:
    exercise = _pick(raw, "exercise", "name")
    if exercise is None:
        listed = _as_dict_items(_pick(raw, "exercises", "sequence"))
        exercise = _item_name(listed[0], "") if listed else None
    return TabataBlock(
        rounds=_repeat_count(_pick(raw, "rounds", "sets"), default_for("TABATA", "rounds")),
        work_seconds=_positive_seconds(_pick(raw, "work_seconds", "work"), default_for("TABATA", "work_seconds")),
        rest_seconds=_non_negative_seconds(_pick(raw, "rest_seconds", "rest"), default_for("TABATA", "rest_seconds")),
        exercise=str(exercise).strip() if exercise else default_for("TABATA", "exercise"),
    )


def _coerce_circuit(raw: Dict[str, Any], text: str) -> CircuitBlock:
    exercises = [
        CircuitExercise(
            name=_item_name(item, default_for("CIRCUIT", "exercise_name")),
            seconds=_item_seconds(item, default_for("CIRCUIT", "exercise_seconds")),
            reps=to_int(item.get("reps")),
        )
        for item in _as_dict_items(_pick(raw, "exercises", "sequence"))
    ]
    if not exercises:
        exercises = [CircuitExercise(
            name=default_for("CIRCUIT", "exercise_name"),
            seconds=default_for("CIRCUIT", "exercise_seconds"),
        )]
    return CircuitBlock(
        rounds=_repeat_count(_pick(raw, "rounds", "sets"), default_for("CIRCUIT", "rounds")),
        exercises=exercises,
        rest_between_rounds_seconds=_non_negative_seconds(
            _pick(raw, "rest_between_rounds_seconds", "rest_between_rounds", "rest_seconds", "rest"),
            default_for("CIRCUIT", "rest_between_rounds_seconds"),
        ),
    )


def _coerce_interval(raw: Dict[str, Any], text: str, canonical: bool = False) -> IntervalBlock:
    """
    A canonical block's sequence is kept as given; an archetype block's
    sequence goes through the rest-folding rectifier.
    """
    sets = _repeat_count(_pick(raw, "sets", "rounds"), default_for("INTERVAL", "sets"))
    raw_sequence = _pick(raw, "sequence", "exercises")
    if canonical:
        sequence = validate_sequence(raw_sequence)
    else:
        sequence = rectify_sequence(raw_sequence, text)

    if sequence:
        return IntervalBlock(
            sets=sets,
            work_seconds=_positive_seconds(_pick(raw, "work_seconds", "work"), sequence[0].seconds),
            rest_seconds=_non_negative_seconds(_pick(raw, "rest_seconds", "rest"), 0),
            sequence=sequence,
        )
    if isinstance(raw_sequence, list) and raw_sequence:
        raise NormalizationError(f"Sequence of {len(raw_sequence)} items has no usable exercise")
    return IntervalBlock(
        sets=sets,
        work_seconds=_positive_seconds(_pick(raw, "work_seconds", "work"), default_for("INTERVAL", "work_seconds")),
        rest_seconds=_non_negative_seconds(_pick(raw, "rest_seconds", "rest"), default_for("INTERVAL", "rest_seconds")),
    )


_BLOCK_COERCERS: Dict[str, Callable[[Dict[str, Any], str], Block]] = {
    "EMOM": _coerce_emom,
    "TABATA": _coerce_tabata,
    "CIRCUIT": _coerce_circuit,
}


def coerce_block(raw: Any, text: str, canonical: bool = False) -> Block:
    """Repair one block-like dict into a typed block, filling archetype defaults.

    Args:
        raw: Block-like dict from the provider
        text: The user's workout text
        canonical: The block came from a canonical schedule, so an INTERVAL
            sequence is validated as given instead of rectified

    Raises:
        NormalizationError: If the block's archetype cannot be determined,
            a repeat count exceeds MAX_REPEATS, or a supplied sequence has no
            usable exercise
    """
    if not isinstance(raw, dict):
        raise NormalizationError(f"Block is not an object: {type(raw).__name__}")

    block_type = _type_tag(_pick(raw, "type", "workout_type", "mode"))
    if block_type is None:
        if isinstance(raw.get("instructions"), list):
            block_type = "EMOM"
        elif isinstance(_pick(raw, "sequence", "exercises"), list):
            block_type = "INTERVAL"
        else:
            raise NormalizationError(f"Block has no recognised type: keys={sorted(raw)}")

    if block_type == "INTERVAL":
        return _coerce_interval(raw, text, canonical=canonical)
    return _BLOCK_COERCERS[block_type](raw, text)


# ---------------------------------------------------------------------------
# Shape converters
# ---------------------------------------------------------------------------


def _title(loose: Dict[str, Any], default: str) -> str:
    title = loose.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return default


def _from_timeline(loose: Dict[str, Any], text: str) -> Schedule:
    """Compress a flat timeline into one block using the first round only."""
    events = _as_dict_items(loose.get("timeline"))

    def kind(event: Dict[str, Any]) -> str:
        return str(event.get("kind") or "").lower()

    work_events = [e for e in events if kind(e) == "work"]
    if not work_events:
        raise NormalizationError("Timeline has no work events")

    rounds_seen = [r for r in (positive_int(e.get("round"), 0) for e in events) if r]
    round_rests = [e for e in events if kind(e) == "round_rest"]

    if round_rests:
        if rounds_seen:
            rounds = _bounded(max(rounds_seen))
            first_round = min(rounds_seen)
            first_works = [e for e in work_events if positive_int(e.get("round"), 0) == first_round]
        else:
            rounds = _bounded(len(round_rests) + 1)
            cut = events.index(round_rests[0])
            first_works = [e for e in events[:cut] if kind(e) == "work"]
        first_works = first_works or work_events

        block: Block = CircuitBlock(
            rounds=rounds,
            exercises=[
                CircuitExercise(
                    name=_item_name(e, default_for("CIRCUIT", "exercise_name")),
                    seconds=_item_seconds(e, default_for("CIRCUIT", "exercise_seconds")),
                )
                for e in first_works
            ],
            rest_between_rounds_seconds=_non_negative_seconds(
                _pick(round_rests[0], "seconds", "duration", "duration_seconds"), 0
            ),
        )
    else:
        rest_events = [e for e in events if kind(e) == "rest"]
        block = IntervalBlock(
            sets=_bounded(max(rounds_seen) if rounds_seen else len(work_events)),
            work_seconds=_item_seconds(work_events[0], default_for("INTERVAL", "work_seconds")),
            rest_seconds=_non_negative_seconds(
                _pick(rest_events[0], "seconds", "duration", "duration_seconds"), 0
            ) if rest_events else 0,
        )

    return build_schedule(
        _title(loose, "Workout"),
        [block],
        used_ai=True,
        inferred_mode=block.type,
        notes="compressed from timeline",
    )


def _from_canonical(loose: Dict[str, Any], text: str) -> Schedule:
    blocks: List[Block] = []
    for index, raw in enumerate(loose.get("blocks") or []):
        try:
            blocks.append(coerce_block(raw, text, canonical=True))
        except NormalizationError as e:
            logger.warning(f"Skipping block {index}: {e}")
    if not blocks:
        raise NormalizationError("No usable blocks in canonical response")

    modes = list(dict.fromkeys(b.type for b in blocks))
    return build_schedule(
        _title(loose, "Workout"),
        blocks,
        used_ai=True,
        inferred_mode="+".join(modes),
    )


def _from_archetype(loose: Dict[str, Any], text: str) -> Schedule:
    block = coerce_block(loose, text)
    return build_schedule(
        _title(loose, f"{block.type.title()} Workout"),
        [block],
        used_ai=True,
        inferred_mode=block.type,
        notes="single archetype object",
    )


def _first_block(loose: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    blocks = loose.get("blocks")
    if isinstance(blocks, list) and blocks and isinstance(blocks[0], dict):
        return blocks[0]
    return None


def _from_exercise_list(loose: Dict[str, Any], text: str) -> Schedule:
    container = _first_block(loose)
    if container is None or not isinstance(container.get("exercises"), list):
        container = loose

    sequence = rectify_sequence(container.get("exercises"), text)
    if not sequence:
        raise NormalizationError("Exercise list is empty")

    sets = _repeat_count(
        _pick(container, "sets", "rounds") or _pick(loose, "sets", "rounds"),
        default_for("INTERVAL", "sets"),
    )
    block = IntervalBlock(sets=sets, work_seconds=sequence[0].seconds, rest_seconds=0, sequence=sequence)
    return build_schedule(
        _title(loose, "Interval Workout"),
        [block],
        used_ai=True,
        inferred_mode="INTERVAL",
        notes="exercise list",
    )


def _from_text_cues(loose: Any, text: str) -> Schedule:
    """Ignore the response entirely and rebuild from EMOM/Tabata cues in the text."""
    schedule = _emom.extract(text) or _tabata.extract(text)
    if schedule is None:
        raise NormalizationError("Text cue present but extraction declined")
    return schedule.model_copy(update={
        "debug": schedule.debug.model_copy(update={
            "notes": "provider response not recognised; rebuilt from text cues",
        }),
    })


_CONVERTERS: Dict[ShapeKind, Callable[[Any, str], Schedule]] = {
    ShapeKind.TIMELINE: _from_timeline,
    ShapeKind.CANONICAL: _from_canonical,
    ShapeKind.ARCHETYPE: _from_archetype,
    ShapeKind.EXERCISE_LIST: _from_exercise_list,
    ShapeKind.TEXT_CUE: _from_text_cues,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def detect_shape(loose: Any, original_text: str) -> Optional[ShapeKind]:
    """Classify the loose object. Order matters: the first match wins."""
    text = original_text or ""
    if isinstance(loose, dict):
        timeline = loose.get("timeline")
        if isinstance(timeline, list) and timeline:
            return ShapeKind.TIMELINE

        if isinstance(loose.get("title"), str) and isinstance(loose.get("blocks"), list):
            return ShapeKind.CANONICAL

        if _type_tag(loose.get("type")):
            return ShapeKind.ARCHETYPE

        first = _first_block(loose)
        if first is not None and isinstance(first.get("exercises"), list):
            return ShapeKind.EXERCISE_LIST
        if _type_tag(_pick(loose, "workout_type", "type")) == "INTERVAL" and isinstance(loose.get("exercises"), list):
            return ShapeKind.EXERCISE_LIST

    if _emom.CUE_PATTERN.search(text) or _tabata.CUE_PATTERN.search(text):
        return ShapeKind.TEXT_CUE
    return None


def normalize(loose: Any, original_text: str) -> Optional[Schedule]:
    """
    Map a provider response onto the canonical schedule.

    Args:
        loose: Parsed provider JSON (any shape)
        original_text: The user's workout text

    Returns:
        Schedule with recomputed totals, or None when no dialect matched or
        conversion failed
    """
    text = original_text or ""
    shape = None
    try:
        shape = detect_shape(loose, text)
        if shape is None:
            keys = sorted(loose) if isinstance(loose, dict) else type(loose).__name__
            logger.warning(f"Unrecognised response shape: {keys}")
            return None
        return _CONVERTERS[shape](loose, text)
    except Exception as e:
        logger.warning(f"Normalization failed for shape {shape}: {e}")
        return None
