"""Single source of default values for every schedule-building path.

Extractors, the response normalizer and the safe fallback all read from
ARCHETYPE_DEFAULTS so a default cannot drift between code paths.
"""
from typing import Any, Dict

ARCHETYPE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "EMOM": {
        "minutes": 20,
        "instruction_name": "Work",
    },
    "TABATA": {
        "rounds": 8,
        "work_seconds": 20,
        "rest_seconds": 10,
        "exercise": "Work",
    },
    "CIRCUIT": {
        "rounds": 3,
        "exercise_name": "Work",
        "exercise_seconds": 30,
        "rest_between_rounds_seconds": 0,
    },
    "INTERVAL": {
        "sets": 8,
        "work_seconds": 40,
        "rest_seconds": 20,
    },
    # Sequence Rectifier
    "SEQUENCE": {
        "item_name": "Work",
        "item_seconds": 20,
        "forced_rest_seconds": 15,
    },
    # HIIT-sequence extractor
    "HIIT": {
        "round_rest_seconds": 30,
    },
    # ":45 WORK // :15 REST" pattern extractor
    "WORK_REST": {
        "work_seconds": 45,
        "exercise_rest_seconds": 15,
        "round_rest_seconds": 150,
    },
}

# Terminal fallback: 20 x (40s work / 20s rest) = 20 minutes
SAFE_DEFAULT_TITLE = "Interval Workout"
SAFE_DEFAULT_SETS = 20
SAFE_DEFAULT_WORK_SECONDS = 40
SAFE_DEFAULT_REST_SECONDS = 20

# Upper bounds on anything that is expanded per repeat. Rounds, sets and EMOM
# minutes above MAX_REPEATS are rejected, as is a schedule longer than
# MAX_TOTAL_MINUTES; every timeline event lasts at least one second, so the
# expanded timeline stays under MAX_TOTAL_MINUTES * 60 events.
MAX_REPEATS = 200
MAX_TOTAL_MINUTES = 300

# Halfway cue thresholds
HALFWAY_MIN_TOTAL_MINUTES = 10
HALFWAY_MIN_REPEATS = 6


def default_for(archetype: str, field: str) -> Any:
    """Look up a default value, e.g. default_for("TABATA", "rounds") -> 8."""
    return ARCHETYPE_DEFAULTS[archetype.upper()][field]
