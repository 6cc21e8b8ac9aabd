"""Data models for workout timer schedules."""
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from workout_timer_api.services.defaults import MAX_REPEATS, MAX_TOTAL_MINUTES

UserLevel = Literal["beginner", "intermediate", "advanced"]
TimelineKind = Literal["work", "rest", "round_rest", "prep", "cooldown"]

BLOCK_TYPES = ("EMOM", "TABATA", "CIRCUIT", "INTERVAL")


class EmomInstruction(BaseModel):
    """One EMOM instruction, optionally bound to odd or even minutes."""
    minute_mod: Optional[Literal["odd", "even"]] = None
    name: str


class EmomBlock(BaseModel):
    """Every Minute On the Minute: one instruction at the top of each minute."""
    type: Literal["EMOM"] = "EMOM"
    minutes: int = Field(..., gt=0, le=MAX_REPEATS)
    instructions: List[EmomInstruction] = Field(..., min_length=1)


class TabataBlock(BaseModel):
    """Fixed work/rest rounds of a single exercise."""
    type: Literal["TABATA"] = "TABATA"
    rounds: int = Field(..., gt=0, le=MAX_REPEATS)
    work_seconds: int = Field(..., gt=0)
    rest_seconds: int = Field(..., ge=0)
    exercise: str = "Work"


class CircuitExercise(BaseModel):
    name: str
    seconds: int = Field(..., gt=0)
    reps: Optional[int] = None


class CircuitBlock(BaseModel):
    """
    Rounds of an ordered exercise list.

    Rest between rounds is applied rounds - 1 times (never after the final round).
    """
    type: Literal["CIRCUIT"] = "CIRCUIT"
    rounds: int = Field(..., gt=0, le=MAX_REPEATS)
    exercises: List[CircuitExercise] = Field(..., min_length=1)
    rest_between_rounds_seconds: int = Field(default=0, ge=0)


class SequenceItem(BaseModel):
    name: str
    seconds: int = Field(..., gt=0)
    rest_after_seconds: Optional[int] = Field(default=None, ge=0)


class IntervalBlock(BaseModel):
    """
    Work/rest sets.

    When `sequence` is populated the block is a sequenced interval: each set runs
    the full sequence and the items' own trailing rests replace `rest_seconds`.
    """
    type: Literal["INTERVAL"] = "INTERVAL"
    sets: int = Field(..., gt=0, le=MAX_REPEATS)
    work_seconds: int = Field(..., gt=0)
    rest_seconds: int = Field(default=0, ge=0)
    sequence: Optional[List[SequenceItem]] = None

    @property
    def is_sequenced(self) -> bool:
        return bool(self.sequence)


Block = Annotated[
    Union[EmomBlock, TabataBlock, CircuitBlock, IntervalBlock],
    Field(discriminator="type"),
]


class Cues(BaseModel):
    """Audible/visual cue flags for the playback client."""
    start: bool = True
    halfway: bool = False
    last_round: bool = True
    tts: bool = True


class DebugInfo(BaseModel):
    """Diagnostic metadata. Not part of the playback contract."""
    used_ai: bool
    inferred_mode: str
    notes: Optional[str] = None


class Schedule(BaseModel):
    """Canonical workout-timer schedule."""
    title: str
    total_minutes: int = Field(..., gt=0, le=MAX_TOTAL_MINUTES)
    blocks: List[Block] = Field(..., min_length=1)
    cues: Cues = Field(default_factory=Cues)
    debug: DebugInfo


class TimelineEvent(BaseModel):
    """One pre-expanded timed event."""
    kind: TimelineKind
    label: str
    seconds: int = Field(..., ge=0)
    round: Optional[int] = None
    index: Optional[int] = None


class TimelineResponse(BaseModel):
    """Schedule expanded into a flat event timeline."""
    title: str
    total_seconds: int
    timeline: List[TimelineEvent] = Field(default_factory=list)
    debug: Optional[DebugInfo] = None


class UserProfile(BaseModel):
    level: Optional[UserLevel] = None

    class Config:
        extra = "ignore"

    @field_validator("level", mode="before")
    @classmethod
    def _drop_unknown_level(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and value.lower() in ("beginner", "intermediate", "advanced"):
            return value.lower()
        return None


class GenerateRequest(BaseModel):
    """Body of POST /generate."""
    text: str = ""
    user: Optional[UserProfile] = None

    class Config:
        extra = "ignore"

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("user", mode="before")
    @classmethod
    def _drop_invalid_user(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, UserProfile)) else None

    @property
    def level(self) -> Optional[str]:
        return self.user.level if self.user else None


class Envelope(BaseModel):
    """Response envelope used by POST /generate/strict."""
    ok: bool
    data: Optional[Schedule] = None
    error: Optional[str] = None
