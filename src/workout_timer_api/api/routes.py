"""API routes for workout timer generation."""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from workout_timer_api.models import Envelope, GenerateRequest, Schedule, TimelineResponse
from workout_timer_api.services.timeline import expand_schedule
from workout_timer_api.services.workout_generator import WorkoutGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


def get_generator() -> WorkoutGenerator:
    return WorkoutGenerator()


@router.get("/health")
def health():
    return {"ok": True}


@router.post("/generate", response_model=Schedule, response_model_exclude_none=True)
def generate(
    req: Optional[GenerateRequest] = Body(default=None),
    generator: WorkoutGenerator = Depends(get_generator),
):
    """Convert free text into a timer schedule. Always answers with a schedule."""
    req = req or GenerateRequest()
    return generator.generate(req.text, level=req.level)


@router.post("/generate/strict", response_model=Envelope, response_model_exclude_none=True)
def generate_strict(
    req: Optional[GenerateRequest] = Body(default=None),
    generator: WorkoutGenerator = Depends(get_generator),
):
    """Envelope variant: rejects blank text and reports internal failures."""
    req = req or GenerateRequest()
    if not req.text.strip():
        return JSONResponse(
            status_code=400,
            content=Envelope(ok=False, error="text is required").model_dump(exclude_none=True),
        )

    try:
        schedule = generator.generate(req.text, level=req.level)
    except Exception as e:
        logger.exception(f"Strict generation failed: {e}")
        return JSONResponse(
            status_code=500,
            content=Envelope(ok=False, error=f"Generation failed: {e}").model_dump(exclude_none=True),
        )
    return Envelope(ok=True, data=schedule)


@router.post("/generate/timeline", response_model=TimelineResponse, response_model_exclude_none=True)
def generate_timeline(
    req: Optional[GenerateRequest] = Body(default=None),
    generator: WorkoutGenerator = Depends(get_generator),
):
    """Generate a schedule and expand it into a flat event timeline."""
    req = req or GenerateRequest()
    schedule = generator.generate(req.text, level=req.level)
    return expand_schedule(schedule)
