# roadmapai/generation/routes.py
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from roadmapai.deps import BadRequest, get_deadline, get_llm
from roadmapai.agents.llm.base import Deadline, LLMClient
from roadmapai.agents.reconciler import fallback_roadmap
from roadmapai.agents.schemas import DEFAULT_DURATION, MAX_ALLOWED_DAYS, GenerationRequest
from roadmapai.agents.workflow import GenerationOutcome, RoadmapDegraded, generate_roadmap

logger = logging.getLogger(__name__)

router = APIRouter()


class RoadmapGenerationBody(BaseModel):
    goal: str | None = None
    duration: Annotated[float, Field(allow_inf_nan=False)] | None = None
    description: str | None = None


def clamp_duration(duration: float | None) -> int:
    """Requested days as an int in 1..MAX_ALLOWED_DAYS; larger values are clamped."""
    if duration is None:
        return DEFAULT_DURATION
    days = int(duration)
    if days < 1:
        raise BadRequest("duration must be at least 1 day")
    return min(days, MAX_ALLOWED_DAYS)


def roadmap_payload(outcome: GenerationOutcome) -> dict:
    payload = {"roadmap": outcome.roadmap.model_dump()}
    if isinstance(outcome, RoadmapDegraded):
        payload["error"] = outcome.reason
    return payload


@router.options("/generate-roadmap")
def roadmap_preflight():
    return Response(status_code=200)


@router.post("/generate-roadmap")
def create_roadmap(
    body: RoadmapGenerationBody,
    llm: LLMClient = Depends(get_llm),
    deadline: Deadline = Depends(get_deadline),
):
    if not body.goal or not body.goal.strip():
        raise BadRequest("Missing required parameter: goal")

    request = GenerationRequest(
        goal=body.goal,
        total_days=clamp_duration(body.duration),
        details=(body.description or "").strip() or None,
    )
    logger.info(
        "Received request to generate roadmap for %r with duration %d days",
        request.goal,
        request.total_days,
    )

    try:
        outcome = generate_roadmap(request, llm, deadline)
    except Exception as e:
        logger.exception("Error in generate-roadmap for %r", request.goal)
        return JSONResponse(
            {
                "error": f"Failed to generate roadmap: {type(e).__name__}: {e}",
                "roadmap": fallback_roadmap(request).model_dump(),
            }
        )

    return JSONResponse(roadmap_payload(outcome))
