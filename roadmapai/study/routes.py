# Quiz, flashcard and tutor endpoints
import json
import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from roadmapai.deps import BadRequest, get_llm, get_optional_llm
from roadmapai.agents.llm.base import GenerationError, LLMClient
from roadmapai.agents.schemas import ChatMessage
from roadmapai.agents.study_tools import (
    StudyToolError,
    generate_flashcards,
    generate_quiz,
    generate_tutor_reply,
    placeholder_flashcards,
    tutorial_events,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class QuizBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str | None = None
    topic_id: str | None = Field(default=None, alias="topicId")
    roadmap_id: str | None = Field(default=None, alias="roadmapId")


class FlashcardsBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str | None = None
    content: str | None = None
    user_id: str | None = Field(default=None, alias="userId")


class TutorBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic_id: str | None = Field(default=None, alias="topicId")
    topic_title: str | None = Field(default=None, alias="topicTitle")
    message: str | None = None
    history: list[ChatMessage] = []


class TutorContentBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic_id: str | None = Field(default=None, alias="topicId")
    topic_title: str | None = Field(default=None, alias="topicTitle")


@router.options("/generate-quiz")
@router.options("/generate-flashcards")
@router.options("/generate-tutor-response")
@router.options("/generate-tutor-content")
def study_preflight():
    return Response(status_code=200)


@router.post("/generate-quiz")
def create_quiz(body: QuizBody, llm: LLMClient = Depends(get_llm)):
    if not body.topic or not body.topic.strip():
        raise BadRequest("Missing required parameter: topic")

    logger.info("Generating quiz for topic %r (topic_id=%s)", body.topic, body.topic_id)
    try:
        quiz = generate_quiz(llm, body.topic.strip())
    except (GenerationError, StudyToolError) as e:
        logger.warning("Quiz generation failed for %r: %s", body.topic, e)
        return JSONResponse({"error": str(e) or "Failed to generate quiz"}, status_code=500)

    return JSONResponse({"quiz": quiz.model_dump()})


@router.post("/generate-flashcards")
def create_flashcards(body: FlashcardsBody, llm: LLMClient | None = Depends(get_optional_llm)):
    if not body.topic or not body.topic.strip():
        raise BadRequest("Topic is required")

    if llm is None:
        reason = "API key not configured"
        return JSONResponse(
            {"error": reason, "flashcards": [c.model_dump() for c in placeholder_flashcards(reason)]}
        )

    try:
        cards = generate_flashcards(llm, body.topic.strip(), body.content)
    except (GenerationError, StudyToolError) as e:
        logger.warning("Flashcard generation failed for %r: %s", body.topic, e)
        return JSONResponse(
            {"error": str(e), "flashcards": [c.model_dump() for c in placeholder_flashcards(str(e))]}
        )

    return JSONResponse({"flashcards": [c.model_dump() for c in cards]})


@router.post("/generate-tutor-response")
def create_tutor_response(body: TutorBody, llm: LLMClient = Depends(get_llm)):
    if not body.topic_title or not body.message:
        raise BadRequest("Missing required parameters")

    try:
        reply = generate_tutor_reply(llm, body.topic_title, body.message, body.history)
    except GenerationError as e:
        logger.warning("Tutor response failed for %r: %s", body.topic_title, e)
        return JSONResponse({"error": str(e)}, status_code=500)

    return JSONResponse({"success": True, "response": reply})


def _sse(event: dict) -> str:
    return f"data: {json.dumps(event)}\n\n"


@router.post("/generate-tutor-content")
def create_tutor_content(body: TutorContentBody, llm: LLMClient | None = Depends(get_optional_llm)):
    # Errors before the stream opens are 500s; later ones arrive as an error event
    if not body.topic_title or not body.topic_title.strip():
        return JSONResponse({"error": "Missing topic title"}, status_code=500)
    if llm is None:
        return JSONResponse({"error": "Missing generation API key"}, status_code=500)

    logger.info("Streaming tutorial for %r (topic_id=%s)", body.topic_title, body.topic_id)
    events = tutorial_events(llm, body.topic_title.strip())
    return StreamingResponse(
        (_sse(e) for e in events),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
