# roadmapai/agents/study_tools.py
import logging
import re
from typing import Iterator, Sequence

from pydantic import ValidationError

from roadmapai.agents.json_repair import parse_json_object
from roadmapai.agents.llm.base import GenerationError, LLMClient
from roadmapai.agents.prompts import (
    SYSTEM_FLASHCARDS,
    SYSTEM_QUIZ,
    build_flashcards_prompt,
    build_quiz_prompt,
    build_tutorial_prompt,
    tutor_system_prompt,
)
from roadmapai.agents.schemas import ChatMessage, Flashcard, Quiz, QuizQuestion

logger = logging.getLogger(__name__)

QUIZ_QUESTIONS = 5
FLASHCARD_COUNT = 5


class StudyToolError(Exception):
    """Model output could not be turned into a usable quiz or flashcard set."""


def _valid_items(raw: object, model) -> list:
    items = []
    for entry in raw if isinstance(raw, list) else []:
        try:
            items.append(model.model_validate(entry))
        except ValidationError as e:
            logger.debug("Dropping invalid %s: %s", model.__name__, e)
    return items


def generate_quiz(llm: LLMClient, topic: str) -> Quiz:
    text = llm.generate_text(
        system=SYSTEM_QUIZ,
        user=build_quiz_prompt(topic, QUIZ_QUESTIONS),
        temperature=0.7,
        max_tokens=4096,
    )
    data = parse_json_object(text)
    if data is None:
        raise StudyToolError("Failed to parse the generated quiz data")

    questions = _valid_items(data.get("questions"), QuizQuestion)
    if not questions:
        raise StudyToolError("Generated quiz has no valid questions")
    return Quiz(topic=topic, questions=questions[:QUIZ_QUESTIONS])


def generate_flashcards(llm: LLMClient, topic: str, content: str | None = None) -> list[Flashcard]:
    text = llm.generate_text(
        system=SYSTEM_FLASHCARDS,
        user=build_flashcards_prompt(topic, content, FLASHCARD_COUNT),
        temperature=0.7,
        max_tokens=1024,
    )
    data = parse_json_object(text)
    if data is None:
        raise StudyToolError("Failed to parse flashcards from API response")

    cards = _valid_items(data.get("flashcards"), Flashcard)
    if not cards:
        raise StudyToolError("Generated response contains no flashcards")
    return cards


def placeholder_flashcards(reason: str) -> list[Flashcard]:
    """Explanatory cards returned alongside an error so the UI still renders."""
    return [
        Flashcard(term="Error Occurred", definition="An error occurred while generating flashcards."),
        Flashcard(term="Details", definition=reason or "Unknown error"),
        Flashcard(term="Suggestion", definition="Please try again or use a different topic."),
    ]


def generate_tutor_reply(
    llm: LLMClient,
    topic_title: str,
    message: str,
    history: Sequence[ChatMessage] = (),
) -> str:
    return llm.generate_text(
        system=tutor_system_prompt(topic_title),
        user=message,
        history=history,
        temperature=0.7,
        max_tokens=2048,
    )


def generate_tutorial(llm: LLMClient, topic_title: str) -> str:
    """Markdown tutorial for a single roadmap topic."""
    return llm.generate_text(
        user=build_tutorial_prompt(topic_title),
        temperature=0.7,
        max_tokens=4096,
    )


def split_sections(markdown: str) -> list[str]:
    """Paragraph-sized pieces that concatenate back to the original text."""
    return [piece for piece in re.split(r"(?<=\n\n)", markdown) if piece]


def tutorial_events(llm: LLMClient, topic_title: str) -> Iterator[dict]:
    """
    Events for a streamed tutorial: one {"content": ...} per section, then
    {"done": True, "fullContent": ...}. A generation failure ends the stream
    with {"error": ...} instead.
    """
    try:
        text = generate_tutorial(llm, topic_title)
    except GenerationError as e:
        logger.warning("Tutorial generation failed for %r: %s", topic_title, e)
        yield {"error": str(e)}
        return

    for section in split_sections(text):
        yield {"content": section}
    yield {"done": True, "fullContent": text}
