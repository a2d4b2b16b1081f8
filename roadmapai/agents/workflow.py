# roadmapai/agents/workflow.py
import logging
from dataclasses import dataclass
from typing import Union

from roadmapai.agents.chunks import plan_chunks
from roadmapai.agents.llm.base import Deadline, GenerationError, LLMClient
from roadmapai.agents.prompts import SYSTEM_PLANNER, build_chunk_prompt
from roadmapai.agents.reconciler import (
    ChunkResult,
    RoadmapDraft,
    extract_chunk,
    failed_chunk,
    finalize_roadmap,
    fold_chunk,
)
from roadmapai.agents.schemas import ChunkRange, GenerationRequest, Roadmap

logger = logging.getLogger(__name__)

CHUNK_TEMPERATURE = 0.2
CHUNK_MAX_TOKENS = 8192


@dataclass(frozen=True)
class RoadmapReady:
    roadmap: Roadmap


@dataclass(frozen=True)
class RoadmapDegraded:
    roadmap: Roadmap
    reason: str


GenerationOutcome = Union[RoadmapReady, RoadmapDegraded]


def generate_chunk(
    llm: LLMClient,
    request: GenerationRequest,
    chunk: ChunkRange,
    chunk_index: int,
    draft: RoadmapDraft,
    deadline: Deadline | None = None,
) -> ChunkResult:
    if deadline is not None and deadline.expired:
        return failed_chunk(chunk, "request deadline exceeded before generation")

    prompt = build_chunk_prompt(request, chunk, chunk_index, draft.topics[-2:])
    try:
        text = llm.generate_text(
            system=SYSTEM_PLANNER,
            user=prompt,
            temperature=CHUNK_TEMPERATURE,
            max_tokens=CHUNK_MAX_TOKENS,
            deadline=deadline,
        )
    except GenerationError as e:
        logger.warning(
            "Generation failed for days %d-%d: %s", chunk.start_day, chunk.end_day, e
        )
        return failed_chunk(chunk, str(e))

    return extract_chunk(text, chunk, request.goal)


def generate_roadmap(
    request: GenerationRequest,
    llm: LLMClient,
    deadline: Deadline | None = None,
) -> GenerationOutcome:
    chunks = plan_chunks(request.total_days)
    logger.info(
        "Generating %d-day roadmap for %r in %d chunk(s)",
        request.total_days,
        request.goal,
        len(chunks),
    )

    draft = RoadmapDraft()
    for index, chunk in enumerate(chunks):
        result = generate_chunk(llm, request, chunk, index, draft, deadline)
        logger.info(
            "Chunk %d/%d (days %d-%d): %s",
            index + 1,
            len(chunks),
            chunk.start_day,
            chunk.end_day,
            "failed" if result.failed else f"{len(result.topics)} topic(s)",
        )
        draft = fold_chunk(draft, result, request)

    roadmap = finalize_roadmap(draft, request)
    if draft.failures:
        return RoadmapDegraded(
            roadmap=roadmap,
            reason="Some days use generic content because generation failed for "
            + "; ".join(draft.failures),
        )
    return RoadmapReady(roadmap=roadmap)
