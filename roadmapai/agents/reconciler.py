# roadmapai/agents/reconciler.py
"""
Turns raw model output into a structurally sound Roadmap.

Per chunk, extract_chunk parses (strictly, then leniently) and validates the
topics for that chunk's day range. fold_chunk threads each ChunkResult into an
immutable RoadmapDraft, and finalize_roadmap sorts, de-duplicates, backfills
and truncates so every day 1..total_days appears exactly once.
"""
import logging
import re
from dataclasses import dataclass

from roadmapai.agents.json_repair import extract_day_objects, parse_json_object, strip_code_fences
from roadmapai.agents.resources import coerce_resource, google_search_url, normalize_resources, youtube_search_url
from roadmapai.agents.schemas import ChunkRange, GenerationRequest, Roadmap, Topic

logger = logging.getLogger(__name__)

PHASES = ("Fundamentals", "Intermediate Concepts", "Advanced Techniques")

_PLACEHOLDER_TITLE = re.compile(
    r"^\s*(day\s*\d+\s*[:.\-]?\s*)?"
    r"(topic(\s+title)?(\s+for\s+day\s*\d+)?|continue\s+learning|tbd|todo|untitled|placeholder)?"
    r"\s*$",
    re.IGNORECASE,
)
_TITLE_FIELD = re.compile(r'"title"\s*:\s*"((?:\\.|[^"\\])*)"')


@dataclass(frozen=True)
class ChunkResult:
    chunk: ChunkRange
    topics: tuple[Topic, ...] = ()
    title: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RoadmapDraft:
    title: str | None = None
    topics: tuple[Topic, ...] = ()
    failures: tuple[str, ...] = ()


def is_placeholder_title(title: str) -> bool:
    return bool(_PLACEHOLDER_TITLE.match(title))


def phase_for_day(day: int, total_days: int) -> str:
    return PHASES[min(2, (day - 1) * 3 // total_days)]


def default_title(request: GenerationRequest) -> str:
    return f"{request.goal} Learning Path ({request.total_days} Days)"


def fallback_topic(day: int, request: GenerationRequest) -> Topic:
    phase = phase_for_day(day, request.total_days)
    query = f"{request.goal} {phase}"
    raw_resources = [
        {"type": "doc", "title": f"{query} tutorials", "url": google_search_url(query)},
        {"type": "video", "title": f"{query} video lessons", "url": youtube_search_url(query)},
    ]
    return Topic(
        day=day,
        topic=f"Day {day}: {request.goal} {phase}",
        content=(
            f"Continue building your {request.goal} skills with {phase.lower()}. "
            "Review what you covered on previous days and practice with a small exercise."
        ),
        resources=[coerce_resource(r, query) for r in raw_resources],
    )


def fallback_roadmap(request: GenerationRequest) -> Roadmap:
    return Roadmap(
        title=default_title(request),
        topics=[fallback_topic(d, request) for d in range(1, request.total_days + 1)],
    )


def _coerce_day(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        day = value
    elif isinstance(value, float) and value.is_integer():
        day = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        day = int(value.strip())
    else:
        return None
    return day if day >= 1 else None


def _lenient_title(text: str) -> str | None:
    # Only a "title" that precedes the topics array belongs to the roadmap;
    # later ones are resource titles.
    head = text.split('"topics"', 1)[0]
    m = _TITLE_FIELD.search(head)
    return m.group(1).strip() if m and m.group(1).strip() else None


def _align_days(topics: list[Topic], chunk: ChunkRange) -> list[Topic]:
    """Shift chunk-relative numbering (1..n) onto the chunk's real range."""
    if not topics or chunk.start_day == 1:
        return topics
    if any(t.day in chunk for t in topics):
        return topics
    if all(t.day <= chunk.length for t in topics):
        offset = chunk.start_day - 1
        return [t.model_copy(update={"day": t.day + offset}) for t in topics]
    return topics


def _build_topics(raw_topics: list, chunk: ChunkRange, goal: str) -> list[Topic]:
    topics: list[Topic] = []
    for index, raw in enumerate(raw_topics):
        if not isinstance(raw, dict):
            continue
        day = _coerce_day(raw.get("day"))
        if day is None:
            day = chunk.start_day + index
        title = str(raw.get("topic") or "").strip()
        if is_placeholder_title(title):
            logger.debug("Dropping day %d with placeholder title %r", day, title)
            continue
        content = raw.get("content")
        topics.append(
            Topic(
                day=day,
                topic=title,
                content=content.strip() if isinstance(content, str) else "",
                resources=normalize_resources(raw.get("resources"), title, goal),
            )
        )
    return _align_days(topics, chunk)


def extract_chunk(text: str, chunk: ChunkRange, goal: str) -> ChunkResult:
    """Parse one chunk's generated text. Never raises for malformed output."""
    title = None
    raw_topics: list = []

    data = parse_json_object(text)
    if data is not None:
        if isinstance(data.get("title"), str) and data["title"].strip():
            title = data["title"].strip()
        if isinstance(data.get("topics"), list):
            raw_topics = data["topics"]

    if not raw_topics:
        cleaned = strip_code_fences(text)
        raw_topics = extract_day_objects(cleaned)
        if title is None:
            title = _lenient_title(cleaned)
        logger.info(
            "Strict parse failed for days %d-%d; recovered %d day object(s) leniently",
            chunk.start_day,
            chunk.end_day,
            len(raw_topics),
        )

    topics = [t for t in _build_topics(raw_topics, chunk, goal) if t.day in chunk]
    return ChunkResult(chunk=chunk, topics=tuple(topics), title=title)


def failed_chunk(chunk: ChunkRange, reason: str) -> ChunkResult:
    return ChunkResult(chunk=chunk, error=reason)


def fold_chunk(draft: RoadmapDraft, result: ChunkResult, request: GenerationRequest) -> RoadmapDraft:
    chunk = result.chunk
    failures = draft.failures
    if result.failed:
        topics = tuple(fallback_topic(d, request) for d in range(chunk.start_day, chunk.end_day + 1))
        failures = failures + (f"days {chunk.start_day}-{chunk.end_day}: {result.error}",)
    else:
        topics = result.topics

    title = draft.title
    if chunk.start_day == 1 and result.title:
        title = result.title

    return RoadmapDraft(title=title, topics=draft.topics + topics, failures=failures)


def finalize_roadmap(draft: RoadmapDraft, request: GenerationRequest) -> Roadmap:
    total = request.total_days

    by_day: dict[int, Topic] = {}
    for t in sorted(draft.topics, key=lambda t: t.day):
        if t.day <= total and t.day not in by_day:
            by_day[t.day] = t

    missing = [d for d in range(1, total + 1) if d not in by_day]
    if missing:
        logger.info("Synthesizing %d fallback day(s) for %r", len(missing), request.goal)

    topics = sorted([*by_day.values(), *(fallback_topic(d, request) for d in missing)], key=lambda t: t.day)
    return Roadmap(title=draft.title or default_title(request), topics=topics[:total])
