# roadmapai/agents/prompts.py
from typing import Sequence

from roadmapai.agents.schemas import ChunkRange, GenerationRequest, Topic

PROJECT_DAY_INTERVAL = 7
EXPERIENCE_MARKERS = ("i know", "i have", "familiar with", "experienced")

SYSTEM_PLANNER = """You are a curriculum planner building day-by-day study plans.

You must return ONLY valid JSON (no markdown, no code fences, no commentary).
The JSON must match the given schema exactly.
"""

SYSTEM_QUIZ = """You write multiple-choice quizzes for self-learners.
Return ONLY valid JSON. No markdown, no code fences, no commentary.
"""

SYSTEM_FLASHCARDS = """You write concise study flashcards.
Return ONLY valid JSON. No markdown, no code fences, no commentary.
"""


def has_prior_experience(details: str | None) -> bool:
    if not details:
        return False
    lowered = details.lower()
    return any(marker in lowered for marker in EXPERIENCE_MARKERS)


def project_days(chunk: ChunkRange) -> list[int]:
    first = -(-chunk.start_day // PROJECT_DAY_INTERVAL) * PROJECT_DAY_INTERVAL
    return list(range(first, chunk.end_day + 1, PROJECT_DAY_INTERVAL))


def _context_summary(previous_topics: Sequence[Topic]) -> str:
    tail = list(previous_topics)[-2:]
    if not tail:
        return ""
    covered = "\n".join(f"- Day {t.day}: {t.topic}" for t in tail)
    return f"""
The learner has just finished:
{covered}
Continue naturally from there. Do not repeat these topics.
""".strip()


def build_chunk_prompt(
    request: GenerationRequest,
    chunk: ChunkRange,
    chunk_index: int,
    previous_topics: Sequence[Topic] = (),
) -> str:
    lines = [
        f'Create part of a detailed learning roadmap for: "{request.goal}".',
        f"The full roadmap lasts {request.total_days} days.",
        f"Generate ONLY days {chunk.start_day} to {chunk.end_day} "
        f"({chunk.length} days), no more, no less.",
    ]
    if request.details:
        lines.append(f"Learner details: {request.details}")

    if chunk_index > 0:
        summary = _context_summary(previous_topics)
        if summary:
            lines.append(summary)

    lines.append(
        f"""
Output must be ONE STRICT JSON object matching this schema:
{{
  "title": "A descriptive and motivational title for the whole roadmap",
  "topics": [
    {{
      "day": {chunk.start_day},
      "topic": "Specific topic title",
      "content": "What to learn or build today and how it connects to the previous day",
      "resources": [
        {{"type": "doc", "title": "Documentation or article title", "url": "https://..."}},
        {{"type": "video", "title": "Video title", "url": "https://..."}}
      ]
    }}
  ]
}}
""".strip()
    )

    rules = [
        f'- "topics" must contain exactly {chunk.length} items with "day" numbers '
        f"{chunk.start_day}..{chunk.end_day}, no duplicates, in increasing order.",
        "- resource \"type\" is one of: doc, video, blog, tool, other.",
        "- Every day needs at least 2 resources with real, working URLs.",
        "- Every topic title must be specific and unique. Never use generic titles "
        'like "Day 5", "Continue Learning" or "Topic title".',
    ]
    if has_prior_experience(request.details):
        rules.append(
            "- The learner already has experience. Skip beginner material and start "
            "from intermediate concepts."
        )
    projects = project_days(chunk)
    if projects:
        days = ", ".join(str(d) for d in projects)
        rules.append(
            f"- Day(s) {days} must be a hands-on project that consolidates the previous week."
        )
    rules.append("- No trailing commas. The whole response must parse as JSON.")

    lines.append("Rules:\n" + "\n".join(rules))
    return "\n\n".join(lines)


def build_quiz_prompt(topic: str, question_count: int = 5) -> str:
    return f"""
Create a quiz with {question_count} multiple-choice questions about the topic: "{topic}".
Each question has exactly 4 options and exactly one correct answer.

Output must be STRICT JSON matching this schema:
{{
  "topic": "{topic}",
  "questions": [
    {{"question": "Question text?", "options": ["A", "B", "C", "D"], "correct_answer": "B"}}
  ]
}}

Rules:
- correct_answer must be exactly the same string as one of the options.
- Questions test different aspects of the topic, with varying difficulty.
- Questions are clear and unambiguous.
""".strip()


def build_flashcards_prompt(topic: str, content: str | None = None, card_count: int = 5) -> str:
    return f"""
Create {card_count} flashcards based on the following learning topic.

Topic title: {topic}
Topic content: {content or ""}

Output must be STRICT JSON matching this schema:
{{
  "flashcards": [
    {{"term": "The key term or concept", "definition": "A clear, concise explanation"}}
  ]
}}

The flashcards should be beginner-friendly and related only to this topic.
""".strip()


def tutor_system_prompt(topic_title: str) -> str:
    return f"""You are an expert AI tutor specializing in "{topic_title}".
Provide helpful, accurate, and educational responses to questions about this topic.
Use Markdown formatting (headings, code blocks, tables) where it helps.
Keep explanations clear, concise, and tailored to the student's level of understanding.
"""


def build_tutorial_prompt(topic_title: str) -> str:
    return f"""
You are an expert tutor helping learners understand the topic: "{topic_title}".

Write a concise, structured tutorial. Follow these rules:

1. If the topic is technical (e.g. programming, math):
   - Explain the core concepts clearly.
   - Include relevant code examples where they apply.
   - Keep it under 1000 words.

2. If the topic is non-technical (e.g. soft skills, history, goals):
   - Focus on practical insights and conceptual clarity.
   - Avoid code. Prefer bullet points and short paragraphs.
   - Keep it under 700 words.

End with a short summary of key takeaways.

Format the response in Markdown with headings, and give every code block a
language tag. DO NOT USE TABLES anywhere in the output.
""".strip()
