from roadmapai.agents.prompts import (
    build_chunk_prompt,
    build_quiz_prompt,
    has_prior_experience,
    project_days,
)
from roadmapai.agents.schemas import ChunkRange, GenerationRequest, Topic


def _request(details=None, total_days=60):
    return GenerationRequest(goal="Learn Rust", total_days=total_days, details=details)


def test_experience_markers_are_case_insensitive():
    assert has_prior_experience("I have shipped two Go services")
    assert has_prior_experience("Familiar with C++ templates")
    assert has_prior_experience("experienced backend dev")
    assert not has_prior_experience("complete beginner")
    assert not has_prior_experience(None)


def test_project_days_within_chunk():
    assert project_days(ChunkRange(start_day=1, end_day=30)) == [7, 14, 21, 28]
    assert project_days(ChunkRange(start_day=31, end_day=60)) == [35, 42, 49, 56]
    assert project_days(ChunkRange(start_day=1, end_day=6)) == []


def test_prompt_targets_exact_day_range():
    prompt = build_chunk_prompt(_request(), ChunkRange(start_day=31, end_day=60), 1)

    assert "days 31 to 60" in prompt
    assert "31..60" in prompt
    assert "at least 2 resources" in prompt
    assert "Day(s) 35, 42, 49, 56" in prompt


def test_prompt_skips_beginner_material_for_experienced_learners():
    novice = build_chunk_prompt(_request("new to programming"), ChunkRange(start_day=1, end_day=30), 0)
    expert = build_chunk_prompt(_request("I know Python well"), ChunkRange(start_day=1, end_day=30), 0)

    assert "Skip beginner material" not in novice
    assert "Skip beginner material" in expert
    assert "Learner details: I know Python well" in expert


def test_context_summary_uses_last_two_topics_after_first_chunk():
    previous = [
        Topic(day=d, topic=f"Ownership part {d}", content="", resources=[]) for d in (28, 29, 30)
    ]
    chunk = ChunkRange(start_day=31, end_day=60)

    first = build_chunk_prompt(_request(), chunk, 0, previous)
    later = build_chunk_prompt(_request(), chunk, 1, previous)

    assert "just finished" not in first
    assert "Day 29: Ownership part 29" in later
    assert "Day 30: Ownership part 30" in later
    assert "Ownership part 28" not in later


def test_quiz_prompt_mentions_topic_and_count():
    prompt = build_quiz_prompt("SQL joins", 5)
    assert '"SQL joins"' in prompt
    assert "5 multiple-choice questions" in prompt
