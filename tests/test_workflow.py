import pytest

from conftest import ScriptedLLM, chunk_json

from roadmapai.agents.llm.base import Deadline, UpstreamStatusError
from roadmapai.agents.resources import _is_valid_absolute
from roadmapai.agents.schemas import GenerationRequest
from roadmapai.agents.workflow import RoadmapDegraded, RoadmapReady, generate_roadmap


def _replies_for(total_days):
    replies = []
    start = 1
    while start <= total_days:
        end = min(start + 29, total_days)
        replies.append(chunk_json(start, end))
        start = end + 1
    return replies


@pytest.mark.parametrize("total_days", [1, 7, 30, 31, 45, 60])
def test_every_day_present_exactly_once(total_days):
    llm = ScriptedLLM(_replies_for(total_days))
    outcome = generate_roadmap(GenerationRequest(goal="Learn Python", total_days=total_days), llm)

    assert isinstance(outcome, RoadmapReady)
    assert [t.day for t in outcome.roadmap.topics] == list(range(1, total_days + 1))
    assert outcome.roadmap.title == "Python in Practice"


def test_total_failure_still_yields_full_roadmap():
    llm = ScriptedLLM([UpstreamStatusError(503)] * 20)
    outcome = generate_roadmap(GenerationRequest(goal="Learn Python", total_days=45), llm)

    assert isinstance(outcome, RoadmapDegraded)
    assert "days 1-30" in outcome.reason and "days 31-45" in outcome.reason
    topics = outcome.roadmap.topics
    assert [t.day for t in topics] == list(range(1, 46))
    assert all(t.topic.startswith(f"Day {t.day}: Learn Python ") for t in topics)
    assert all(len(t.resources) >= 2 for t in topics)
    assert all(_is_valid_absolute(r.url) for t in topics for r in t.resources)
    # 2 chunks x 4 attempts
    assert len(llm.calls) == 8


def test_failed_second_chunk_keeps_first_chunk_content():
    llm = ScriptedLLM([chunk_json(1, 30)] + [UpstreamStatusError(500)] * 4)
    outcome = generate_roadmap(GenerationRequest(goal="Learn Python", total_days=60), llm)

    assert isinstance(outcome, RoadmapDegraded)
    topics = outcome.roadmap.topics
    assert topics[0].topic == "Python topic number 1"
    assert topics[59].topic == "Day 60: Learn Python Advanced Techniques"


def test_non_retryable_error_degrades_chunk_without_retry():
    llm = ScriptedLLM([UpstreamStatusError(400, "bad"), chunk_json(31, 40)])
    outcome = generate_roadmap(GenerationRequest(goal="Learn Python", total_days=40), llm)

    assert isinstance(outcome, RoadmapDegraded)
    assert "400" in outcome.reason
    assert outcome.roadmap.topics[30].topic == "Python topic number 31"


def test_second_prompt_carries_tail_of_first_chunk():
    llm = ScriptedLLM(_replies_for(60))
    generate_roadmap(GenerationRequest(goal="Learn Python", total_days=60), llm)

    first, second = llm.prompts
    assert "just finished" not in first
    assert "Day 29: Python topic number 29" in second
    assert "Day 30: Python topic number 30" in second
    assert "days 31 to 60" in second


def test_partial_chunk_is_backfilled():
    llm = ScriptedLLM([chunk_json(1, 4)])
    outcome = generate_roadmap(GenerationRequest(goal="Learn Python", total_days=7), llm)

    assert isinstance(outcome, RoadmapReady)
    titles = [t.topic for t in outcome.roadmap.topics]
    assert titles[:4] == [f"Python topic number {d}" for d in range(1, 5)]
    assert titles[4:] == [
        "Day 5: Learn Python Intermediate Concepts",
        "Day 6: Learn Python Advanced Techniques",
        "Day 7: Learn Python Advanced Techniques",
    ]


def test_garbage_output_falls_back_without_raising():
    llm = ScriptedLLM(["I'm sorry, I can't help with that."])
    outcome = generate_roadmap(GenerationRequest(goal="Learn Python", total_days=3), llm)

    assert isinstance(outcome, RoadmapReady)
    assert outcome.roadmap.title == "Learn Python Learning Path (3 Days)"
    assert len(outcome.roadmap.topics) == 3


def test_expired_deadline_skips_generation(clock):
    deadline = Deadline(10, clock=clock)
    clock.advance(11)
    llm = ScriptedLLM(_replies_for(60))

    outcome = generate_roadmap(GenerationRequest(goal="Learn Python", total_days=60), llm, deadline)

    assert isinstance(outcome, RoadmapDegraded)
    assert llm.calls == []
    assert len(outcome.roadmap.topics) == 60
