## Pydantic schemas for requests, roadmaps and study tools
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, conint, field_validator, model_validator

MAX_CHUNK_SIZE = 30
MAX_ALLOWED_DAYS = 60
DEFAULT_DURATION = 30

ResourceType = Literal["doc", "video", "blog", "tool", "other"]
RESOURCE_TYPES = ("doc", "video", "blog", "tool", "other")


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    goal: str = Field(min_length=1)
    total_days: conint(ge=1, le=MAX_ALLOWED_DAYS)
    details: str | None = None

    @field_validator("goal")
    @classmethod
    def _goal_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("goal must not be blank")
        return v


class ChunkRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_day: conint(ge=1)
    end_day: conint(ge=1)

    @model_validator(mode="after")
    def _ordered(self) -> "ChunkRange":
        if self.end_day < self.start_day:
            raise ValueError(f"end_day {self.end_day} precedes start_day {self.start_day}")
        return self

    @property
    def length(self) -> int:
        return self.end_day - self.start_day + 1

    def __contains__(self, day: int) -> bool:
        return self.start_day <= day <= self.end_day


class Resource(BaseModel):
    type: ResourceType = "other"
    title: str
    url: str


class Topic(BaseModel):
    day: conint(ge=1)
    topic: str = Field(min_length=1)
    content: str = ""
    resources: List[Resource] = Field(default_factory=list)


class Roadmap(BaseModel):
    title: str
    topics: List[Topic]


class QuizQuestion(BaseModel):
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: str

    @model_validator(mode="after")
    def _answer_is_an_option(self) -> "QuizQuestion":
        if self.correct_answer not in self.options:
            raise ValueError("correct_answer must match one of the options")
        return self


class Quiz(BaseModel):
    topic: str
    questions: List[QuizQuestion] = Field(min_length=1)


class Flashcard(BaseModel):
    term: str = Field(min_length=1)
    definition: str = Field(min_length=1)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, v):
        # the frontend labels tutor turns "assistant" or "model"
        return "user" if v == "user" else "assistant"
