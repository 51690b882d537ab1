from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentKind(str, Enum):
    RESUME = "resume"
    JOB_DESCRIPTION = "job_description"

    @classmethod
    def parse(cls, value: str) -> "DocumentKind":
        value = value.strip().lower()
        if value == "jd":
            return cls.JOB_DESCRIPTION
        return cls(value)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Chunk(BaseModel):
    text: str
    embedding: List[float] = Field(default_factory=list)  # empty when embedding failed


class DocumentMeta(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=_new_id)
    user_id: str
    kind: DocumentKind
    file_name: str
    file_url: str
    chunks: List[Chunk] = Field(default_factory=list)
    embedding_failed: bool = False
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def text(self) -> str:
        return " ".join(chunk.text for chunk in self.chunks)

    def summary(self) -> dict:
        data = self.model_dump(mode="json", exclude={"chunks"})
        data["chunk_count"] = len(self.chunks)
        return data


class DocumentSummary(BaseModel):
    """Projection of a stored document without its chunks."""
    model_config = ConfigDict(use_enum_values=True)

    id: str
    user_id: str
    kind: DocumentKind
    file_name: str
    file_url: str
    embedding_failed: bool = False
    created_at: datetime


class Turn(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    role: Role
    content: str
    score: Optional[float] = None

    @field_validator("score")
    @classmethod
    def score_in_range(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not 1 <= value <= 10:
            raise ValueError("score must be between 1 and 10")
        return value


class ChatSession(BaseModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    resume_id: str
    jd_id: str
    questions: List[str] = Field(default_factory=list)
    turns: List[Turn] = Field(default_factory=list)
    version: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def question_index(self) -> int:
        """Number of answers already scored, i.e. the pointer to the next question."""
        return sum(
            1 for turn in self.turns
            if turn.role == Role.ASSISTANT and turn.score is not None
        )

    @property
    def current_question(self) -> Optional[str]:
        if self.question_index >= len(self.questions):
            return None
        return self.questions[self.question_index]

    def public(self) -> dict:
        data = self.model_dump(mode="json", exclude={"version"})
        data["question_index"] = self.question_index
        data["completed"] = self.current_question is None
        return data


class ChatSummary(BaseModel):
    id: str
    resume_id: str
    jd_id: str
    questions: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# Request bodies

class ChatStartRequest(BaseModel):
    resume_id: Optional[str] = None
    jd_id: Optional[str] = None


class ChatQueryRequest(BaseModel):
    chat_id: str
    message: str = Field(min_length=1)
    question: Optional[str] = None
