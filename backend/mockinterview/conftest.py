import copy
from types import SimpleNamespace

import pytest
import pytest_asyncio
from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from mockinterview.services.answer_evaluator import AnswerEvaluator
from mockinterview.services.chat_service import ChatService
from mockinterview.services.document_service import DocumentService
from mockinterview.services.document_store import DocumentStore
from mockinterview.services.embedder import Embedder
from mockinterview.services.question_generator import QuestionGenerator
from mockinterview.services.session_store import SessionStore

QUESTIONS = (
    "Describe a time you resolved a production incident.\n"
    "\n"
    "How would you design a rate limiter for a public API?\n"
    "What trade-offs do you weigh when choosing a database?"
)


# In-memory stand-in for the subset of the motor collection API the stores use.

class FakeCursor:
    def __init__(self, rows):
        self.rows = rows

    def sort(self, key, direction=1):
        self.rows = sorted(self.rows, key=lambda row: row[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return self.rows if length is None else self.rows[:length]


class FakeCollection:
    def __init__(self):
        self.rows = []
        self._next_id = 0

    @staticmethod
    def _matches(row, query):
        return all(row.get(key) == value for key, value in query.items())

    @staticmethod
    def _project(row, projection):
        row = copy.deepcopy(row)
        for key, include in (projection or {}).items():
            if not include:
                row.pop(key, None)
        return row

    async def insert_one(self, document):
        self._next_id += 1
        row = copy.deepcopy(document)
        row["_id"] = self._next_id
        self.rows.append(row)
        return SimpleNamespace(inserted_id=self._next_id)

    async def find_one(self, query, projection=None, sort=None):
        rows = [row for row in self.rows if self._matches(row, query)]
        for key, direction in reversed(sort or []):
            rows = sorted(rows, key=lambda row: row[key], reverse=direction < 0)
        return self._project(rows[0], projection) if rows else None

    def find(self, query, projection=None):
        return FakeCursor(
            [self._project(row, projection) for row in self.rows if self._matches(row, query)]
        )

    async def update_one(self, query, update):
        for row in self.rows:
            if self._matches(row, query):
                for key, value in update.get("$push", {}).items():
                    row.setdefault(key, []).extend(copy.deepcopy(value["$each"]))
                for key, value in update.get("$inc", {}).items():
                    row[key] = row.get(key, 0) + value
                for key, value in update.get("$set", {}).items():
                    row[key] = value
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for index, row in enumerate(self.rows):
            if self._matches(row, query):
                del self.rows[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeStorage:
    def __init__(self):
        self.uploads = []

    async def upload(self, data, public_id, resource_type="raw", fmt="pdf"):
        self.uploads.append({"public_id": public_id, "size": len(data), "resource_type": resource_type})
        return f"https://files.example.test/ai-interview-prep/{public_id}.{fmt}"


class FailingEmbeddings(Embeddings):
    """Embedding backend that is always over quota."""

    def __init__(self):
        self.calls = 0

    def embed_documents(self, texts):
        self.calls += len(texts)
        raise RuntimeError("429 quota exceeded")

    def embed_query(self, text):
        self.calls += 1
        raise RuntimeError("429 quota exceeded")


class BrokenChatModel(FakeListChatModel):
    def _call(self, *args, **kwargs):
        raise RuntimeError("model unavailable")


def words(count, prefix="word"):
    return " ".join(f"{prefix}{i}" for i in range(count))


def decode_text(data: bytes) -> str:
    return data.decode("utf-8")


@pytest.fixture
def documents_collection():
    return FakeCollection()


@pytest.fixture
def chats_collection():
    return FakeCollection()


@pytest.fixture
def document_store(documents_collection):
    return DocumentStore(documents_collection)


@pytest.fixture
def session_store(chats_collection):
    return SessionStore(chats_collection)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def embedder():
    return Embedder(DeterministicFakeEmbedding(size=16), timeout=5)


@pytest.fixture
def document_service(document_store, storage, embedder):
    return DocumentService(document_store, storage, embedder, extract_text=decode_text)


@pytest.fixture
def make_chat_service(session_store, document_store, embedder):
    def _make(evaluations=("SCORE: 7\nFEEDBACK: Good answer.",), questions=QUESTIONS):
        return ChatService(
            session_store,
            document_store,
            QuestionGenerator(FakeListChatModel(responses=[questions]), attempts=1, timeout=5),
            AnswerEvaluator(embedder, FakeListChatModel(responses=list(evaluations)), attempts=1, timeout=5),
        )
    return _make


@pytest.fixture
def chat_service(make_chat_service):
    return make_chat_service()


@pytest_asyncio.fixture
async def uploaded(document_service):
    """A résumé of two chunks and a job description of one chunk for user-1."""
    resume = await document_service.upload(
        "user-1", "resume.pdf", "application/pdf", words(600, "skill").encode(), "resume"
    )
    jd = await document_service.upload(
        "user-1", "jd.pdf", "application/pdf", words(40, "req").encode(), "jd"
    )
    return resume, jd
