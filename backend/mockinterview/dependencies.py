"""
Service wiring.

Backend clients are built once at startup by `build_services` and kept on
`app.state`; route handlers receive them through the FastAPI dependencies
below.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, Request
from langchain_openai import ChatOpenAI, OpenAIEmbeddings
from motor.motor_asyncio import AsyncIOMotorClient

from mockinterview.config import settings
from mockinterview.exceptions import AuthenticationError
from mockinterview.services.answer_evaluator import AnswerEvaluator
from mockinterview.services.chat_service import ChatService
from mockinterview.services.document_service import DocumentService
from mockinterview.services.document_store import DocumentStore
from mockinterview.services.embedder import Embedder
from mockinterview.services.question_generator import QuestionGenerator
from mockinterview.services.session_store import SessionStore
from mockinterview.services.storage import CloudinaryStorage


@dataclass
class Services:
    document_service: DocumentService
    chat_service: ChatService
    mongo_client: Optional[AsyncIOMotorClient] = None

    def close(self) -> None:
        if self.mongo_client is not None:
            self.mongo_client.close()


def build_services() -> Services:
    mongo_client = AsyncIOMotorClient(settings.MONGO_URI)
    mongo_db = mongo_client[settings.MONGO_DB]
    documents = DocumentStore(mongo_db[settings.DOCUMENTS_COLLECTION])
    sessions = SessionStore(mongo_db[settings.CHATS_COLLECTION])

    embedder = Embedder(
        OpenAIEmbeddings(
            model=settings.EMBEDDING_MODEL_NAME,
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            max_retries=0,
        ),
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        dimensions=settings.EMBEDDING_DIMENSIONS,
    )
    llm = ChatOpenAI(
        model=settings.LLM_MODEL_NAME,
        api_key=settings.OPENAI_API_KEY,
        max_tokens=settings.LLM_MAX_TOKENS,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        max_retries=0,
    )
    storage = CloudinaryStorage(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        folder=settings.STORAGE_FOLDER,
    )

    return Services(
        document_service=DocumentService(documents, storage, embedder),
        chat_service=ChatService(
            sessions,
            documents,
            QuestionGenerator(llm),
            AnswerEvaluator(embedder, llm),
        ),
        mongo_client=mongo_client,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_document_service(request: Request) -> DocumentService:
    return get_services(request).document_service


def get_chat_service(request: Request) -> ChatService:
    return get_services(request).chat_service


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity, set by the authentication layer in front of this service."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Not authorized, no user")
    return x_user_id.strip()
