"""
Interview chat pipeline.

A session owns the question list produced when it starts. The question
being answered is derived from the persisted turns: each scored assistant
turn moves the pointer forward by one, so clients never choose it.
"""

from typing import List, Optional

from mockinterview.config.settings import logger
from mockinterview.decorators.timing import async_timing
from mockinterview.exceptions import (
    InterviewCompleteError,
    NotFoundError,
    ValidationError,
)
from mockinterview.models.models import (
    ChatSession,
    ChatSummary,
    DocumentKind,
    DocumentMeta,
    Role,
    Turn,
)
from mockinterview.services.answer_evaluator import AnswerEvaluator
from mockinterview.services.document_store import DocumentStore
from mockinterview.services.question_generator import QuestionGenerator, split_questions
from mockinterview.services.session_store import SessionStore

SESSION_STARTED = "Chat session started."


class ChatService:

    def __init__(
        self,
        sessions: SessionStore,
        documents: DocumentStore,
        question_generator: QuestionGenerator,
        evaluator: AnswerEvaluator,
    ):
        self.sessions = sessions
        self.documents = documents
        self.question_generator = question_generator
        self.evaluator = evaluator

    async def _pick_document(
        self, user_id: str, kind: DocumentKind, document_id: Optional[str]
    ) -> Optional[DocumentMeta]:
        if document_id is None:
            return await self.documents.latest(user_id, kind)
        document = await self.documents.get_owned(document_id, user_id)
        if document.kind != kind:
            raise ValidationError(
                f"Document {document_id} is not a {kind.value}", field=f"{kind.value}_id"
            )
        return document

    @async_timing
    async def start(
        self, user_id: str, resume_id: Optional[str] = None, jd_id: Optional[str] = None
    ) -> ChatSession:
        resume = await self._pick_document(user_id, DocumentKind.RESUME, resume_id)
        jd = await self._pick_document(user_id, DocumentKind.JOB_DESCRIPTION, jd_id)
        if resume is None or jd is None:
            raise NotFoundError("Resume and/or JD not found. Please upload both.")

        questions_blob = await self.question_generator.generate(jd.text)
        session = ChatSession(
            user_id=user_id,
            resume_id=resume.id,
            jd_id=jd.id,
            questions=split_questions(questions_blob),
            turns=[
                Turn(role=Role.SYSTEM, content=SESSION_STARTED),
                Turn(role=Role.ASSISTANT, content=questions_blob),
            ],
        )
        await self.sessions.create(session)
        logger.info(f"Started chat {session.id} with {len(session.questions)} questions for user {user_id}")
        return session

    @async_timing
    async def query(
        self, user_id: str, chat_id: str, message: str, question: Optional[str] = None
    ) -> Turn:
        if not message or not message.strip():
            raise ValidationError("Answer must not be empty", field="message")

        async with self.sessions.lock(chat_id):
            session = await self.sessions.get_owned(chat_id, user_id)
            current = session.current_question
            if current is None:
                raise InterviewCompleteError(chat_id)
            if question is not None and question.strip() != current:
                raise ValidationError(
                    "Answered question does not match the current interview question",
                    field="question",
                    details={"question_index": session.question_index},
                )

            resume = await self.documents.find_owned(session.resume_id, user_id)
            if resume is None:
                raise NotFoundError("Resume not found for this chat")

            evaluation = await self.evaluator.evaluate(current, message, resume.chunks)
            assistant_turn = Turn(
                role=Role.ASSISTANT, content=evaluation.feedback, score=evaluation.score
            )
            await self.sessions.append_turns(
                session, [Turn(role=Role.USER, content=message), assistant_turn]
            )
        logger.info(
            f"Chat {chat_id}: question {session.question_index}/{len(session.questions)} "
            f"scored {assistant_turn.score}"
        )
        return assistant_turn

    async def get(self, user_id: str, chat_id: str) -> ChatSession:
        return await self.sessions.get_owned(chat_id, user_id)

    async def list_sessions(self, user_id: str) -> List[ChatSummary]:
        return await self.sessions.list_for_user(user_id)
