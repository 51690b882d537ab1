"""
RAG scoring of interview answers.

The answer is embedded, the closest résumé chunks are retrieved and the
language model is asked for a score and feedback. Model output is parsed
into a tagged result; a response that ignores the requested format still
produces feedback.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Union

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from mockinterview.config.settings import logger, LLM_MAX_ATTEMPTS, REQUEST_TIMEOUT_SECONDS, TOP_K
from mockinterview.exceptions import EmbeddingError
from mockinterview.models.models import Chunk
from mockinterview.services.embedder import Embedder
from mockinterview.services.llm import invoke_with_retry
from mockinterview.services.similarity import rank_chunks

DEFAULT_SCORE = 5.0
MIN_SCORE = 1.0
MAX_SCORE = 10.0
NO_CONTEXT = "No relevant resume context was found."

SCORE_PATTERN = re.compile(r"SCORE:\s*(\d+(?:\.\d+)?)")
FEEDBACK_PATTERN = re.compile(r"FEEDBACK:\s*(.*)", re.DOTALL)

EVALUATION_PROMPT = """You are an expert technical interviewer.
A candidate was asked the following question:
\"\"\"
{question}
\"\"\"

The candidate gave this answer:
\"\"\"
{answer}
\"\"\"

Here is the *only* context you have from their resume:
\"\"\"
{context}
\"\"\"

Please evaluate the candidate's answer based *only* on their response and the provided resume context.

Your response MUST be in this exact format:
SCORE: [Your score from 1-10]
FEEDBACK: [Your feedback in 100 words or less. Be constructive. Explain *why* you gave the score, referencing the resume context if possible.]
"""


@dataclass(frozen=True)
class ParsedEvaluation:
    score: float
    feedback: str
    raw_text: str


@dataclass(frozen=True)
class UnparsedEvaluation:
    raw_text: str

    @property
    def score(self) -> float:
        return DEFAULT_SCORE

    @property
    def feedback(self) -> str:
        return self.raw_text


EvaluationResult = Union[ParsedEvaluation, UnparsedEvaluation]


def parse_evaluation(raw_text: str) -> EvaluationResult:
    """Each marker falls back on its own: score to DEFAULT_SCORE, feedback to the raw text."""
    score_match = SCORE_PATTERN.search(raw_text)
    feedback_match = FEEDBACK_PATTERN.search(raw_text)
    if not score_match and not feedback_match:
        return UnparsedEvaluation(raw_text=raw_text)
    score = float(score_match.group(1)) if score_match else DEFAULT_SCORE
    score = min(max(score, MIN_SCORE), MAX_SCORE)
    feedback = feedback_match.group(1).strip() if feedback_match else raw_text
    return ParsedEvaluation(score=score, feedback=feedback or raw_text, raw_text=raw_text)


class AnswerEvaluator:

    def __init__(
        self,
        embedder: Embedder,
        llm: BaseChatModel,
        top_k: int = TOP_K,
        attempts: int = LLM_MAX_ATTEMPTS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        self.embedder = embedder
        self.top_k = top_k
        self.attempts = attempts
        self.timeout = timeout
        prompt = ChatPromptTemplate.from_messages([("system", EVALUATION_PROMPT)])
        self.chain = prompt | llm | StrOutputParser()

    async def retrieve_context(self, answer: str, resume_chunks: Sequence[Chunk]) -> List[str]:
        if not resume_chunks:
            return []
        try:
            query = await self.embedder.embed(answer)
        except EmbeddingError as ex:
            logger.warning(f"Answer embedding failed, evaluating without context: {ex}")
            return []
        return rank_chunks(
            query,
            [(chunk.text, chunk.embedding) for chunk in resume_chunks],
            top_k=self.top_k,
        )

    async def evaluate(self, question: str, answer: str, resume_chunks: Sequence[Chunk]) -> EvaluationResult:
        context = "\n\n".join(await self.retrieve_context(answer, resume_chunks))
        raw_text = await invoke_with_retry(
            self.chain,
            {"question": question, "answer": answer, "context": context or NO_CONTEXT},
            attempts=self.attempts,
            timeout=self.timeout,
            operation="evaluate_answer",
        )
        result = parse_evaluation(raw_text)
        if isinstance(result, UnparsedEvaluation):
            logger.warning("Evaluation response had no SCORE or FEEDBACK marker, using default score")
        return result
