from typing import List

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from mockinterview.config.settings import logger, LLM_MAX_ATTEMPTS, QUESTION_COUNT, REQUEST_TIMEOUT_SECONDS
from mockinterview.exceptions import LanguageModelError
from mockinterview.services.llm import invoke_with_retry

QUESTION_PROMPT = """Based on the following Job Description, generate exactly {question_count} technical or behavioral interview questions.
Return the questions as a single string, with each question on its own line.

Job Description:
\"\"\"
{job_description}
\"\"\""""


def split_questions(blob: str) -> List[str]:
    return [line.strip() for line in blob.splitlines() if line.strip()]


class QuestionGenerator:

    def __init__(
        self,
        llm: BaseChatModel,
        question_count: int = QUESTION_COUNT,
        attempts: int = LLM_MAX_ATTEMPTS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        self.question_count = question_count
        self.attempts = attempts
        self.timeout = timeout
        prompt = ChatPromptTemplate.from_messages([("system", QUESTION_PROMPT)])
        self.chain = prompt | llm | StrOutputParser()

    async def generate(self, job_description: str) -> str:
        """Raw model output, one question per line."""
        blob = await invoke_with_retry(
            self.chain,
            {"question_count": self.question_count, "job_description": job_description},
            attempts=self.attempts,
            timeout=self.timeout,
            operation="generate_questions",
        )
        if not split_questions(blob or ""):
            logger.error(f"Question generation returned no questions: {blob!r}")
            raise LanguageModelError("Language model returned no interview questions")
        return blob.strip()
