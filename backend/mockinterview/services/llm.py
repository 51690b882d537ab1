import asyncio
from typing import Any, Dict

from langchain_core.runnables import Runnable
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential_jitter

from mockinterview.config.settings import logger, LLM_MAX_ATTEMPTS, REQUEST_TIMEOUT_SECONDS
from mockinterview.exceptions import LanguageModelError


async def invoke_with_retry(
    chain: Runnable,
    inputs: Dict[str, Any],
    attempts: int = LLM_MAX_ATTEMPTS,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
    operation: str = "llm",
) -> str:
    """Run a prompt chain with a per-call timeout, retrying with backoff up to `attempts` times."""
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(attempts, 1)),
            wait=wait_exponential_jitter(initial=1, max=10),
            before_sleep=lambda retry_state: logger.warning(
                f"{operation} - Retry {retry_state.attempt_number}/{attempts} "
                f"after {retry_state.outcome.exception()!r}"
            ),
            reraise=True,
        ):
            with attempt:
                return await asyncio.wait_for(chain.ainvoke(inputs), timeout=timeout)
    except Exception as ex:
        logger.error(f"{operation} - language model call failed: {ex!r}")
        raise LanguageModelError(
            "Language model request failed", {"operation": operation}
        ) from ex
