import asyncio
from typing import List, Optional, Tuple

from langchain_core.embeddings import Embeddings

from mockinterview.config.settings import logger, REQUEST_TIMEOUT_SECONDS
from mockinterview.exceptions import EmbeddingError
from mockinterview.models.models import Chunk


def normalize_whitespace(text: str) -> str:
    return text.replace("\n", " ")


class Embedder:
    """Turns text into vectors through a LangChain embeddings backend."""

    def __init__(
        self,
        embeddings: Embeddings,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        dimensions: Optional[int] = None,
    ):
        self.embeddings = embeddings
        self.timeout = timeout
        self.dimensions = dimensions

    async def embed(self, text: str) -> List[float]:
        try:
            vector = await asyncio.wait_for(
                self.embeddings.aembed_query(normalize_whitespace(text)),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as ex:
            raise EmbeddingError("Embedding request timed out", {"timeout": self.timeout}) from ex
        except Exception as ex:
            raise EmbeddingError("Failed to get embedding", {"reason": str(ex)}) from ex
        if self.dimensions is not None and len(vector) != self.dimensions:
            raise EmbeddingError(
                "Embedding has unexpected dimensionality",
                {"expected": self.dimensions, "actual": len(vector)},
            )
        return list(vector)

    async def embed_chunks(self, texts: List[str]) -> Tuple[List[Chunk], bool]:
        """
        Embed each chunk in order, one call per chunk.

        A chunk whose embedding fails keeps an empty vector; the second
        return value tells the caller that at least one chunk degraded.
        """
        chunks = []
        failed = False
        for index, text in enumerate(texts):
            try:
                embedding = await self.embed(text)
            except EmbeddingError as ex:
                logger.warning(f"Embedding skipped for chunk {index}: {ex}")
                embedding = []
                failed = True
            chunks.append(Chunk(text=text, embedding=embedding))
        return chunks, failed
