from typing import List

from mockinterview.config.settings import CHUNK_SIZE


def chunk_text(text: str, chunk_size: int = CHUNK_SIZE) -> List[str]:
    """Split text into consecutive chunks of at most chunk_size words."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    words = text.split()
    return [" ".join(words[i:i + chunk_size]) for i in range(0, len(words), chunk_size)]
