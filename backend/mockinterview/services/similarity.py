import math
from typing import List, Sequence, Tuple

import numpy as np

from mockinterview.config.settings import TOP_K

LOWEST_SIMILARITY = -math.inf


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Empty, zero-magnitude or mismatched vectors (a failed embedding) get
    LOWEST_SIMILARITY instead of raising.
    """
    if len(a) == 0 or len(a) != len(b):
        return LOWEST_SIMILARITY
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0 or not np.isfinite(norm):
        return LOWEST_SIMILARITY
    return float(np.dot(va, vb) / norm)


def rank_chunks(
    query: Sequence[float],
    candidates: Sequence[Tuple[str, Sequence[float]]],
    top_k: int = TOP_K,
) -> List[str]:
    """Texts of the top_k candidates by descending similarity; ties keep input order."""
    scored = [(text, cosine_similarity(query, vector)) for text, vector in candidates]
    scored = sorted(scored, key=lambda item: item[1], reverse=True)
    return [text for text, _ in scored[:top_k]]
