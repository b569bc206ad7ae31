"""In-memory cosine similarity search over a caller-supplied chunk list."""

import math
from typing import List, Sequence

import numpy as np

from interview_eval.models.chunk import Chunk, RetrievalResult
from interview_eval.utils.errors import DimensionMismatchError
from interview_eval.utils.logging import get_logger

logger = get_logger("vector_index")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors, in [-1, 1].

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    with np.errstate(invalid="ignore", over="ignore"):
        norm_product = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
        if norm_product == 0.0:
            return 0.0
        similarity = float(np.dot(va, vb)) / norm_product
    if not math.isfinite(similarity):
        return similarity
    return max(-1.0, min(1.0, similarity))


def find_similar_chunks(
    query_vector: Sequence[float],
    chunks: Sequence[Chunk],
    k: int = 3,
) -> List[RetrievalResult]:
    """
    Rank chunks by cosine similarity to the query and keep the top ``k``.

    Non-finite similarities (malformed stored embeddings) are dropped. Ties
    keep the original chunk order.

    Raises:
        DimensionMismatchError: If a chunk embedding differs in length from the query
    """
    if not chunks or k <= 0:
        return []

    scored = []
    for index, chunk in enumerate(chunks):
        similarity = cosine_similarity(query_vector, chunk.embedding)
        if not math.isfinite(similarity):
            logger.warning(f"Skipping chunk {index}: non-finite similarity")
            continue
        scored.append((index, chunk, similarity))

    # sorted() is stable, so equal scores stay in chunk order
    scored = sorted(scored, key=lambda item: item[2], reverse=True)

    return [
        RetrievalResult(chunk_index=index, chunk=chunk, similarity_score=similarity)
        for index, chunk, similarity in scored[:k]
    ]
