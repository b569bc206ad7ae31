"""Chunk and retrieval models."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """A slice of extracted document text paired with its embedding."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, description="Chunk text content")
    embedding: List[float] = Field(..., description="Embedding vector for the chunk text")


class RetrievalResult(BaseModel):
    """One ranked hit from a similarity search. Not persisted."""

    chunk_index: int = Field(..., ge=0, description="Position of the chunk in the searched list")
    chunk: Chunk = Field(..., description="Matched chunk")
    similarity_score: float = Field(..., ge=-1.0, le=1.0, description="Cosine similarity to the query")
