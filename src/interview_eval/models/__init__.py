"""Pydantic models for documents, retrieval and interview evaluation."""

from interview_eval.models.chunk import Chunk, RetrievalResult
from interview_eval.models.document import (
    Document,
    DocumentKey,
    DocumentMetadata,
    DocumentType,
    ParsedDocument,
)
from interview_eval.models.interview import (
    Answer,
    Evaluation,
    EvaluationBatch,
    EvaluationStatus,
    QAPair,
    Question,
    ResumeChunkUsed,
    SessionScores,
    SubmissionResult,
)

__all__ = [
    "Answer",
    "Chunk",
    "Document",
    "DocumentKey",
    "DocumentMetadata",
    "DocumentType",
    "Evaluation",
    "EvaluationBatch",
    "EvaluationStatus",
    "ParsedDocument",
    "QAPair",
    "Question",
    "ResumeChunkUsed",
    "RetrievalResult",
    "SessionScores",
    "SubmissionResult",
]
