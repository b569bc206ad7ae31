"""Interview question, answer and evaluation models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from interview_eval.models.chunk import RetrievalResult


class Question(BaseModel):
    """A numbered interview question parsed from generated text."""

    number: int = Field(..., ge=1, description="1-based question number")
    text: str = Field(..., description="Question text")


class Answer(BaseModel):
    """A numbered answer parsed from a submitted answer batch."""

    number: int = Field(..., ge=1, description="1-based answer number")
    text: str = Field(..., description="Answer text")


class QAPair(BaseModel):
    """A question and the candidate's answer to it."""

    question: str
    answer: str


class Evaluation(BaseModel):
    """Scored feedback for one answer."""

    relevance_score: int = Field(..., ge=1, le=10)
    correctness_score: int = Field(..., ge=1, le=10)
    overall_score: int = Field(..., ge=1, le=10)
    feedback: str
    # True when the scores are neutral defaults rather than model output
    is_fallback: bool = False


class EvaluationStatus(str, Enum):
    """Outcome of one batched evaluation call."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    UNAVAILABLE = "unavailable"


class EvaluationBatch(BaseModel):
    """Evaluations for a batch of answers, in question order."""

    evaluations: List[Evaluation]
    status: EvaluationStatus = EvaluationStatus.COMPLETE

    @property
    def is_degraded(self) -> bool:
        """Whether any evaluation is a neutral default."""
        return self.status != EvaluationStatus.COMPLETE


class SessionScores(BaseModel):
    """Aggregate scores for a completed interview session."""

    final_score: Optional[float] = None
    average_relevance: Optional[float] = None
    average_correctness: Optional[float] = None


class ResumeChunkUsed(BaseModel):
    """Preview of a resume chunk that grounded the evaluation."""

    index: int = Field(..., ge=1, description="1-based rank")
    text: str = Field(..., description="Chunk text, truncated for display")
    similarity: float


class SubmissionResult(BaseModel):
    """Everything produced by one batch answer submission."""

    questions: List[Question]
    answers: List[Answer]
    evaluation: EvaluationBatch
    resume_chunks_used: List[ResumeChunkUsed] = Field(default_factory=list)
    scores: SessionScores

    @classmethod
    def preview_chunks(cls, results: List[RetrievalResult], max_chars: int = 200) -> List[ResumeChunkUsed]:
        """Build display previews of the retrieved resume chunks."""
        previews = []
        for rank, result in enumerate(results, start=1):
            text = result.chunk.text
            if len(text) > max_chars:
                text = text[:max_chars] + "..."
            previews.append(
                ResumeChunkUsed(
                    index=rank,
                    text=text,
                    similarity=round(result.similarity_score, 3),
                )
            )
        return previews
