"""Batched answer evaluation with resume grounding."""

import re
from typing import List, Optional, Sequence

from interview_eval.config import LLMSettings, RetrySettings, get_settings
from interview_eval.models.interview import (
    Evaluation,
    EvaluationBatch,
    EvaluationStatus,
    QAPair,
)
from interview_eval.providers.base import ModelProvider
from interview_eval.utils.errors import EvaluationUnavailable, ValidationError
from interview_eval.utils.logging import get_logger
from interview_eval.utils.retry import retry_transient

logger = get_logger("answer_evaluator")

NEUTRAL_SCORE = 5
MIN_SCORE = 1
MAX_SCORE = 10

NO_CONTEXT_PLACEHOLDER = "No resume context available"
MISSING_FEEDBACK = (
    "Good effort. Consider providing more specific details and examples in your answers."
)
PADDED_FEEDBACK = (
    "Unable to generate detailed feedback for this question. Your answer has been noted."
)
UNAVAILABLE_FEEDBACK = (
    "Unable to evaluate at this time due to technical issues. "
    "Please try again later or contact support if the problem persists."
)

_BLOCK_DELIMITER = re.compile(r"Question\s*\d+\s*:", re.IGNORECASE)
_RELEVANCE = re.compile(r"Relevance[^:\n]*:\s*\**\s*(\d+)", re.IGNORECASE)
_CORRECTNESS = re.compile(r"Correctness[^:\n]*:\s*\**\s*(\d+)", re.IGNORECASE)
_OVERALL = re.compile(r"Overall[^:\n]*:\s*\**\s*(\d+)", re.IGNORECASE)
# Greedy up to the first blank line, or to the end of the block
_FEEDBACK = re.compile(r"Feedback[^:\n]*:\s*(.+?)(?=\n\s*\n|\s*$)", re.IGNORECASE | re.DOTALL)


def clamp_score(value: int) -> int:
    """Clamp a score into [1, 10]."""
    return max(MIN_SCORE, min(MAX_SCORE, value))


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def neutral_evaluation(feedback: str) -> Evaluation:
    """A midpoint evaluation used when the model gave no usable scores."""
    return Evaluation(
        relevance_score=NEUTRAL_SCORE,
        correctness_score=NEUTRAL_SCORE,
        overall_score=NEUTRAL_SCORE,
        feedback=feedback,
        is_fallback=True,
    )


def build_evaluation_prompt(pairs: Sequence[QAPair], resume_context: str) -> str:
    """Build the single prompt that evaluates every question/answer pair."""
    qa_text = "\n\n".join(
        f"Question {idx}: {pair.question}\nCandidate's Answer: {pair.answer}"
        for idx, pair in enumerate(pairs, start=1)
    )
    return f"""You are an expert interview evaluator. Evaluate the candidate's responses to ALL interview questions with DETAILED SCORING.

Interview Questions and Answers:
{qa_text}

Relevant Context from Candidate's Resume:
{resume_context}

Task:
For EACH question, provide THREE separate scores (1-10 scale where 10 is excellent):

1. **Relevance Score** (1-10): How relevant is the answer to the question asked?
2. **Correctness Score** (1-10): How accurate/correct is the technical content or reasoning?
3. **Overall Score** (1-10): Combined assessment of the response quality

Then provide constructive feedback (maximum 100 words per answer) that:
- Highlights what the candidate did well
- Points out areas for improvement
- Considers the candidate's resume context
- Gives specific, actionable advice

Format your response EXACTLY as follows for EACH of the {len(pairs)} questions:

Question 1:
Relevance: [number]/10
Correctness: [number]/10
Overall: [number]/10
Feedback: [your detailed feedback here]

Question 2:
Relevance: [number]/10
Correctness: [number]/10
Overall: [number]/10
Feedback: [your detailed feedback here]

[Continue for all questions...]

Evaluate now:"""


def parse_evaluation_block(block: str) -> Evaluation:
    """
    Parse one "Question N:" block.

    Missing relevance or correctness default to 5, a missing overall score
    to the rounded mean of the other two. All scores are clamped to [1, 10].
    """
    relevance_match = _RELEVANCE.search(block)
    correctness_match = _CORRECTNESS.search(block)
    overall_match = _OVERALL.search(block)
    feedback_match = _FEEDBACK.search(block)

    relevance = int(relevance_match.group(1)) if relevance_match else NEUTRAL_SCORE
    correctness = int(correctness_match.group(1)) if correctness_match else NEUTRAL_SCORE
    if overall_match:
        overall = int(overall_match.group(1))
    else:
        overall = _round_half_up((relevance + correctness) / 2)

    feedback = feedback_match.group(1).strip() if feedback_match else ""

    return Evaluation(
        relevance_score=clamp_score(relevance),
        correctness_score=clamp_score(correctness),
        overall_score=clamp_score(overall),
        feedback=feedback or MISSING_FEEDBACK,
    )


def parse_evaluation_blocks(text: str) -> List[Evaluation]:
    """Split a model response into per-question blocks and parse each."""
    text = text or ""
    blocks = [b for b in _BLOCK_DELIMITER.split(text) if b.strip()]
    # Anything before the first "Question N:" is preamble, not an evaluation
    if _BLOCK_DELIMITER.search(text) and not _BLOCK_DELIMITER.match(text.lstrip()):
        blocks = blocks[1:]
    return [parse_evaluation_block(block) for block in blocks]


def reconcile(evaluations: List[Evaluation], expected: int) -> EvaluationBatch:
    """Pad with neutral evaluations or truncate so there is one per question."""
    status = EvaluationStatus.COMPLETE
    if len(evaluations) < expected:
        logger.warning(f"Evaluation returned {len(evaluations)} blocks for {expected} questions; padding")
        status = EvaluationStatus.PARTIAL
        evaluations = evaluations + [
            neutral_evaluation(PADDED_FEEDBACK) for _ in range(expected - len(evaluations))
        ]
    elif len(evaluations) > expected:
        logger.warning(f"Evaluation returned {len(evaluations)} blocks for {expected} questions; truncating")
        evaluations = evaluations[:expected]
    return EvaluationBatch(evaluations=evaluations, status=status)


class AnswerEvaluator:
    """
    Score every answer of an interview in one completion call.

    Provider outages do not propagate: after retries are exhausted every
    answer gets a neutral evaluation and the batch is marked unavailable.
    """

    def __init__(
        self,
        provider: ModelProvider,
        llm_settings: Optional[LLMSettings] = None,
        retry_settings: Optional[RetrySettings] = None,
        sleep=None,
    ):
        settings = get_settings()
        self.provider = provider
        self.llm_settings = llm_settings or settings.llm
        self.retry_settings = retry_settings or settings.retry
        self._sleep = sleep

    async def _complete(self, prompt: str) -> str:
        text = await retry_transient(
            lambda: self.provider.complete(
                prompt,
                temperature=self.llm_settings.evaluation_temperature,
                max_tokens=self.llm_settings.evaluation_max_tokens,
            ),
            retry_settings=self.retry_settings,
            sleep=self._sleep,
        )
        if not text or not text.strip():
            raise EvaluationUnavailable("Empty evaluation response")
        return text

    async def evaluate(self, pairs: Sequence[QAPair], resume_context: str) -> EvaluationBatch:
        """
        Evaluate all question/answer pairs against the resume context.

        Args:
            pairs: Question/answer pairs in question order
            resume_context: Retrieved resume snippets (placeholder used if blank)

        Returns:
            One evaluation per pair, in input order

        Raises:
            ValidationError: If no pairs are given
        """
        if not pairs:
            raise ValidationError("No questions and answers provided for evaluation")

        if not resume_context or not resume_context.strip():
            logger.warning("No resume context provided for evaluation")
            resume_context = NO_CONTEXT_PLACEHOLDER

        prompt = build_evaluation_prompt(pairs, resume_context)
        logger.info(f"Evaluating answers: count={len(pairs)}, context_chars={len(resume_context)}")

        try:
            text = await self._complete(prompt)
        except Exception as e:
            # Any failure degrades to neutral scores
            logger.error(
                f"Evaluation unavailable, returning neutral scores: {e}",
                extra={"pairs": len(pairs), "error_type": type(e).__name__},
            )
            return EvaluationBatch(
                evaluations=[neutral_evaluation(UNAVAILABLE_FEEDBACK) for _ in pairs],
                status=EvaluationStatus.UNAVAILABLE,
            )

        batch = reconcile(parse_evaluation_blocks(text), len(pairs))
        logger.info(f"Evaluation complete: count={len(batch.evaluations)}, status={batch.status.value}")
        return batch
