"""Interview question generation from a job description."""

import re
from typing import Optional

from interview_eval.config import LLMSettings, RetrySettings, get_settings
from interview_eval.providers.base import ModelProvider, classify_provider_error
from interview_eval.utils.errors import (
    GenerationError,
    GenerationFailureReason,
    ProviderError,
    TransientProviderError,
    ValidationError,
)
from interview_eval.utils.logging import get_logger
from interview_eval.utils.retry import retry_transient

logger = get_logger("question_generator")

MIN_QUESTIONS = 2
MAX_QUESTIONS = 10

_NUMBERED_LINE = re.compile(r"^\s*\d+\.\s*\S", re.MULTILINE)


def build_question_prompt(jd_text: str, num_questions: int) -> str:
    """Build the question generation prompt. Deterministic for its inputs."""
    technical_count = num_questions - 1
    return f"""You are a professional technical interviewer. Based on the following job description, generate exactly {num_questions} relevant interview questions.

Job Description:
{jd_text.strip()}

Requirements:
- Generate exactly {num_questions} questions total
- First {technical_count} question(s) should be TECHNICAL/ROLE-SPECIFIC based on the job requirements and technologies mentioned
- The LAST question (question {num_questions}) MUST be a BEHAVIORAL question about teamwork, leadership, problem-solving, or conflict resolution
- Make technical questions specific to the role and technologies mentioned in the job description
- Keep all questions clear, concise, and realistic
- Number the questions 1. through {num_questions}.
- Format EXACTLY as: "1. [Question text]" on separate lines

Generate the questions now:"""


def failure_reason_for(error: ProviderError) -> GenerationFailureReason:
    """Map a provider failure to the reason shown to the user."""
    status = error.provider_status
    text = error.message.lower()
    if error.details.get("invalid_config"):
        return GenerationFailureReason.INVALID_CONFIG
    if error.details.get("quota_exceeded") or "quota" in text:
        return GenerationFailureReason.QUOTA_EXCEEDED
    if status == 429:
        return GenerationFailureReason.RATE_LIMITED
    if status == 503 or "overloaded" in text:
        return GenerationFailureReason.OVERLOADED
    if status == 404:
        return GenerationFailureReason.MODEL_UNAVAILABLE
    if status == 400:
        return GenerationFailureReason.INVALID_REQUEST
    if status in (401, 403):
        return GenerationFailureReason.INVALID_CONFIG
    if isinstance(error, TransientProviderError):
        return GenerationFailureReason.OVERLOADED
    return GenerationFailureReason.UNKNOWN


class QuestionGenerator:
    """Generate a numbered interview question list for a job description."""

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

    async def generate(self, jd_text: str, num_questions: int = 3) -> str:
        """
        Generate interview questions from job description text.

        The result is the raw model text; parsing it is the caller's job.

        Args:
            jd_text: Job description text
            num_questions: Number of questions, 2 to 10

        Returns:
            The generated question text, stripped

        Raises:
            ValidationError: If jd_text is empty or num_questions is out of range
            GenerationError: If the completion call fails or returns blank text
        """
        if not jd_text or not jd_text.strip():
            raise ValidationError("Job description text is required")
        if not MIN_QUESTIONS <= num_questions <= MAX_QUESTIONS:
            raise ValidationError(
                f"Number of questions must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}",
                details={"num_questions": num_questions},
            )

        prompt = build_question_prompt(jd_text, num_questions)

        try:
            text = await retry_transient(
                lambda: self.provider.complete(
                    prompt,
                    temperature=self.llm_settings.question_temperature,
                    max_tokens=self.llm_settings.question_max_tokens,
                ),
                retry_settings=self.retry_settings,
                sleep=self._sleep,
            )
        except Exception as e:
            error = classify_provider_error(e)
            reason = failure_reason_for(error)
            logger.error(
                f"Question generation failed: {error.message}",
                extra={"reason": reason.value, "provider_status": error.provider_status},
            )
            raise GenerationError(reason=reason, details={"cause": error.message}) from e

        if not text or not text.strip():
            logger.error("Question generation returned an empty response")
            raise GenerationError(reason=GenerationFailureReason.EMPTY_RESPONSE)

        if not _NUMBERED_LINE.search(text):
            logger.warning("Response does not contain properly formatted questions")

        logger.info(f"Generated questions: requested={num_questions}, chars={len(text)}")
        return text.strip()

