"""Interview orchestration: question generation and batch answer submission."""

from typing import List, Optional, Sequence, Tuple

from interview_eval.config import RetrievalSettings, get_settings
from interview_eval.models.chunk import RetrievalResult
from interview_eval.models.document import Document, DocumentKey, DocumentType
from interview_eval.models.interview import Evaluation, QAPair, SessionScores, SubmissionResult
from interview_eval.services.answer_evaluator import AnswerEvaluator
from interview_eval.services.document_repository import DocumentRepository
from interview_eval.services.embedding_service import EmbeddingService
from interview_eval.services.qa_parser import answer_format_message, parse_answers, parse_questions
from interview_eval.services.question_generator import QuestionGenerator
from interview_eval.services.vector_index import find_similar_chunks
from interview_eval.utils.errors import NotFoundError, ParseFailure, ValidationError
from interview_eval.utils.logging import ensure_request_id, get_logger

logger = get_logger("interview_service")

NO_RESUME_CONTEXT = "No resume context was available for this evaluation."
NO_MATCHING_SNIPPETS = "No relevant resume snippets found matching the answers."


def compute_session_scores(evaluations: Sequence[Evaluation]) -> SessionScores:
    """Mean overall, relevance and correctness scores, rounded to one decimal."""
    if not evaluations:
        return SessionScores()
    count = len(evaluations)
    return SessionScores(
        final_score=round(sum(e.overall_score for e in evaluations) / count, 1),
        average_relevance=round(sum(e.relevance_score for e in evaluations) / count, 1),
        average_correctness=round(sum(e.correctness_score for e in evaluations) / count, 1),
    )


def format_resume_context(results: Sequence[RetrievalResult]) -> str:
    """Number the retrieved snippets for the evaluation prompt."""
    return "\n\n".join(
        f"Resume Snippet {rank}:\n{result.chunk.text}" for rank, result in enumerate(results, start=1)
    )


class InterviewService:
    """Run one interview session against the stored resume and job description."""

    def __init__(
        self,
        repository: DocumentRepository,
        embedding_service: EmbeddingService,
        question_generator: QuestionGenerator,
        answer_evaluator: AnswerEvaluator,
        retrieval_settings: Optional[RetrievalSettings] = None,
    ):
        self.repository = repository
        self.embedding_service = embedding_service
        self.question_generator = question_generator
        self.answer_evaluator = answer_evaluator
        self.settings = retrieval_settings or get_settings().retrieval

    async def _session_document(
        self, owner_id: str, session_id: str, doc_type: DocumentType
    ) -> Optional[Document]:
        return await self.repository.get(
            DocumentKey(owner_id=owner_id, session_id=session_id, type=doc_type)
        )

    async def _resume_for(self, owner_id: str, session_id: str) -> Optional[Document]:
        """Session resume, falling back to the owner's global resume."""
        resume = await self._session_document(owner_id, session_id, DocumentType.RESUME)
        if resume is not None and resume.chunks:
            return resume

        logger.warning(f"Session-specific resume not found for {session_id}, checking for global resume")
        resume = await self.repository.get(
            DocumentKey(owner_id=owner_id, session_id=None, type=DocumentType.RESUME)
        )
        if resume is not None and resume.chunks:
            logger.info(f"Using global resume for session {session_id}")
            return resume
        return None

    def _jd_text(self, jd: Document) -> str:
        return jd.text[: self.settings.max_jd_chars]

    async def generate_questions(self, owner_id: str, session_id: str, num_questions: int = 3) -> str:
        """
        Generate interview questions from the session's job description.

        Both a resume and a job description must be uploaded for the session.

        Raises:
            NotFoundError: If either session document is missing
            ValidationError: If the job description text is too short
            GenerationError: If question generation fails
        """
        ensure_request_id()
        resume = await self._session_document(owner_id, session_id, DocumentType.RESUME)
        jd = await self._session_document(owner_id, session_id, DocumentType.JD)
        if resume is None or jd is None:
            logger.warning(
                f"Missing documents for session {session_id}: resume={resume is not None}, jd={jd is not None}"
            )
            raise NotFoundError(
                "Session documents",
                session_id,
                details={
                    "hint": "Please ensure both resume and job description are uploaded for this session",
                    "has_resume": resume is not None,
                    "has_jd": jd is not None,
                },
            )

        jd_text = self._jd_text(jd)
        if len(jd_text) < self.settings.min_jd_chars:
            raise ValidationError(
                "Job description text is too short or could not be extracted properly.",
                details={"jd_chars": len(jd_text), "minimum": self.settings.min_jd_chars},
            )

        logger.info(f"Generating questions for session {session_id}: jd_chars={len(jd_text)}")
        return await self.question_generator.generate(jd_text, num_questions)

    async def _retrieve_context(
        self, owner_id: str, session_id: str, answer_texts: List[str]
    ) -> Tuple[str, List[RetrievalResult]]:
        resume = await self._resume_for(owner_id, session_id)
        if resume is None:
            logger.warning(f"No resume for session {session_id}; evaluating without resume context")
            return NO_RESUME_CONTEXT, []

        # All answers are embedded together as a single retrieval query
        query_vector = await self.embedding_service.embed(" ".join(answer_texts))
        results = find_similar_chunks(query_vector, resume.chunks, k=self.settings.top_k)
        context = format_resume_context(results) or NO_MATCHING_SNIPPETS
        logger.info(f"Found {len(results)} relevant resume chunks for session {session_id}")
        return context, results

    async def submit_answers(
        self,
        owner_id: str,
        session_id: str,
        questions_text: str,
        answers_text: str,
        expected_count: Optional[int] = None,
    ) -> SubmissionResult:
        """
        Evaluate a batch of numbered answers against the session's questions.

        Args:
            owner_id: Owning user id
            session_id: Interview session id
            questions_text: The generated question text for the session
            answers_text: The candidate's numbered answers
            expected_count: Number of questions the session was created with

        Returns:
            Parsed questions and answers, evaluations, resume chunks used and scores

        Raises:
            ValidationError: If the answers text is empty
            ParseFailure: If the questions or answers cannot be parsed
            EmbeddingError: If the retrieval query cannot be embedded
        """
        if not answers_text or not answers_text.strip():
            raise ValidationError("Answers are required")

        ensure_request_id()

        questions = parse_questions(questions_text)
        if not questions or (expected_count is not None and len(questions) != expected_count):
            logger.error(
                f"Mismatch or missing questions in session {session_id}: "
                f"found={len(questions)}, expected={expected_count}"
            )
            raise ParseFailure(
                "Could not retrieve questions for this session.",
                expected_count=expected_count,
                details={"found_count": len(questions)},
            )

        numbers = [question.number for question in questions]
        if numbers != list(range(1, len(questions) + 1)):
            duplicates = sorted({n for n in numbers if numbers.count(n) > 1})
            missing = sorted(set(range(1, len(questions) + 1)) - set(numbers))
            logger.error(f"Question numbering is not 1..{len(questions)} in session {session_id}: {numbers}")
            raise ParseFailure(
                "Could not retrieve questions for this session.",
                expected_count=expected_count,
                details={"question_numbers": numbers, "duplicates": duplicates, "missing": missing},
            )

        answers = parse_answers(answers_text, len(questions))
        if answers is None:
            logger.warning(f"Answer parsing failed for session {session_id}: expected={len(questions)}")
            raise ParseFailure(answer_format_message(len(questions)), expected_count=len(questions))

        # Answers are renumbered 1..N, so they pair with questions by position
        pairs = [
            QAPair(question=question.text, answer=answer.text)
            for question, answer in zip(questions, answers)
        ]

        resume_context, results = await self._retrieve_context(
            owner_id, session_id, [answer.text for answer in answers]
        )

        batch = await self.answer_evaluator.evaluate(pairs, resume_context)
        scores = compute_session_scores(batch.evaluations)
        logger.info(
            f"Evaluation complete for session {session_id}: status={batch.status.value}, "
            f"final_score={scores.final_score}"
        )

        return SubmissionResult(
            questions=questions,
            answers=answers,
            evaluation=batch,
            resume_chunks_used=SubmissionResult.preview_chunks(results),
            scores=scores,
        )
