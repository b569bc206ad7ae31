"""Services package."""

from interview_eval.services.answer_evaluator import AnswerEvaluator
from interview_eval.services.chunking_service import ChunkingService
from interview_eval.services.document_repository import DocumentRepository, InMemoryDocumentRepository
from interview_eval.services.embedding_service import EmbeddingService
from interview_eval.services.ingestion_service import DocumentIngestionService
from interview_eval.services.interview_service import InterviewService, compute_session_scores
from interview_eval.services.parser_service import ParserService
from interview_eval.services.qa_parser import parse_answers, parse_questions
from interview_eval.services.question_generator import QuestionGenerator
from interview_eval.services.storage_service import ObjectStorage, StorageService
from interview_eval.services.vector_index import cosine_similarity, find_similar_chunks

__all__ = [
    "AnswerEvaluator",
    "ChunkingService",
    "DocumentIngestionService",
    "DocumentRepository",
    "EmbeddingService",
    "InMemoryDocumentRepository",
    "InterviewService",
    "ObjectStorage",
    "ParserService",
    "QuestionGenerator",
    "StorageService",
    "compute_session_scores",
    "cosine_similarity",
    "find_similar_chunks",
    "parse_answers",
    "parse_questions",
]
