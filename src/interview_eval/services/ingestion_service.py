"""Document ingestion: upload, extract, chunk, embed and store."""

import uuid
from typing import Optional

from interview_eval.models.chunk import Chunk
from interview_eval.models.document import Document, DocumentKey, DocumentType
from interview_eval.services.chunking_service import ChunkingService
from interview_eval.services.document_repository import DocumentRepository
from interview_eval.services.embedding_service import EmbeddingService
from interview_eval.services.parser_service import ParserService
from interview_eval.services.storage_service import ObjectStorage
from interview_eval.utils.errors import ValidationError
from interview_eval.utils.logging import ensure_request_id, get_logger, log_error

logger = get_logger("ingestion_service")


def build_blob_name(key: DocumentKey, file_name: str) -> str:
    """Storage path for an uploaded file; unique per upload."""
    session_part = key.session_id or "global"
    return f"{key.owner_id}/{session_part}/{key.type.value}/{uuid.uuid4().hex}_{file_name}"


class DocumentIngestionService:
    """
    Ingest uploaded PDFs into the document repository.

    Processing pipeline:
    1. Upload the original file to object storage
    2. Extract text
    3. Chunk text
    4. Embed every chunk
    5. Save the document, superseding any document with the same key
    """

    def __init__(
        self,
        storage: ObjectStorage,
        repository: DocumentRepository,
        embedding_service: EmbeddingService,
        parser_service: Optional[ParserService] = None,
        chunking_service: Optional[ChunkingService] = None,
    ):
        self.storage = storage
        self.repository = repository
        self.embedding_service = embedding_service
        self.parser_service = parser_service or ParserService()
        self.chunking_service = chunking_service or ChunkingService()

    async def ingest(
        self,
        owner_id: str,
        doc_type: DocumentType,
        data: bytes,
        file_name: str,
        session_id: Optional[str] = None,
    ) -> Document:
        """
        Ingest one uploaded file.

        Args:
            owner_id: Owning user id
            doc_type: Resume or job description
            data: PDF file bytes
            file_name: Original file name
            session_id: Interview session, or None for a global document

        Returns:
            The stored document

        Raises:
            ValidationError: If the owner or file is missing
            ExtractionError: If no usable text can be extracted
            EmbeddingError: If chunk embedding fails
            StorageError: If the upload fails
        """
        if not owner_id:
            raise ValidationError("owner_id is required")
        if not data:
            raise ValidationError("No file uploaded")

        ensure_request_id()

        key = DocumentKey(owner_id=owner_id, session_id=session_id, type=DocumentType(doc_type))
        logger.info(
            f"Ingesting document: owner={owner_id}, session={session_id}, "
            f"type={key.type.value}, filename={file_name}, size={len(data)}"
        )

        file_url = await self.storage.upload(data, build_blob_name(key, file_name))

        try:
            parsed = self.parser_service.extract_text(data, filename=file_name)
            texts = self.chunking_service.chunk_text(parsed.text)
            vectors = await self.embedding_service.embed_batch(texts)
            chunks = [Chunk(text=text, embedding=vector) for text, vector in zip(texts, vectors)]
            document = Document(key=key, file_url=file_url, file_name=file_name, chunks=chunks)
            previous = await self.repository.save(document)
        except Exception as e:
            log_error(e, context={"stage": "ingest", "file_url": file_url, "owner_id": owner_id})
            await self._delete_quietly(file_url)
            raise

        if previous is not None and previous.file_url != file_url:
            await self._delete_quietly(previous.file_url)

        logger.info(
            f"Document ingested: id={document.id}, chunks={len(chunks)}, "
            f"pages={parsed.metadata.page_count}, superseded={previous.id if previous else None}"
        )
        return document

    async def _delete_quietly(self, file_url: str) -> None:
        # Logged, never raised
        try:
            await self.storage.delete(file_url)
        except Exception as e:
            logger.warning(f"Failed to delete stored file {file_url}: {e}")
