"""Document store keyed by (owner, session, type)."""

from typing import Dict, List, Optional, Protocol

from interview_eval.models.document import Document, DocumentKey
from interview_eval.utils.logging import get_logger

logger = get_logger("document_repository")


class DocumentRepository(Protocol):
    """Holds at most one document per key."""

    async def get(self, key: DocumentKey) -> Optional[Document]:
        ...

    async def save(self, document: Document) -> Optional[Document]:
        ...

    async def delete(self, key: DocumentKey) -> Optional[Document]:
        ...

    async def list_for_owner(self, owner_id: str, session_id: Optional[str] = None) -> List[Document]:
        ...


class InMemoryDocumentRepository:
    """Dictionary-backed repository, one instance per process or test."""

    def __init__(self):
        self._documents: Dict[DocumentKey, Document] = {}

    async def get(self, key: DocumentKey) -> Optional[Document]:
        """Get the document stored under a key."""
        return self._documents.get(key)

    async def save(self, document: Document) -> Optional[Document]:
        """
        Store a document, replacing any document with the same key.

        Returns:
            The superseded document, if there was one
        """
        previous = self._documents.get(document.key)
        self._documents[document.key] = document
        if previous is not None:
            logger.info(
                f"Superseded document {previous.id} with {document.id}",
                extra={"owner_id": document.key.owner_id, "type": document.key.type.value},
            )
        return previous

    async def delete(self, key: DocumentKey) -> Optional[Document]:
        """Delete and return the document stored under a key."""
        return self._documents.pop(key, None)

    async def list_for_owner(self, owner_id: str, session_id: Optional[str] = None) -> List[Document]:
        """List an owner's documents for one session (or the global ones), newest first."""
        docs = [
            doc
            for key, doc in self._documents.items()
            if key.owner_id == owner_id and key.session_id == session_id
        ]
        return sorted(docs, key=lambda d: d.created_at, reverse=True)
