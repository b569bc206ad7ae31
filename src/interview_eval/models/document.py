"""Document models for uploaded resumes and job descriptions."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from interview_eval.models.chunk import Chunk


class DocumentType(str, Enum):
    """Kind of uploaded document."""

    RESUME = "resume"
    JD = "jd"


class DocumentKey(BaseModel):
    """
    Identity of a stored document.

    ``session_id`` of None denotes a global document that is not tied to a
    single interview session.
    """

    model_config = ConfigDict(frozen=True)

    owner_id: str = Field(..., min_length=1, description="Owning user id")
    session_id: Optional[str] = Field(default=None, description="Interview session id")
    type: DocumentType = Field(..., description="Document type")


class Document(BaseModel):
    """Stored document with its embedded chunks."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Document id")
    key: DocumentKey
    file_url: str = Field(..., description="URL of the stored original file")
    file_name: str = Field(..., description="Original file name")
    chunks: List[Chunk] = Field(default_factory=list, description="Chunks in document order")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def text(self) -> str:
        """Rebuild the document text from its chunks."""
        return "\n\n".join(chunk.text for chunk in self.chunks if chunk.text)


class DocumentMetadata(BaseModel):
    """Metadata extracted from a document."""

    page_count: Optional[int] = Field(None, description="Number of pages")
    word_count: Optional[int] = Field(None, description="Approximate word count")
    character_count: Optional[int] = Field(None, description="Character count")
    title: Optional[str] = Field(None, description="Document title")
    author: Optional[str] = Field(None, description="Document author")


class ParsedDocument(BaseModel):
    """Extracted text and metadata of a document file."""

    text: str = Field(..., description="Extracted text content")
    metadata: DocumentMetadata = Field(..., description="Document metadata")
