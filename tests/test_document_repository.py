"""Tests for the in-memory document repository."""

from datetime import datetime, timedelta, timezone

import pytest

from interview_eval.models.document import Document, DocumentKey, DocumentType
from interview_eval.services.document_repository import InMemoryDocumentRepository


def make_document(session_id, doc_type, created_at=None):
    return Document(
        key=DocumentKey(owner_id="u1", session_id=session_id, type=doc_type),
        file_url="https://storage.test/interview-prep/f.pdf",
        file_name="f.pdf",
        created_at=created_at or datetime.now(timezone.utc),
    )


@pytest.mark.asyncio
async def test_save_returns_superseded_document():
    repository = InMemoryDocumentRepository()
    first = make_document("s1", DocumentType.RESUME)
    second = make_document("s1", DocumentType.RESUME)

    assert await repository.save(first) is None
    assert await repository.save(second) is first
    assert await repository.get(first.key) is second


@pytest.mark.asyncio
async def test_session_and_global_documents_are_separate():
    repository = InMemoryDocumentRepository()
    session_doc = make_document("s1", DocumentType.RESUME)
    global_doc = make_document(None, DocumentType.RESUME)
    await repository.save(session_doc)
    await repository.save(global_doc)

    assert await repository.list_for_owner("u1", "s1") == [session_doc]
    assert await repository.list_for_owner("u1") == [global_doc]


@pytest.mark.asyncio
async def test_list_is_newest_first():
    repository = InMemoryDocumentRepository()
    now = datetime.now(timezone.utc)
    older = make_document("s1", DocumentType.JD, created_at=now - timedelta(minutes=5))
    newer = make_document("s1", DocumentType.RESUME, created_at=now)
    await repository.save(older)
    await repository.save(newer)

    assert await repository.list_for_owner("u1", "s1") == [newer, older]


@pytest.mark.asyncio
async def test_delete():
    repository = InMemoryDocumentRepository()
    document = make_document("s1", DocumentType.JD)
    await repository.save(document)

    assert await repository.delete(document.key) is document
    assert await repository.get(document.key) is None
    assert await repository.delete(document.key) is None
