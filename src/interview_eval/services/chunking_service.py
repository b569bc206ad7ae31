"""Text chunking service for resume and job description ingestion."""

import re
from typing import Callable, List, Optional, Union

import tiktoken

from interview_eval.config import ChunkUnit, ChunkingSettings, get_settings
from interview_eval.utils.errors import EmptyInputError, ValidationError
from interview_eval.utils.logging import get_logger

logger = get_logger("chunking_service")


class ChunkingService:
    """
    Split extracted document text into bounded chunks for embedding.

    Sentences are packed whole into a chunk while the size budget allows; a
    sentence larger than the budget is split at word boundaries. Words are
    never split and chunks never overlap, so joining the chunks with a space
    gives back the original word sequence.

    Units:
    - words: whitespace-separated words
    - tokens: tiktoken token count of each word
    """

    def __init__(self, chunking_settings: Optional[ChunkingSettings] = None):
        """
        Initialize the chunking service.

        Args:
            chunking_settings: Chunk size/unit defaults (defaults to settings.chunking)
        """
        self.settings = chunking_settings or get_settings().chunking
        self._encoding = None  # lazy, only needed for token units

    def chunk_text(
        self,
        text: str,
        chunk_size: Optional[int] = None,
        unit: Optional[Union[ChunkUnit, str]] = None,
    ) -> List[str]:
        """
        Chunk text into pieces of at most ``chunk_size`` units.

        Args:
            text: Input text to chunk
            chunk_size: Maximum units per chunk (defaults to settings.chunking.chunk_size)
            unit: words or tokens (defaults to settings.chunking.chunk_unit)

        Returns:
            Non-empty chunk strings in source order

        Raises:
            EmptyInputError: If the text is empty after trimming
            ValidationError: If chunk_size or unit is invalid
        """
        if text is None or not text.strip():
            raise EmptyInputError("Text to chunk is empty")

        chunk_size = chunk_size if chunk_size is not None else self.settings.chunk_size
        if chunk_size <= 0:
            raise ValidationError("chunk_size must be > 0", details={"chunk_size": chunk_size})

        unit = unit or self.settings.chunk_unit
        try:
            unit = ChunkUnit(unit.lower())
        except ValueError as e:
            raise ValidationError(
                "Unsupported chunk unit",
                details={"unit": unit, "valid": [u.value for u in ChunkUnit]},
            ) from e

        measure = self._word_measure if unit == ChunkUnit.WORDS else self._token_measure

        sentences = self._split_sentences(text.strip())
        chunks = self._pack_sentences(sentences, chunk_size, measure)

        logger.info(
            f"Chunked text: chars={len(text)}, chunks={len(chunks)}",
            extra={"chunk_size": chunk_size, "unit": unit.value},
        )
        return chunks

    @staticmethod
    def _word_measure(word: str) -> int:
        return 1

    def _token_measure(self, word: str) -> int:
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self.settings.tokenizer_encoding)
        # leading space matches how the word is tokenized mid-sentence
        return max(1, len(self._encoding.encode(" " + word)))

    @staticmethod
    def _split_sentences(text: str) -> List[List[str]]:
        """Split into sentences, each a list of words."""
        candidates = re.split(r"(?<=[.!?])\s+", text)
        sentences = [c.split() for c in candidates]
        return [s for s in sentences if s]

    @staticmethod
    def _pack_sentences(
        sentences: List[List[str]],
        chunk_size: int,
        measure: Callable[[str], int],
    ) -> List[str]:
        chunks: List[str] = []
        current: List[str] = []
        current_size = 0

        def flush() -> None:
            nonlocal current, current_size
            if current:
                chunks.append(" ".join(current))
            current, current_size = [], 0

        for words in sentences:
            sizes = [measure(w) for w in words]
            sentence_size = sum(sizes)

            if current and current_size + sentence_size > chunk_size:
                flush()

            if sentence_size <= chunk_size:
                current.extend(words)
                current_size += sentence_size
                continue

            # oversized sentence: fill chunks word by word
            for word, size in zip(words, sizes):
                if current and current_size + size > chunk_size:
                    flush()
                current.append(word)
                current_size += size

        flush()
        return chunks
