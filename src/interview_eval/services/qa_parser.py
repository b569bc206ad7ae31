"""Parsing of numbered question lists and answer batches.

Both parsers read the same small grammar: a line that starts with a
number, a period, optional whitespace and then a body. Question bodies end
at the end of their line; answer bodies run until the next numbered line
or the end of the text, so multi-line answers survive.

Both fail closed: ``parse_questions`` returns only lines that matched, and
``parse_answers`` returns None unless exactly the expected number of
answers was found.
"""

from typing import List, NamedTuple, Optional

from interview_eval.models.interview import Answer, Question
from interview_eval.utils.logging import get_logger

logger = get_logger("qa_parser")


class NumberedLine(NamedTuple):
    number: int
    body: str


def match_numbered_line(line: str) -> Optional[NumberedLine]:
    """
    Match ``<digits>.<optional whitespace><body>`` at the start of a line.

    Leading whitespace on the line is ignored. Returns None when the line
    does not start with a marker.
    """
    stripped = line.lstrip()
    pos = 0
    while pos < len(stripped) and stripped[pos].isdigit():
        pos += 1
    if pos == 0 or pos >= len(stripped) or stripped[pos] != ".":
        return None
    # isdigit() accepts other Unicode digits that int() may reject
    digits = stripped[:pos]
    if not digits.isascii():
        return None
    return NumberedLine(number=int(digits), body=stripped[pos + 1 :].strip())


def parse_questions(text: str) -> List[Question]:
    """
    Parse "N. question" lines into questions, in source order.

    Lines without a marker, or with a marker but no text, are skipped and
    logged. Returns an empty list when nothing matches.
    """
    if not text or not isinstance(text, str):
        return []

    questions: List[Question] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        match = match_numbered_line(line)
        if match is None or not match.body or match.number < 1:
            logger.warning(f"parse_questions: skipping line, format mismatch: {line[:50]!r}")
            continue
        questions.append(Question(number=match.number, text=match.body))
    return questions


def split_numbered_segments(text: str) -> List[str]:
    """
    Split text into the bodies that follow each line-leading number marker.

    A body runs until the next marker line or the end of the text. Text
    before the first marker is not a segment. Blank bodies are dropped.
    """
    segments: List[List[str]] = []
    preamble: List[str] = []
    for line in text.splitlines():
        match = match_numbered_line(line)
        if match is not None:
            segments.append([match.body])
        elif segments:
            segments[-1].append(line)
        elif line.strip():
            preamble.append(line)

    if preamble:
        logger.warning(f"split_numbered_segments: ignoring {len(preamble)} line(s) before the first number")

    bodies = ["\n".join(parts).strip() for parts in segments]
    return [body for body in bodies if body]


def parse_answers(text: str, expected_count: int) -> Optional[List[Answer]]:
    """
    Parse a numbered answer batch.

    Answers are renumbered 1..expected_count in the order they appear.

    Returns:
        Exactly ``expected_count`` answers, or None if the number of
        recovered answers differs in any way (too few, too many, none)
    """
    if not text or not isinstance(text, str) or expected_count < 1:
        return None

    segments = split_numbered_segments(text)
    if len(segments) != expected_count:
        logger.warning(f"parse_answers: parsed {len(segments)} answers, but expected {expected_count}")
        return None

    return [Answer(number=idx, text=body) for idx, body in enumerate(segments, start=1)]


def answer_format_message(expected_count: int) -> str:
    """User-facing message for a rejected answer batch."""
    return (
        f"Parsing failed. Please ensure you provide exactly {expected_count} answers, "
        'each starting on a new line with the format: "1. Your answer".'
    )
