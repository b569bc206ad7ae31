"""Tests for numbered question and answer parsing."""

import pytest

from interview_eval.services.qa_parser import (
    answer_format_message,
    match_numbered_line,
    parse_answers,
    parse_questions,
)


class TestParseQuestions:
    def test_numbered_list(self):
        text = "1. What is REST?\n2. Explain CAP theorem\n3. Tell me about a conflict you resolved."
        questions = parse_questions(text)
        assert [(q.number, q.text) for q in questions] == [
            (1, "What is REST?"),
            (2, "Explain CAP theorem"),
            (3, "Tell me about a conflict you resolved."),
        ]

    def test_skips_preamble_and_unnumbered_lines(self):
        text = "Here are your questions:\n\n1. First?\nsome stray note\n2.Second?\n"
        questions = parse_questions(text)
        assert [(q.number, q.text) for q in questions] == [(1, "First?"), (2, "Second?")]

    def test_numbers_come_from_the_text(self):
        questions = parse_questions("3. Third\n1. First")
        assert [q.number for q in questions] == [3, 1]

    def test_marker_without_body_is_skipped(self):
        assert parse_questions("1.   \n2. Real question")[0].number == 2

    @pytest.mark.parametrize("text", ["", None, "no numbers at all", "1) wrong delimiter"])
    def test_nothing_matches(self, text):
        assert parse_questions(text) == []


class TestParseAnswers:
    def test_exact_count(self):
        text = "1. It's an architecture style.\n2. Consistency, Availability, Partition tolerance."
        answers = parse_answers(text, 2)
        assert [(a.number, a.text) for a in answers] == [
            (1, "It's an architecture style."),
            (2, "Consistency, Availability, Partition tolerance."),
        ]

    def test_count_mismatch_fails_closed(self):
        text = "1. It's an architecture style.\n2. Consistency, Availability, Partition tolerance."
        assert parse_answers(text, 3) is None
        assert parse_answers(text, 1) is None

    def test_multi_line_answers_are_kept(self):
        text = "1. First line\ncontinued here\n\n2. Second answer\n  - bullet"
        answers = parse_answers(text, 2)
        assert answers[0].text == "First line\ncontinued here"
        assert answers[1].text == "Second answer\n  - bullet"

    def test_answers_are_renumbered(self):
        answers = parse_answers("3. c\n7. d", 2)
        assert [a.number for a in answers] == [1, 2]

    def test_text_before_first_marker_is_ignored(self):
        answers = parse_answers("My answers:\n1. yes\n2. no", 2)
        assert [a.text for a in answers] == ["yes", "no"]

    def test_blank_segments_do_not_count(self):
        assert parse_answers("1.\n2. only one real answer", 2) is None

    @pytest.mark.parametrize("text", ["", None, "no numbered lines"])
    def test_no_answers(self, text):
        assert parse_answers(text, 2) is None

    def test_never_returns_fewer_than_expected(self):
        for n in range(1, 5):
            result = parse_answers("1. a\n2. b\n3. c", n)
            assert result is None or len(result) == n


def test_match_numbered_line():
    assert match_numbered_line("  12.   body  ") == (12, "body")
    assert match_numbered_line("12 body") is None
    assert match_numbered_line(".5 body") is None


def test_answer_format_message_names_count():
    message = answer_format_message(3)
    assert "exactly 3 answers" in message
    assert '"1. Your answer"' in message
