"""Tests for scoring/grammar.py."""

from __future__ import annotations

import pytest

from mailqc.scoring.grammar import (
    GRAMMAR_RULES,
    SUGGESTION_LONG_SENTENCES,
    SUGGESTION_PASSIVE,
    check_grammar,
    check_grammar_async,
    count_lowercase_starts,
)


def _message(name: str) -> str:
    return next(r.message for r in GRAMMAR_RULES if r.name == name)


class TestCheckGrammar:
    def test_informal_example(self):
        result = check_grammar("Hey there, I'm gonna help you ASAP!!")
        # 0.5 repeated punctuation, 0.5 contraction, 0.5 greeting, 1.0 for two "!", 1.0 for gonna/ASAP
        assert result.score == 7
        assert result.suggestions == [
            _message("repeated-punctuation"),
            _message("contractions"),
            _message("informal-greetings"),
            _message("exclamation-marks"),
            _message("colloquial-abbreviations"),
        ]

    def test_clean_text(self, good_email: str):
        result = check_grammar(good_email)
        assert result.score == 10
        assert result.suggestions == []
        assert result.feedback == "No spelling or grammar issues were found."

    def test_rule_deduction_capped(self):
        result = check_grammar("Wow! " * 10)
        # ten matches still deduct only 2 for exclamation marks
        assert result.score == 8
        assert result.suggestions == [_message("exclamation-marks")]

    def test_double_spaces(self):
        result = check_grammar("Thank  you.")
        assert result.suggestions == [_message("double-spaces")]

    def test_missing_capitalization(self):
        result = check_grammar("Thanks. see you soon.")
        assert _message("missing-capitalization") in result.suggestions

    def test_common_confusions(self):
        result = check_grammar("Your welcome. Their is a fee.")
        assert _message("common-confusions") in result.suggestions

    def test_long_sentence(self):
        sentence = " ".join(["word"] * 30) + "."
        result = check_grammar(sentence.capitalize())
        assert SUGGESTION_LONG_SENTENCES in result.suggestions
        # 9.5 rounds half up
        assert result.score == 10

    def test_passive_voice_threshold(self):
        three = "It was booked. It was changed. It was cancelled."
        four = three + " It was refunded."
        assert SUGGESTION_PASSIVE not in check_grammar(three).suggestions
        result = check_grammar(four)
        assert SUGGESTION_PASSIVE in result.suggestions
        assert result.score == 9

    def test_score_clamped(self):
        text = "hey!! yo!! i'm gonna, like, basically just really wanna say lol omg in order to  alot"
        result = check_grammar(text)
        assert 0 <= result.score <= 10

    def test_empty(self):
        assert check_grammar("").score == 10

    @pytest.mark.asyncio
    async def test_async_matches_sync(self):
        text = "Hey there, I'm gonna help you ASAP!!"
        result = await check_grammar_async(text, delay_seconds=0)
        assert result == check_grammar(text)


class TestCountLowercaseStarts:
    def test_sentence_after_full_stop(self):
        assert count_lowercase_starts("Thanks. see you soon.") == 1

    def test_paragraph_after_blank_line(self):
        assert count_lowercase_starts("Hello.\n  \nthanks for waiting") == 1

    def test_dotted_names_are_not_sentences(self):
        assert count_lowercase_starts("Visit www.example.com today.") == 0

    def test_repeated_punctuation(self):
        assert count_lowercase_starts("Really!!! ok then") == 1


class TestLargeInputs:
    def test_blank_lines(self):
        result = check_grammar("\n" * 20000)
        assert result.score == 10

    def test_mixed_whitespace(self):
        result = check_grammar(" \n" * 20000 + "\t\n" * 20000)
        assert 0 <= result.score <= 10

    def test_long_punctuation_run(self):
        result = check_grammar("!" * 50000)
        assert 0 <= result.score <= 10
