"""Tests for scoring/structure.py."""

from __future__ import annotations

import pytest

from mailqc.scoring.structure import analyze_structure


class TestAnalyzeStructure:
    def test_complete_email(self, good_email: str):
        result = analyze_structure(good_email)
        assert result.has_greeting
        assert result.has_header
        assert result.has_signature
        assert result.has_footer
        assert result.score == 10
        assert result.feedback == (
            "Email has proper structure with all required elements: "
            "greeting, header, signature, and footer."
        )

    def test_greeting_only(self, poor_email: str):
        result = analyze_structure(poor_email)
        assert result.has_greeting
        assert result.score == 2.5
        assert result.missing_elements == ["header", "signature", "footer"]
        assert result.feedback == (
            "Email is missing the following structural elements: header, signature, footer."
        )

    def test_empty(self):
        result = analyze_structure("")
        assert result.score == 0
        assert result.missing_elements == ["greeting", "header", "signature", "footer"]

    def test_greeting_must_be_near_top(self):
        result = analyze_structure("Update on your claim\nWe are working on it\nHello again")
        assert not result.has_greeting

    def test_signature_must_be_near_bottom(self):
        text = "Hello Sam\nKind regards\nline one\nline two\nline three"
        assert not analyze_structure(text).has_signature

    def test_footer_accepts_unspaced_domain(self):
        result = analyze_structure("Hello Sam\nAll done.\nBest regards\nmylawmatters.co.uk")
        assert result.has_footer
        assert result.has_signature

    def test_header_phrase_across_line_break(self):
        assert analyze_structure("Hello\nMy Law\nMatters update").has_header

    @pytest.mark.parametrize(
        "text",
        ["", "Hi", "Hello\nRegards", "Dear Ann\nLegal Department\nThanks\nRegards\ncontact us"],
    )
    def test_score_is_multiple_of_quarter_weight(self, text: str):
        assert analyze_structure(text).score in {0, 2.5, 5, 7.5, 10}
