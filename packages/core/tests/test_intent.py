"""Tests for review-intent classification."""

import pytest

from codemedic_core.intent import REVIEW_KEYWORDS, Intent, classify, is_review_request


class TestClassify:
    @pytest.mark.parametrize("keyword", sorted(REVIEW_KEYWORDS))
    def test_every_keyword_routes_to_review(self, keyword):
        assert classify(f"please {keyword} this") is Intent.REVIEW

    def test_matching_is_case_insensitive(self):
        assert classify("Can you REVIEW my project?") is Intent.REVIEW

    def test_substring_match_counts(self):
        # "bugs" and "fixes" contain the keywords as substrings.
        assert classify("any bugs here?") is Intent.REVIEW
        assert classify("suggest fixes") is Intent.REVIEW

    def test_code_and_file_together_is_review(self):
        assert classify("look at the code in this file") is Intent.REVIEW

    def test_code_alone_is_chat(self):
        assert classify("what is clean code?") is Intent.CHAT

    def test_file_alone_is_chat(self):
        assert classify("how do I open a file in python?") is Intent.CHAT

    def test_greeting_is_chat(self):
        assert classify("hello there") is Intent.CHAT

    def test_gate_tokens_are_chat(self):
        for token in ("yes", "apply", "no"):
            assert classify(token) is Intent.CHAT

    def test_is_review_request_matches_classify(self):
        assert is_review_request("analyse it") is True
        assert is_review_request("hi") is False
