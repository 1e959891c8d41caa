"""Decide whether a chat message asks for a workspace review."""

from __future__ import annotations

from enum import Enum


class Intent(str, Enum):
    REVIEW = "review"
    CHAT = "chat"


REVIEW_KEYWORDS = frozenset(
    {
        "review",
        "analyse",
        "analyze",
        "check",
        "bug",
        "issue",
        "fix",
        "correct",
        "improve",
    }
)


def is_review_request(text: str) -> bool:
    # Plain substring matching: "bugs", "fixes", "checking" all count.
    t = text.lower()
    if any(keyword in t for keyword in REVIEW_KEYWORDS):
        return True
    return "code" in t and "file" in t


def classify(text: str) -> Intent:
    return Intent.REVIEW if is_review_request(text) else Intent.CHAT
