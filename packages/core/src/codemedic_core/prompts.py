"""Prompt text sent to the generation service.

The system instruction is shared by the review and chat paths so the
assistant persona is defined exactly once.
"""

from __future__ import annotations

from typing import Iterable

from codemedic_core.models import FileSnapshot

SYSTEM_INSTRUCTION = """You are CodeMedic, a coding-only AI assistant.
RULES (MANDATORY):
- Answer ONLY questions related to programming, software development, or computer science.
- If the user asks anything NOT related to coding, reply: "I only answer questions related to coding and software development."
- Reply normally to greetings like hello, hi, can you help me, etc."""  # noqa: E501

_REVIEW_PREAMBLE = """You are a senior software engineer.
Review the project files below, find bugs and code issues, and fix them.

RETURN ONLY VALID JSON.
DO NOT add markdown.
DO NOT add explanations.
DO NOT wrap in ```.
DO NOT add the word "json".

JSON SCHEMA (MUST MATCH EXACTLY):
{
  "files": [
    {
      "path": "relative/path/to/file.js",
      "issues": ["string"],
      "fixedCode": "FULL corrected file content"
    }
  ]
}

Rules:
- "path" must be copied exactly from the file header below (relative to the project root).
- "fixedCode" must be the COMPLETE file after your fixes, not a diff or an excerpt.
- Only include files that need changes.
- If there are no issues, return: {"files": []}"""


def _render_file(snapshot: FileSnapshot) -> str:
    return f"--- {snapshot.path} ---\n{snapshot.content}\n"


def build_review_prompt(files: Iterable[FileSnapshot]) -> str:
    blocks = "\n".join(_render_file(f) for f in files)
    return f"{_REVIEW_PREAMBLE}\n\nFILES:\n{blocks}"
