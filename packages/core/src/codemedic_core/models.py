"""Data models shared across the review → confirm → apply workflow.

Plain dataclasses rather than dicts so the wire payload is converted once, at
the parser boundary, and every later stage works with named fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FileSnapshot:
    """One source file captured for a review request. Never persisted."""

    path: str  # relative to the project root, POSIX separators
    content: str


@dataclass
class ProposedFix:
    path: str
    # issues and fixed_code are left as the model sent them; type checks happen
    # in validate_fix_set / FixApplier, which name the offending path.
    issues: Any = field(default_factory=list)
    fixed_code: Any = None

    @classmethod
    def from_payload(cls, entry: Any) -> "ProposedFix":
        if not isinstance(entry, dict):
            return cls(path="", issues=[], fixed_code=None)
        return cls(
            path=entry.get("path") if isinstance(entry.get("path"), str) else "",
            issues=entry.get("issues", []),
            fixed_code=entry.get("fixedCode"),
        )


@dataclass
class FixSet:
    """The structured set of proposed file rewrites awaiting confirmation.

    An empty FixSet means "no issues" and is never held as pending.
    """

    files: list[ProposedFix] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "FixSet":
        return cls(files=[])

    @classmethod
    def from_payload(cls, payload: dict) -> "FixSet":
        entries = payload.get("files")
        if not isinstance(entries, list) or not entries:
            return cls.empty()
        return cls(files=[ProposedFix.from_payload(e) for e in entries])

    def __bool__(self) -> bool:
        return bool(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]


@dataclass
class ApplyResult:
    written: list[str] = field(default_factory=list)
    summary: str = ""
