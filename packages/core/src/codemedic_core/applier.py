"""Write confirmed fixes back into the workspace."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from codemedic_core.errors import ApplyError, InvalidFixPayloadError, NoWorkspaceError, WorkspaceBoundaryError
from codemedic_core.models import ApplyResult, FixSet, ProposedFix
from codemedic_core.parser import is_writable_text, validate_fix_set
from codemedic_core.workspace import LocalWorkspace, Workspace

logger = logging.getLogger(__name__)


def _basename(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).name


def build_fix_summary(fix_set: FixSet) -> str:
    """One line per file: the file name and at most its first two issues."""
    lines = []
    for fix in fix_set.files:
        shown = fix.issues[:2] if isinstance(fix.issues, list) else []
        issues = ", ".join(str(i) for i in shown)
        lines.append(f"• {_basename(fix.path)} – {issues}")
    return "\n".join(lines)


class FixApplier:
    """Applies a FixSet by replacing each file's content in full.

    Atomic mode (default) validates every entry, stages every file next to its
    target, then commits with os.replace. Sequential mode writes entries one
    by one and stops at the first bad entry, leaving earlier writes in place.
    Either way a failure raises an ApplyError listing what was committed.
    """

    def __init__(self, workspace: Workspace | None):
        self.workspace = workspace

    def apply(self, fix_set: FixSet, atomic: bool = True) -> ApplyResult:
        if self.workspace is None:
            raise NoWorkspaceError()
        if atomic and isinstance(self.workspace, LocalWorkspace):
            written = self._apply_atomic(fix_set)
        else:
            written = self._apply_sequential(fix_set)
        return ApplyResult(written=written, summary=build_fix_summary(fix_set))

    def _apply_sequential(self, fix_set: FixSet) -> list[str]:
        written: list[str] = []
        for fix in fix_set.files:
            _check_entry(fix, committed=written)
            try:
                self.workspace.write_file(fix.path, fix.fixed_code)
            except (OSError, UnicodeError, WorkspaceBoundaryError) as e:
                raise ApplyError(f"Could not write {fix.path}: {e}", committed=written) from e
            written.append(fix.path)
            logger.debug("Wrote %s", fix.path)
        return written

    def _apply_atomic(self, fix_set: FixSet) -> list[str]:
        validate_fix_set(fix_set)
        try:
            targets = [(fix, self.workspace.resolve(fix.path)) for fix in fix_set.files]
        except WorkspaceBoundaryError as e:
            raise ApplyError(f"{e} Nothing was written.") from e

        staged: list[tuple[str, Path, Path]] = []
        try:
            for fix, target in targets:
                staged.append((fix.path, self.workspace.stage(target, fix.fixed_code), target))
        except (OSError, UnicodeError) as e:
            _discard(staged)
            raise ApplyError(
                f"Could not stage fixes, nothing was written: {e}",
                rolled_back=[path for path, _, _ in staged],
            ) from e

        committed: list[str] = []
        for index, (path, tmp, target) in enumerate(staged):
            try:
                os.replace(tmp, target)
            except OSError as e:
                remaining = staged[index:]
                _discard(remaining)
                raise ApplyError(
                    f"Could not write {path}: {e}",
                    committed=committed,
                    rolled_back=[p for p, _, _ in remaining],
                ) from e
            committed.append(path)
            logger.debug("Committed %s", path)
        return committed


def _check_entry(fix: ProposedFix, committed: list[str]) -> None:
    if not fix.path:
        raise InvalidFixPayloadError("<missing path>", "path", committed=committed)
    if not is_writable_text(fix.fixed_code):
        raise InvalidFixPayloadError(fix.path, "fixedCode", committed=committed)


def _discard(staged: list[tuple[str, Path, Path]]) -> None:
    for _, tmp, _ in staged:
        try:
            tmp.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove staged file %s: %s", tmp, e)
