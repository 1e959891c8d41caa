"""Project-root file access and review snapshots.

Every read and write the core performs goes through a ``Workspace`` bound to a
single project root. ``LocalWorkspace`` is the filesystem implementation; tests
and alternative hosts can provide their own by implementing the four
abstract methods.
"""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from codemedic_core.errors import FileReadError, NoWorkspaceError, WorkspaceBoundaryError
from codemedic_core.models import FileSnapshot
from codemedic_core.utils.code import EXCLUDED_DIRS, in_excluded_dir, is_excluded, is_supported_file

logger = logging.getLogger(__name__)

# Hard cap on files sent per review request. Every file is inlined in full
# into a single prompt, so a larger cap quickly exceeds the model's context.
MAX_SNAPSHOT_FILES = 10


class Workspace(ABC):
    """Read/write capability confined to one project root."""

    @property
    @abstractmethod
    def root(self) -> Path: ...

    @abstractmethod
    def list_files(self) -> list[str]:
        """Return every reviewable-tree file under the root as a relative POSIX path."""

    @abstractmethod
    def read_file(self, path: str) -> str: ...

    @abstractmethod
    def write_file(self, path: str, content: str) -> None:
        """Replace the file's entire content, creating it if needed."""

    def resolve(self, path: str) -> Path:
        """Map a relative path to an absolute one, refusing to leave the root."""
        root = self.root.resolve()
        candidate = Path(path)
        if candidate.is_absolute():
            # The model sometimes echoes absolute paths back; accept them only
            # when they already point inside the root.
            target = candidate.resolve()
        else:
            target = (root / PurePosixPath(path.replace("\\", "/"))).resolve()
        if target != root and root not in target.parents:
            raise WorkspaceBoundaryError(f"Path {path!r} is outside the project root.")
        return target

    def relative(self, path: str) -> str:
        return self.resolve(path).relative_to(self.root.resolve()).as_posix()


class LocalWorkspace(Workspace):
    def __init__(self, root: str | os.PathLike):
        path = Path(root)
        if not path.is_dir():
            raise NoWorkspaceError(f"Workspace folder not found: {root}")
        self._root = path

    @property
    def root(self) -> Path:
        return self._root

    def list_files(self) -> list[str]:
        root = self._root.resolve()
        results = []
        for dirpath, dirnames, filenames in os.walk(root):
            # Prune in place so os.walk never descends into VCS or dependency trees.
            dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS and d != ".git")
            for name in sorted(filenames):
                results.append((Path(dirpath) / name).relative_to(root).as_posix())
        return results

    def read_file(self, path: str) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def write_file(self, path: str, content: str) -> None:
        target = self.resolve(path)
        staged = self.stage(target, content)
        os.replace(staged, target)

    def stage(self, target: Path, content: str) -> Path:
        """Write content to a temporary sibling of target and return its path.

        The temp file lives in the same directory so the final os.replace is a
        same-filesystem rename.
        """
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".codemedic", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        return Path(tmp)


def collect_snapshot(
    workspace: Workspace | None,
    max_files: int = MAX_SNAPSHOT_FILES,
    exclude: list[str] | None = None,
) -> list[FileSnapshot]:
    """Collect up to ``max_files`` supported source files from the workspace.

    Files are sorted by path so the same tree always yields the same snapshot.
    One unreadable file aborts the whole collection: a review over a partial
    snapshot would propose fixes against code the model never saw.
    """
    if workspace is None:
        raise NoWorkspaceError()

    patterns = list(exclude or [])
    candidates = sorted(
        path
        for path in workspace.list_files()
        if is_supported_file(path) and not in_excluded_dir(path) and not is_excluded(path, patterns)
    )
    if len(candidates) > max_files:
        logger.debug("Snapshot capped at %d of %d candidate files", max_files, len(candidates))

    snapshot = []
    for path in candidates[:max_files]:
        try:
            content = workspace.read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(path, str(e)) from e
        snapshot.append(FileSnapshot(path=path, content=content))
    return snapshot
