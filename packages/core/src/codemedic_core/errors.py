"""Error taxonomy for the CodeMedic core.

Core modules raise these; the Session turns any of them into a single chat
reply so no error is ever fatal to an open conversation. The CLI layer maps
configuration problems to click usage errors before a session exists.
"""

from __future__ import annotations


class CodeMedicError(Exception):
    """Base class for every error raised by codemedic_core."""


class ConfigurationError(CodeMedicError):
    """The configuration is incomplete or names an unknown provider."""


class AuthenticationError(ConfigurationError):
    """No credential is configured for the selected provider."""


class NoWorkspaceError(CodeMedicError):
    def __init__(self, message: str = "No workspace folder found."):
        super().__init__(message)


class WorkspaceBoundaryError(CodeMedicError):
    """A path resolved outside the bound project root."""


class FileReadError(CodeMedicError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Could not read {path}: {reason}")


class UpstreamError(CodeMedicError):
    """The generation service failed, timed out, or could not be reached."""


class RequestCancelledError(CodeMedicError):
    def __init__(self, message: str = "Request cancelled."):
        super().__init__(message)


class MalformedResponseError(CodeMedicError):
    """The model output could not be read as a fix proposal."""


class NoJsonFoundError(MalformedResponseError):
    def __init__(self, message: str = "No JSON object found in response"):
        super().__init__(message)


class MalformedJsonError(MalformedResponseError):
    pass


class ApplyError(CodeMedicError):
    """Applying a fix set stopped part-way.

    ``committed`` lists the paths already written to disk; ``rolled_back``
    lists staged paths that were discarded. Callers must report both so a
    partial application is never silent.
    """

    def __init__(self, message: str, committed: list[str] | None = None, rolled_back: list[str] | None = None):
        self.committed = list(committed or [])
        self.rolled_back = list(rolled_back or [])
        super().__init__(message)


class InvalidFixPayloadError(ApplyError):
    def __init__(self, path: str, reason: str = "invalid fixedCode", committed: list[str] | None = None):
        self.path = path
        super().__init__(f"Invalid {reason} for {path}", committed=committed)
