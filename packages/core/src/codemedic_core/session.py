"""Conversation orchestration for one open chat surface.

A Session owns everything that used to be global state in an editor plugin:
the conversation history, the pending fix proposal, the workspace binding
and the model provider. One Session exists per open chat; ``close()`` tears
it down.

Message flow:
    handle(envelope)
      → classify()                      review request?
          yes → collect_snapshot() → build_review_prompt() → generate()
                → parse_fix_set() → validate_fix_set() → gate.hold()
      → gate.answer()                   "yes"/"apply" → FixApplier.apply()
                                        "no"          → gate.clear()
      → chat                            history + message → generate()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from codemedic_core.applier import FixApplier, build_fix_summary
from codemedic_core.config import get_api_key
from codemedic_core.errors import (
    ApplyError,
    CodeMedicError,
    ConfigurationError,
    InvalidFixPayloadError,
    MalformedResponseError,
    RequestCancelledError,
)
from codemedic_core.gate import ConfirmationGate, GateAnswer
from codemedic_core.history import ConversationHistory
from codemedic_core.intent import Intent, classify
from codemedic_core.parser import parse_fix_set, validate_fix_set
from codemedic_core.prompts import SYSTEM_INSTRUCTION, build_review_prompt
from codemedic_core.providers.anthropic import AnthropicProvider
from codemedic_core.providers.base import BaseProvider, CancelToken
from codemedic_core.providers.gemini import GeminiProvider
from codemedic_core.providers.openai import OpenAIProvider
from codemedic_core.workspace import MAX_SNAPSHOT_FILES, Workspace, collect_snapshot

logger = logging.getLogger(__name__)

USER_MESSAGE = "userMessage"
BOT_REPLY = "botReply"

MSG_CHECKING = "Checking your code, please wait..."
MSG_REVIEWING = "Reviewing workspace files..."
MSG_NO_FILES = "No supported code files found in this workspace."
MSG_NO_ISSUES = "✅ No issues found. Your code looks good."
MSG_CONFIRM = "I found issues and prepared fixes. Do you want me to apply them? (Yes / No)"
MSG_NOT_APPLIED = "Okay, fixes were not applied."
MSG_FALLBACK = "Sorry, I could not generate a response."
MSG_SUPERSEDED = "Previous unapplied fixes were discarded."

_PROVIDERS: dict[str, type[BaseProvider]] = {
    "gemini": GeminiProvider,
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


def get_provider(config: dict) -> BaseProvider:
    model = config.get("model", "gemini")
    provider_cls = _PROVIDERS.get(model)
    if provider_cls is None:
        raise ConfigurationError(
            f"Unknown model provider: {model!r}. Choose one of: {', '.join(sorted(_PROVIDERS))}."
        )
    try:
        return provider_cls(
            api_key=get_api_key(config),
            model=config.get("model_name"),
            timeout=config.get("request_timeout"),
        )
    except ImportError as e:
        # A missing optional SDK is a setup problem, reported like any other.
        raise ConfigurationError(str(e)) from e


def bot_reply(text: str) -> dict:
    return {"type": BOT_REPLY, "text": text}


def describe_apply_error(error: ApplyError) -> str:
    lines = [str(error)]
    if error.committed:
        lines.append("Already written: " + ", ".join(error.committed))
    if error.rolled_back:
        lines.append("Not written: " + ", ".join(error.rolled_back))
    if not error.committed:
        lines.append("No files were changed.")
    return "\n".join(lines)


class Session:
    def __init__(
        self,
        config: dict,
        workspace: Workspace | None,
        post: Callable[[dict], None],
        provider: BaseProvider | None = None,
    ):
        self.config = config
        self.workspace = workspace
        self.post = post
        self.history = ConversationHistory()
        self.gate = ConfirmationGate()
        self._provider = provider
        # Serialises handle(): one message runs to completion before the next
        # one touches history or the gate.
        self._lock = threading.Lock()
        self._current: CancelToken | None = None
        self.closed = False

    @property
    def provider(self) -> BaseProvider:
        # Built lazily so a missing key is reported as a chat reply and the
        # session stays usable once the key is configured.
        if self._provider is None:
            self._provider = get_provider(self.config)
        return self._provider

    # ------------------------------------------------------------------ #
    # Lifecycle                                                            #
    # ------------------------------------------------------------------ #

    def cancel(self) -> bool:
        """Cancel the in-flight request, if any. Safe to call from any thread."""
        token = self._current
        if token is None:
            return False
        token.cancel()
        return True

    def close(self) -> None:
        self.cancel()
        with self._lock:
            self.history.clear()
            self.gate.clear()
            if self._provider is not None:
                self._provider.close()
                self._provider = None
            self.closed = True
        logger.debug("Session closed")

    # ------------------------------------------------------------------ #
    # Message handling                                                     #
    # ------------------------------------------------------------------ #

    def handle(self, envelope: dict) -> None:
        if envelope.get("type") != USER_MESSAGE:
            return
        text = envelope.get("text")
        if not isinstance(text, str) or not text.strip():
            return

        with self._lock:
            if self.closed:
                logger.debug("Dropping message for closed session")
                return
            token = self._current = CancelToken()
            try:
                self._dispatch(text, token)
            except RequestCancelledError as e:
                self._reply(str(e))
            except CodeMedicError as e:
                self._reply(f"⚠️ Error: {e}")
            finally:
                self._current = None

    def _reply(self, text: str) -> None:
        self.post(bot_reply(text))

    def _dispatch(self, text: str, token: CancelToken) -> None:
        if classify(text) is Intent.REVIEW:
            logger.debug("Routing message to review")
            self._review(token)
            return

        answer = self.gate.answer(text)
        if answer is GateAnswer.CONFIRM:
            self._apply()
            return
        if answer is GateAnswer.REJECT:
            self.gate.clear()
            self._reply(MSG_NOT_APPLIED)
            return

        logger.debug("Routing message to chat")
        self._chat(text, token)

    def _review(self, token: CancelToken) -> None:
        if self.gate.pending is not None:
            # A new review request supersedes the proposal still awaiting an answer.
            self.gate.clear()
            self._reply(MSG_SUPERSEDED)
        self._reply(MSG_CHECKING)
        files = collect_snapshot(
            self.workspace,
            max_files=self.config.get("max_files", MAX_SNAPSHOT_FILES),
            exclude=self.config.get("exclude", []),
        )
        self._reply(MSG_REVIEWING)
        if not files:
            self._reply(MSG_NO_FILES)
            return

        raw = self.provider.generate(SYSTEM_INSTRUCTION, build_review_prompt(files), cancel=token)

        try:
            fix_set = parse_fix_set(raw)
        except MalformedResponseError as e:
            # The model answered in prose; show it as-is rather than failing.
            logger.warning("Could not parse fix proposal (%s); showing raw response", e)
            self._reply(raw or MSG_FALLBACK)
            return

        if not fix_set:
            self._reply(MSG_NO_ISSUES)
            return

        try:
            validate_fix_set(fix_set)
        except InvalidFixPayloadError as e:
            logger.warning("Rejected fix proposal: %s", e)
            self._reply(f"⚠️ Error: The proposed fixes are unusable. {e}. Nothing will be applied.")
            return
        self.gate.hold(fix_set)
        self._reply(f"{MSG_CONFIRM}\n\n{build_fix_summary(fix_set)}")

    def _apply(self) -> None:
        fix_set = self.gate.take()
        try:
            result = FixApplier(self.workspace).apply(fix_set, atomic=self.config.get("atomic_apply", True))
        except ApplyError as e:
            self._reply(f"⚠️ Error: {describe_apply_error(e)}")
            return
        logger.info("Applied fixes to %d file(s)", len(result.written))
        self._reply(f"✅ Fixes applied successfully.\n\nSummary:\n{result.summary}")

    def _chat(self, text: str, token: CancelToken) -> None:
        reply = self.provider.generate(SYSTEM_INSTRUCTION, self.history.with_pending(text), cancel=token)
        reply = reply or MSG_FALLBACK
        self.history.add_exchange(text, reply)
        self._reply(reply)
