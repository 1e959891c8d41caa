"""Base provider implementing the Template Method pattern.

All providers share the same generation algorithm:
    generate() → _to_turns()
               → _run_with_deadline() → _call_api()   ← only this differs per provider
               → text | None

Subclasses implement two things only:
  - __init__: validate the credential and store the SDK client
  - _call_api: make one raw API call and return the text response (or None
    when the response carries no text)

Nothing is retried: a failed call surfaces once to the user as a single
error reply, and the user decides whether to ask again.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from time import monotonic
from typing import Iterable, Union

from codemedic_core.errors import AuthenticationError, RequestCancelledError, UpstreamError
from codemedic_core.history import ConversationHistory, Turn

logger = logging.getLogger(__name__)

_MAX_TOKENS = 8192
_DEFAULT_TIMEOUT = 120.0
# How often a waiting caller checks its cancel token.
_POLL_INTERVAL = 0.1

Contents = Union[str, ConversationHistory, Iterable[Turn]]


class CancelToken:
    """Per-request cancellation flag shared between the caller and the session."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class BaseProvider(ABC):
    MODEL: str = ""
    MAX_TOKENS: int = _MAX_TOKENS
    ENV_VAR: str = ""

    def __init__(self, api_key: str | None, model: str | None = None, timeout: float | None = _DEFAULT_TIMEOUT):
        if not api_key:
            raise AuthenticationError(
                f"{self.display_name} API key is not set. Set {self.ENV_VAR} or run `codemedic init`."
            )
        self.model = model or self.MODEL
        self.timeout = timeout
        self._executor = self._new_executor()

    @property
    def display_name(self) -> str:
        return self.__class__.__name__.removesuffix("Provider")

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def generate(
        self,
        system_instruction: str,
        contents: Contents,
        cancel: CancelToken | None = None,
    ) -> str | None:
        """Run one generation and return its text, or None if none was produced.

        ``contents`` is either a single prompt string (review path) or the
        bounded conversation turns (chat path).
        """
        turns = self._to_turns(contents)
        future = self._executor.submit(self._call_api, system_instruction, turns)
        return self._run_with_deadline(future, cancel)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix=self.__class__.__name__)

    def _abandon(self, future: Future) -> None:
        """Give up on a call that may still be running.

        The running worker cannot be stopped, so the executor that owns it is
        replaced and the next request starts on a fresh worker.
        """
        future.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._executor = self._new_executor()

    # ------------------------------------------------------------------ #
    # Abstract — implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, system_instruction: str, turns: list[Turn]) -> str | None:
        """Make a single API call and return the raw text response.

        Should raise on failure; generate() wraps whatever is raised in
        UpstreamError.
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _to_turns(contents: Contents) -> list[Turn]:
        if isinstance(contents, str):
            return [Turn(role="user", text=contents)]
        return list(contents)

    def _run_with_deadline(self, future: Future, cancel: CancelToken | None) -> str | None:
        """Wait for the call, honouring the timeout and the cancel token.

        SDK calls cannot be interrupted, so on cancel or timeout the worker is
        abandoned and its eventual result discarded.
        """
        deadline = None if self.timeout is None else monotonic() + self.timeout
        while True:
            if cancel is not None and cancel.cancelled:
                self._abandon(future)
                logger.info("%s request cancelled", self.display_name)
                raise RequestCancelledError()
            wait = _POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - monotonic()
                if remaining <= 0:
                    self._abandon(future)
                    logger.error("%s request timed out after %ss", self.display_name, self.timeout)
                    raise UpstreamError(f"{self.display_name} did not respond within {self.timeout:g}s.")
                wait = min(wait, remaining)
            try:
                return future.result(timeout=wait)
            except FutureTimeoutError:
                continue
            except Exception as e:
                logger.error("%s API call failed: %s", self.display_name, e)
                raise UpstreamError(f"{self.display_name} request failed: {e}") from e
