from __future__ import annotations

from codemedic_core.history import Turn
from codemedic_core.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    MODEL = "claude-sonnet-4-20250514"
    ENV_VAR = "ANTHROPIC_API_KEY"
    # Low temperature keeps the fix proposal JSON stable between runs.
    TEMPERATURE = 0.3

    def __init__(self, api_key: str | None, model: str | None = None, timeout: float | None = 120.0):
        super().__init__(api_key, model=model, timeout=timeout)
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'codemedic[anthropic]'"
            )
        self.client = Anthropic(api_key=api_key)

    def _call_api(self, system_instruction: str, turns: list[Turn]) -> str | None:
        # Imported inside the method because the anthropic package is optional;
        # __init__ already validated it is installed before we reach here.
        from anthropic.types import TextBlock

        response = self.client.messages.create(
            model=self.model,
            system=system_instruction,
            messages=[{"role": turn.role, "content": turn.text} for turn in turns],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip() or None
