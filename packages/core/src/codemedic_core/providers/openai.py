from __future__ import annotations

try:
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]

from codemedic_core.history import Turn
from codemedic_core.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    MODEL = "gpt-4o"
    ENV_VAR = "OPENAI_API_KEY"
    TEMPERATURE = 0.2

    def __init__(self, api_key: str | None, model: str | None = None, timeout: float | None = 120.0):
        super().__init__(api_key, model=model, timeout=timeout)
        if _OpenAI is None:
            raise ImportError(
                "The 'openai' package is required for this provider. "
                "Install it with: pip install 'codemedic[openai]'"
            )
        self.client = _OpenAI(api_key=api_key)

    @property
    def display_name(self) -> str:
        return "OpenAI"

    def _call_api(self, system_instruction: str, turns: list[Turn]) -> str | None:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_instruction},
                *({"role": turn.role, "content": turn.text} for turn in turns),
            ],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        return response.choices[0].message.content or None
