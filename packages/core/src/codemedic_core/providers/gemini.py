from __future__ import annotations

from codemedic_core.history import Turn
from codemedic_core.providers.base import BaseProvider

# Gemini calls the assistant side of a conversation "model".
_ROLES = {"user": "user", "assistant": "model"}


class GeminiProvider(BaseProvider):
    MODEL = "gemini-2.5-flash"
    ENV_VAR = "GEMINI_API_KEY"

    def __init__(self, api_key: str | None, model: str | None = None, timeout: float | None = 120.0):
        super().__init__(api_key, model=model, timeout=timeout)
        try:
            from google import genai
        except ImportError:
            raise ImportError(
                "The 'google-genai' package is required for this provider. "
                "Install it with: pip install google-genai"
            )
        self.client = genai.Client(api_key=api_key)

    def _call_api(self, system_instruction: str, turns: list[Turn]) -> str | None:
        from google.genai import types

        response = self.client.models.generate_content(
            model=self.model,
            contents=[
                types.Content(role=_ROLES[turn.role], parts=[types.Part(text=turn.text)]) for turn in turns
            ],
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                max_output_tokens=self.MAX_TOKENS,
            ),
        )
        return first_candidate_text(response)


def first_candidate_text(response) -> str | None:
    """Return candidates[0].content.parts[0].text, or None for any other shape."""
    try:
        text = response.candidates[0].content.parts[0].text
    except (AttributeError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None
