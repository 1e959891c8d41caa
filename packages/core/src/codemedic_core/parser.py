"""Turn raw model output into a validated FixSet.

Models wrap JSON in prose or fences despite being told not to, so the parser
takes the widest ``{ ... }`` span rather than trusting the whole response.
Shape checks run immediately after parsing, before a FixSet can ever be held
as pending.
"""

from __future__ import annotations

import json
import logging

from codemedic_core.errors import InvalidFixPayloadError, MalformedJsonError, NoJsonFoundError
from codemedic_core.models import FixSet

logger = logging.getLogger(__name__)


def extract_json(text: str | None) -> str:
    """Return the span from the first ``{`` to the last ``}`` inclusive."""
    if not text:
        raise NoJsonFoundError()
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        raise NoJsonFoundError()
    return text[first : last + 1]


def parse_fix_set(raw: str | None) -> FixSet:
    """Parse a fix proposal.

    Returns ``FixSet.empty()`` when the payload has no usable ``files`` list;
    the caller treats that as "no issues found".
    """
    span = extract_json(raw)
    try:
        payload = json.loads(span)
    except json.JSONDecodeError as e:
        logger.warning("Model response is not valid JSON: %s", span[:200])
        raise MalformedJsonError(f"Malformed JSON in response: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedJsonError("Top-level JSON value is not an object.")
    return FixSet.from_payload(payload)


def is_writable_text(value) -> bool:
    """True for a non-empty string that can be written to disk as UTF-8.

    JSON escapes can carry lone surrogates (``"\\ud800"``), which decode to a
    str but fail on encode.
    """
    if not value or not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_fix_set(fix_set: FixSet) -> None:
    """Raise InvalidFixPayloadError for the first entry that cannot be applied."""
    for index, fix in enumerate(fix_set.files):
        label = fix.path or f"files[{index}]"
        if not fix.path:
            raise InvalidFixPayloadError(label, "path")
        if not isinstance(fix.issues, list) or not all(isinstance(issue, str) for issue in fix.issues):
            raise InvalidFixPayloadError(label, "issues")
        if not is_writable_text(fix.fixed_code):
            raise InvalidFixPayloadError(label, "fixedCode")
