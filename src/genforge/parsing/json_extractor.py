"""
genforge.parsing.json_extractor - Structured Output Recovery
==============================================================

Agents are asked to answer with JSON, but models wrap it in prose or code
fences. This module recovers the first usable JSON object.

Strategies (tried in order, the first that yields a JSON object wins):
    1. The body of a ```json fenced block.
    2. The substring from the first '{' to the last '}'.

A strategy that fails to parse, or parses to something other than an object,
is skipped. Nothing here ever raises on malformed input.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError


logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

_JSON_FENCE = re.compile(r"```json\s*\n(.*?)\n\s*```", re.DOTALL)


def extract_structured(text: str) -> Optional[dict[str, Any]]:
    """Return the first JSON object found in ``text``, or None.

    Example:
        >>> extract_structured('Here you go: {"a": 1} hope it helps')
        {'a': 1}
        >>> extract_structured("no braces here") is None
        True
    """
    for candidate in _candidates(text):
        try:
            value = json.loads(candidate)
        except (ValueError, RecursionError):
            continue
        if isinstance(value, dict):
            return value
    return None


def extract_model(
    text: str,
    model_cls: type[ModelT],
    default: Optional[ModelT] = None,
) -> Optional[ModelT]:
    """Extract a JSON object from ``text`` and validate it as ``model_cls``.

    Args:
        text: Raw agent response.
        model_cls: Pydantic model describing the expected structure.
        default: Returned when no object is found or validation fails
            (None unless given).

    Returns:
        The validated model, or ``default``.
    """
    data = extract_structured(text)
    if data is None:
        return default
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        logger.debug(
            "structured_output_invalid",
            model=model_cls.__name__,
            error_count=e.error_count(),
        )
        return default


def _candidates(text: str) -> list[str]:
    candidates: list[str] = []
    fenced = _JSON_FENCE.search(text)
    if fenced is not None:
        candidates.append(fenced.group(1))
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])
    return candidates
