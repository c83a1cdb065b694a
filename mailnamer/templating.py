"""Filename templating utilities.

Templates embed ``%Property%`` or ``%Property|Format%`` tokens. A format made
only of digits truncates the value to that many characters; any other format
is a display format handled by :mod:`mailnamer.formatting`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from mailnamer.errors import InvalidFormatError, PropertyNotFoundError, TemplateError
from mailnamer.formatting import default_string, format_value

TOKEN_PATTERN = re.compile(r"%([^%|]+?)(?:\|([^%]*?))?%")
_TRUNCATION_PATTERN = re.compile(r"^[+-]?\d+$")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TemplateToken:
    """One well-formed token found in a template."""

    text: str
    name: str
    format_spec: str


def iter_tokens(template: str) -> Iterator[TemplateToken]:
    """Yield tokens left to right, duplicates included."""
    for match in TOKEN_PATTERN.finditer(template):
        yield _token_from_match(match)


def extract_properties(template: str) -> Iterator[str]:
    """Yield the property names a template references, in order."""
    for token in iter_tokens(template):
        yield token.name


def required_properties(template: str) -> list[str]:
    """Return the distinct property names a template needs, first use first."""
    return list(dict.fromkeys(extract_properties(template)))


def get_property(record: Any, name: str) -> Any:
    """Look up ``name`` on a mapping or attribute-bearing record.

    Exact names win; otherwise the first case-insensitive match is used.
    """
    if isinstance(record, Mapping):
        if name in record:
            return record[name]
        folded = name.casefold()
        for key, value in record.items():
            if isinstance(key, str) and key.casefold() == folded:
                return value
        raise PropertyNotFoundError(name)

    try:
        return getattr(record, name)
    except AttributeError:
        pass
    folded = name.casefold()
    for attribute in dir(record):
        if not attribute.startswith("_") and attribute.casefold() == folded:
            return getattr(record, attribute)
    raise PropertyNotFoundError(name)


def has_property(record: Any, name: str) -> bool:
    """Return True when ``record`` exposes ``name``."""
    try:
        get_property(record, name)
    except PropertyNotFoundError:
        return False
    return True


def resolve_property(record: Any, name: str, format_spec: str = "") -> str:
    """Resolve one property to the text that replaces its token."""
    value = get_property(record, name)

    if _TRUNCATION_PATTERN.match(format_spec):
        length = int(format_spec)
        if length < 1:
            raise InvalidFormatError(name, format_spec, "truncation length must be a positive integer")
        return default_string(value).lstrip()[:length].rstrip()

    try:
        return format_value(value, format_spec)
    except (TypeError, ValueError) as exc:
        raise InvalidFormatError(name, format_spec, str(exc)) from exc


def render_filename(record: Any, template: str) -> str:
    """Render an extensionless filename by substituting every token.

    The leftmost token is resolved and every occurrence of its exact text is
    replaced at once; this repeats until no token is left. Each pass removes at
    least two ``%`` characters, so the pass count is capped at half the
    template's ``%`` count. A ``%`` that never forms a token stays literal.
    """
    working = template
    max_passes = template.count("%") // 2
    passes = 0
    while True:
        match = TOKEN_PATTERN.search(working)
        if match is None:
            return working
        if passes >= max_passes:
            raise TemplateError(
                what=f"template '{template}' did not settle after {passes} substitutions.",
                why="a resolved property value introduced a new %token%",
                remediation="remove '%' characters from the referenced property values",
            )
        token = _token_from_match(match)
        value = resolve_property(record, token.name, token.format_spec)
        logger.debug("Resolved %s -> %r", token.text, value)
        working = working.replace(token.text, value)
        passes += 1


def _token_from_match(match: re.Match[str]) -> TemplateToken:
    return TemplateToken(text=match.group(0), name=match.group(1), format_spec=match.group(2) or "")
