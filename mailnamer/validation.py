"""Required-property checks and skipped-message reporting."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from mailnamer.templating import has_property, required_properties

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SkippedMessage:
    """A message left out of the archive and the reason it was skipped."""

    source: str
    reason: str
    missing_properties: tuple[str, ...] = field(default_factory=tuple)


def missing_properties(record: Any, template: str) -> list[str]:
    """Return the template's properties that ``record`` does not expose."""
    return [name for name in required_properties(template) if not has_property(record, name)]


def has_required_properties(record: Any, template: str) -> bool:
    """Return True when every property the template references is present."""
    return not missing_properties(record, template)


def report_missing(record: Any, template: str, *, source: str, skipped: list[SkippedMessage]) -> bool:
    """Record a skip for ``source`` when properties are missing.

    Returns True when the record can be rendered, False after appending a
    :class:`SkippedMessage` to ``skipped``.
    """
    missing = missing_properties(record, template)
    if not missing:
        return True

    reason = f"missing properties: {', '.join(missing)}"
    logger.warning("Skipping %s (%s)", source, reason)
    skipped.append(SkippedMessage(source=source, reason=reason, missing_properties=tuple(missing)))
    return False
