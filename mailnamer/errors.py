"""Error helpers and structured error types for user-facing failures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes used by the mailnamer CLI."""

    OK = 0
    INTERNAL = 1
    CONFIG = 2
    VALIDATION = 3
    TEMPLATE = 4
    PROCESSING = 5


@dataclass(slots=True)
class MailNamerError(Exception):
    """Structured base error carrying user-facing triad and an exit code."""

    what: str
    why: str
    remediation: str
    exit_code: int = int(ExitCode.VALIDATION)

    def __str__(self) -> str:
        """Render the standardized user-facing message."""
        return format_user_error(what=self.what, why=self.why, how_to_fix=self.remediation)


class ConfigError(MailNamerError):
    """Failure caused by invalid or missing configuration."""

    def __init__(self, *, what: str, why: str, remediation: str) -> None:
        super().__init__(what=what, why=why, remediation=remediation, exit_code=int(ExitCode.CONFIG))


class ValidationError(MailNamerError):
    """Failure caused by invalid user input or an unusable message file."""

    def __init__(self, *, what: str, why: str, remediation: str) -> None:
        super().__init__(what=what, why=why, remediation=remediation, exit_code=int(ExitCode.VALIDATION))


class TemplateError(MailNamerError):
    """Failure while rendering a filename template against a record."""

    def __init__(self, *, what: str, why: str, remediation: str) -> None:
        super().__init__(what=what, why=why, remediation=remediation, exit_code=int(ExitCode.TEMPLATE))


class PropertyNotFoundError(TemplateError):
    """A template token referenced a property the record does not have."""

    def __init__(self, property_name: str) -> None:
        super().__init__(
            what=f"property '{property_name}' not found on the message.",
            why="the filename template references it and no default is substituted",
            remediation=f"remove %{property_name}% from the template or use messages that carry it",
        )
        self.property_name = property_name


class InvalidFormatError(TemplateError):
    """A token's format could not be applied to the property value."""

    def __init__(self, property_name: str, format_spec: str, why: str) -> None:
        super().__init__(
            what=f"invalid format '{format_spec}' for property '{property_name}'.",
            why=why,
            remediation="use a positive truncation length or a format valid for the property type",
        )
        self.property_name = property_name
        self.format_spec = format_spec


class ProcessingError(MailNamerError):
    """Failure caused while archiving one or more messages."""

    def __init__(self, *, what: str, why: str, remediation: str) -> None:
        super().__init__(what=what, why=why, remediation=remediation, exit_code=int(ExitCode.PROCESSING))


def format_user_error(*, what: str, why: str, how_to_fix: str) -> str:
    """Build a structured error message for users.

    Args:
        what: A concise description of what failed.
        why: Why the failure happened.
        how_to_fix: Immediate actionable remediation steps.

    Returns:
        A three-part error message string.
    """
    return f"what: {what}; why: {why}; how-to-fix: {how_to_fix}"
