"""Exceptions raised by cronmatch."""

from __future__ import annotations

from cronmatch.fields import CronFieldType


class CronError(Exception):
    """Base class for cronmatch errors."""


class CronParseError(CronError, ValueError):
    """Raised when cron expression parsing fails.

    Attributes:
        expression: The expression being parsed.
        field: Field in which the problem was found, if any.
        token: Offending token, if any.
        bound: The violated limit, if a bound was violated.
    """

    def __init__(
        self,
        message: str,
        expression: str = "",
        *,
        field: CronFieldType | None = None,
        token: str | None = None,
        bound: int | None = None,
    ) -> None:
        self.expression = expression
        self.field = field
        self.token = token
        self.bound = bound
        super().__init__(message)

    @classmethod
    def invalid(
        cls,
        expression: str,
        detail: str,
        *,
        field: CronFieldType | None = None,
        token: str | None = None,
        bound: int | None = None,
    ) -> "CronParseError":
        """Build an error with the standard message prefix."""
        return cls(
            f"Invalid cron expression [{expression}]. {detail}",
            expression,
            field=field,
            token=token,
            bound=bound,
        )


class CronOptionsError(CronError, ValueError):
    """Raised when match options cannot be used (bad zone, bad instant, bad limits)."""
