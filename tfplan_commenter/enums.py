"""Enumerations for tfplan-commenter."""

from enum import Enum

from tfplan_commenter.exceptions import InvalidModeError


class Mode(str, Enum):
    """Verbosity of the rendered plan comment.

    - summary: only the ``Plan:`` totals line (or the no-op notice)
    - simple: resource headers plus the totals line
    - full: the whole plan with diff markers pulled to column zero
    """

    SUMMARY = "summary"
    SIMPLE = "simple"
    FULL = "full"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | Mode") -> "Mode":
        """Convert a configured mode string into a Mode.

        Raises:
            InvalidModeError: If the value is not one of the known modes
        """
        if isinstance(value, Mode):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidModeError(str(value), [m.value for m in cls]) from e
