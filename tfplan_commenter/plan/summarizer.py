"""Render raw plan output into a comment-ready message."""

import structlog

from tfplan_commenter.config.settings import DEFAULT_TITLE
from tfplan_commenter.enums import Mode
from tfplan_commenter.models.domain import RenderedMessage
from tfplan_commenter.plan.classifier import classify_line

log = structlog.get_logger(__name__)


class PlanSummarizer:
    """Reduce plan text to the projection selected by a mode.

    The summarizer is pure: the same text and mode always produce an
    identical message.
    """

    def __init__(self, title: str = DEFAULT_TITLE):
        """Initialize summarizer.

        Args:
            title: Heading placed above the fenced plan block
        """
        self.title = title

    def summarize(self, raw_text: str, mode: str | Mode) -> RenderedMessage:
        """Classify every line of ``raw_text`` in a single forward pass.

        Args:
            raw_text: Captured ``terraform show -no-color`` output
            mode: One of ``summary``, ``simple`` or ``full``

        Returns:
            RenderedMessage whose body holds the emitted lines, each
            terminated by a newline

        Raises:
            InvalidModeError: If mode is not recognized (checked before
                any line is read)
        """
        selected = Mode.parse(mode)

        emitted: list[str] = []
        for line in split_lines(raw_text):
            emitted.extend(classify_line(line, selected))

        body = "".join(f"{line}\n" for line in emitted)
        log.debug("plan_summarized", mode=selected.value, lines=len(emitted))
        return RenderedMessage(title=self.title, mode=selected, body=body)


def split_lines(raw_text: str) -> list[str]:
    r"""Split plan text on ``\n`` only, dropping a trailing ``\r`` from each line.

    Other characters that ``str.splitlines`` treats as breaks (form feed,
    U+2028, U+2029) stay inside the line.
    """
    lines = raw_text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def summarize(raw_text: str, mode: str | Mode, title: str = DEFAULT_TITLE) -> RenderedMessage:
    """Shortcut for ``PlanSummarizer(title).summarize(raw_text, mode)``."""
    return PlanSummarizer(title).summarize(raw_text, mode)
