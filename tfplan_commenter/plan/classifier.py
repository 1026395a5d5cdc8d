"""Per-line classification of ``terraform show -no-color`` output.

Each mode is a projection of the plan text. The classifier decides, for a
single line, which lines (zero, one or two) that mode emits for it:

    full:     everything; lines indented by exactly two spaces before a
              diff marker (``+ - ~ #``) are pulled to column zero
    simple:   resource headers (``# ...``), a blank line before the
              ``Plan:`` totals, and the "This plan does nothing." notice
    summary:  the ``Plan:`` totals line and the no-op notice only

Rules are checked in order and the first match wins. The classifier keeps no
state between lines.
"""

import re

from tfplan_commenter.enums import Mode

RESOURCE_HEADER = re.compile(r"^#")
PLAN_TOTALS = re.compile(r"^Plan:")
DIFF_SYMBOL = re.compile(r"^ {2}[+\-~#]")
NO_CHANGES = re.compile(re.escape("This plan does nothing."))


def classify_line(line: str, mode: Mode) -> list[str]:
    """Return the lines ``mode`` emits for one line of plan output.

    Args:
        line: A single line without its line terminator
        mode: Projection to apply

    Returns:
        Zero or more lines, without terminators, in emission order
    """
    trimmed = line.lstrip()

    if mode is Mode.FULL:
        if DIFF_SYMBOL.match(line):
            return [trimmed]
        return [line]

    if mode is Mode.SIMPLE:
        if RESOURCE_HEADER.match(trimmed):
            return [trimmed]
        if PLAN_TOTALS.match(trimmed):
            return ["", trimmed]
        if NO_CHANGES.search(line):
            return [line]
        return []

    if PLAN_TOTALS.match(trimmed):
        return [trimmed]
    if NO_CHANGES.search(line):
        return [line]
    return []
