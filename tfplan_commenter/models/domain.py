"""
Domain models for tfplan-commenter.

These are the normalized internal representations of comment-store records
and of the decisions the reconciler makes about them. Provider-specific
payloads (GitHub JSON) are converted into these models at the adapter
boundary.

Example:
    Deciding what to do with an existing comment::

        action = await reconciler.reconcile(message, key, recreate=False, issue_number=7)
        if isinstance(action, EditComment):
            print(f"will update comment {action.comment_id}")
"""

from dataclasses import dataclass, field

from tfplan_commenter.enums import Mode


@dataclass(frozen=True)
class RenderedMessage:
    """Mode-specific projection of a plan, ready to be wrapped into a comment.

    ``body`` is the classified plan text; ``text`` is the published form with
    the title header and the fenced block, identical in shape for every mode.
    """

    title: str
    mode: Mode
    body: str

    @property
    def text(self) -> str:
        """Return the message as it appears in the comment, before the marker."""
        return f"## {self.title}\n\n```diff\n{self.body}```\n"

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Comment:
    """A single comment on an issue or pull request."""

    id: int
    """Store-assigned comment identifier, used for edits."""

    body: str
    """Comment content in markdown format."""


@dataclass(frozen=True)
class CommentPage:
    """One page of an issue's comment listing."""

    comments: list[Comment] = field(default_factory=list)
    next_page: int | None = None
    """Page number to request next, or None when this was the last page."""


@dataclass(frozen=True)
class CreateComment:
    """Post a new comment carrying ``body``."""

    body: str


@dataclass(frozen=True)
class EditComment:
    """Replace the body of an existing comment."""

    comment_id: int
    body: str


@dataclass(frozen=True)
class Skip:
    """Make no comment call at all."""

    reason: str


Action = CreateComment | EditComment | Skip
