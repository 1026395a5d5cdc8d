"""Core domain models for tfplan-commenter.

Key Models:
    - RenderedMessage: Classified plan text plus its title header
    - Comment: Issue/PR comment as returned by the store
    - CommentPage: One page of a paginated comment listing
    - CreateComment / EditComment / Skip: Reconciler decisions

Example:
    >>> from tfplan_commenter.models import CreateComment, EditComment
    >>> action = EditComment(comment_id=10, body="## Terraform Plan Output\\n...")
"""

from tfplan_commenter.models.domain import (
    Action,
    Comment,
    CommentPage,
    CreateComment,
    EditComment,
    RenderedMessage,
    Skip,
)

__all__ = [
    "Action",
    "Comment",
    "CommentPage",
    "CreateComment",
    "EditComment",
    "RenderedMessage",
    "Skip",
]
