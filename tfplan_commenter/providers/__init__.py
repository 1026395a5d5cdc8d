"""Comment store implementations.

Key Components:
    - CommentStore: Abstract interface used by the reconciler
    - GitHubCommentStore: GitHub / GitHub Enterprise REST implementation
    - open_session: Builds the immutable StoreSession for a repository
"""

from tfplan_commenter.providers.base import CommentStore
from tfplan_commenter.providers.github_rest import GitHubCommentStore, StoreSession, open_session

__all__ = [
    "CommentStore",
    "GitHubCommentStore",
    "StoreSession",
    "open_session",
]
