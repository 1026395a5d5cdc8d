"""
Abstract comment store interface.

The reconciler only needs four calls from a code-review backend: one page of
an issue's comments, comment creation, comment editing and an issue search.
Implementations translate their API into the domain models of
``tfplan_commenter.models.domain``.
"""

from abc import ABC, abstractmethod

from tfplan_commenter.models.domain import Comment, CommentPage


class CommentStore(ABC):
    """Abstract base class for comment store implementations.

    Every method performs at most one network round trip. Failures are
    raised as ``CommentStoreError``; nothing is retried.
    """

    @abstractmethod
    async def list_comments(self, issue_number: int, page: int = 1) -> CommentPage:
        """Fetch one page of comments on an issue.

        Args:
            issue_number: Repository-scoped issue or pull request number
            page: 1-based page number

        Returns:
            CommentPage with the comments in store order and the next page
            number, or ``next_page=None`` on the last page.

        Raises:
            CommentStoreError: If the request fails.
        """
        pass

    @abstractmethod
    async def create_comment(self, issue_number: int, body: str) -> Comment:
        """Post a new comment on an issue.

        Raises:
            CommentStoreError: If the request fails.
        """
        pass

    @abstractmethod
    async def edit_comment(self, comment_id: int, body: str) -> Comment:
        """Replace the whole body of an existing comment.

        Raises:
            CommentStoreError: If the request fails.
        """
        pass

    @abstractmethod
    async def search_issue_numbers(self, query: str) -> list[int]:
        """Search issues and pull requests in the repository.

        Args:
            query: Free-text query; the implementation scopes it to the
                configured repository.

        Returns:
            Matching issue numbers in store order, possibly empty.

        Raises:
            CommentStoreError: If the request fails.
        """
        pass
