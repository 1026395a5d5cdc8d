"""
Keep exactly one plan comment per (repository, title, issue).

Each run searches the issue's comments for the fingerprint marker left by a
previous run and edits that comment instead of posting a new one. The
search-before-write is best effort: two runs racing on the same issue can
both create a comment.

Example:
    >>> async with open_session(owner, repo, token=token) as session:
    ...     reconciler = CommentReconciler(GitHubCommentStore(session), owner, repo, title)
    ...     action = await reconciler.publish(message, issue_number=None, commit_sha=sha)
"""

import structlog

from tfplan_commenter.engine.fingerprint import comment_marker, fingerprint, with_marker
from tfplan_commenter.exceptions import CommentStoreError
from tfplan_commenter.models.domain import (
    Action,
    Comment,
    CreateComment,
    EditComment,
    RenderedMessage,
    Skip,
)
from tfplan_commenter.providers.base import CommentStore

log = structlog.get_logger(__name__)

NO_TARGET_REASON = "no pull request found for commit"


class CommentReconciler:
    """Decide between creating and editing the status comment, then do it."""

    def __init__(self, store: CommentStore, owner: str, repo: str, title: str):
        """Initialize reconciler.

        Args:
            store: Comment store bound to the repository
            owner: Repository owner
            repo: Repository name
            title: Comment title, part of the fingerprint
        """
        self.store = store
        self.owner = owner
        self.repo = repo
        self.title = title

    async def publish(
        self,
        message: RenderedMessage | str,
        issue_number: int | None,
        commit_sha: str = "",
        recreate: bool = False,
    ) -> Action:
        """Resolve the target issue, reconcile and apply the result.

        Args:
            message: Rendered plan message
            issue_number: Target issue; looked up from ``commit_sha`` when None
            commit_sha: Commit of the current run
            recreate: Always post a new comment

        Returns:
            The action that was carried out. ``Skip`` means no pull request
            references the commit and nothing was written.

        Raises:
            CommentStoreError: If any store call fails
        """
        if issue_number is None:
            issue_number = await self.resolve_issue_number(commit_sha)
            if issue_number is None:
                log.info("pull_request_not_found", commit_sha=commit_sha)
                return Skip(NO_TARGET_REASON)

        key = fingerprint(self.owner, self.repo, self.title, issue_number)
        action = await self.reconcile(message, key, recreate, issue_number)
        await self.apply(action, issue_number)
        return action

    async def resolve_issue_number(self, commit_sha: str) -> int | None:
        """Find the open issue or pull request that references a commit.

        Returns:
            The first matching number, or None when the search is empty
        """
        numbers = await self.store.search_issue_numbers(f"{commit_sha} is:open")
        if not numbers:
            return None

        log.info("pull_request_resolved", commit_sha=commit_sha, issue_number=numbers[0])
        return numbers[0]

    async def reconcile(
        self,
        message: RenderedMessage | str,
        key: str,
        recreate: bool,
        issue_number: int,
    ) -> Action:
        """Choose the write for this run without performing it.

        Args:
            message: Rendered plan message
            key: Fingerprint of the target
            recreate: Skip the lookup and always create
            issue_number: Issue whose comments are searched

        Returns:
            CreateComment or EditComment carrying the marked body
        """
        body = with_marker(str(message), key)

        if recreate:
            return CreateComment(body)

        existing = self.find_marked(await self.fetch_all_comments(issue_number), key)
        if existing is None:
            return CreateComment(body)
        return EditComment(existing.id, body)

    async def fetch_all_comments(self, issue_number: int) -> list[Comment]:
        """Walk the paginated listing until the store reports no next page."""
        comments: list[Comment] = []
        page = 1
        while True:
            result = await self.store.list_comments(issue_number, page=page)
            comments.extend(result.comments)
            if result.next_page is None:
                break
            if result.next_page <= page:
                raise CommentStoreError(f"Comment listing did not advance past page {page}")
            page = result.next_page

        log.debug("comments_fetched", issue_number=issue_number, count=len(comments))
        return comments

    @staticmethod
    def find_marked(comments: list[Comment], key: str) -> Comment | None:
        """Return the first comment carrying the marker for ``key``."""
        marker = comment_marker(key)
        for comment in comments:
            if marker in comment.body:
                return comment
        return None

    async def apply(self, action: Action, issue_number: int) -> None:
        """Perform the single write an action stands for."""
        if isinstance(action, CreateComment):
            comment = await self.store.create_comment(issue_number, action.body)
            log.info("comment_created", issue_number=issue_number, comment_id=comment.id)
        elif isinstance(action, EditComment):
            await self.store.edit_comment(action.comment_id, action.body)
            log.info("comment_updated", issue_number=issue_number, comment_id=action.comment_id)
        else:
            log.info("comment_skipped", reason=action.reason)
