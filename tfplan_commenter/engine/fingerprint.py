"""Stable identifiers for the status comment of a (repository, title, issue).

The fingerprint is embedded in the comment body as an HTML comment, which
GitHub does not render, so later runs can find the comment they posted.

The fields are joined with ``/`` before hashing, so an owner or repository
name that itself contains ``/`` can produce the same key as a different
split of the same characters. Owner and repository names on GitHub cannot
contain ``/``, so only the title can trigger this.
"""

import hashlib

MARKER_TEMPLATE = "<!-- id: {key} -->"


def fingerprint(owner: str, repo: str, title: str, issue_number: int) -> str:
    """Derive the comment key for a target.

    Args:
        owner: Repository owner
        repo: Repository name
        title: Comment title
        issue_number: Issue or pull request number

    Returns:
        Lowercase hex SHA-256 digest (64 characters)
    """
    key = f"{owner}/{repo}/{title}/{issue_number}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def comment_marker(key: str) -> str:
    """Return the invisible sentinel that carries ``key`` in a comment body."""
    return MARKER_TEMPLATE.format(key=key)


def with_marker(message: str, key: str) -> str:
    """Append the marker for ``key`` to a rendered message."""
    return f"{message}\n{comment_marker(key)}\n"
