"""Comment reconciliation.

Key Components:
    - fingerprint: Stable key for a (repository, title, issue)
    - CommentReconciler: Create-or-edit decision and the single write
"""

from tfplan_commenter.engine.fingerprint import comment_marker, fingerprint
from tfplan_commenter.engine.reconciler import CommentReconciler

__all__ = [
    "CommentReconciler",
    "comment_marker",
    "fingerprint",
]
