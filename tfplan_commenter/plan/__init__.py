"""Plan text acquisition and classification.

Key Components:
    - classify_line: Per-line projection rules for each comment mode
    - PlanSummarizer: Single-pass rendering of a whole plan
    - TerraformRunner: Captures ``terraform show -no-color`` output

Example:
    >>> from tfplan_commenter.plan import PlanSummarizer
    >>> message = PlanSummarizer("Terraform Plan Output").summarize(text, "simple")
    >>> print(message.text)
"""

from tfplan_commenter.plan.classifier import classify_line
from tfplan_commenter.plan.runner import TerraformRunner
from tfplan_commenter.plan.summarizer import PlanSummarizer, summarize

__all__ = [
    "PlanSummarizer",
    "TerraformRunner",
    "classify_line",
    "summarize",
]
