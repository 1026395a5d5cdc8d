"""tfplan-commenter: post terraform plan summaries as a single, self-updating PR comment."""

__version__ = "1.0.0"
