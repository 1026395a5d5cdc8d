"""Run configuration.

Example:
    >>> from tfplan_commenter.config import CommenterSettings
    >>> settings = CommenterSettings.load("tfplan-commenter.yaml", mode="simple")
"""

from tfplan_commenter.config.settings import CommenterSettings, InitOptions

__all__ = ["CommenterSettings", "InitOptions"]
