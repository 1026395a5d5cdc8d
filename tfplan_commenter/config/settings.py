"""
Configuration for a tfplan-commenter run using Pydantic settings.

Values come from, in increasing priority: field defaults, ``PLUGIN_*``
environment variables, an optional YAML file, and explicit overrides passed
by the CLI.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from tfplan_commenter.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.github.com/"
DEFAULT_TITLE = "Terraform Plan Output"


class InitOptions(BaseModel):
    """Options for ``terraform init``, given as JSON in the plugin settings.

    Example::

        {"backend-config": ["bucket=tf-state"], "lock": false, "lock-timeout": "30s"}
    """

    model_config = ConfigDict(populate_by_name=True)

    backend_config: list[str] = Field(default_factory=list, alias="backend-config")
    lock: bool | None = Field(default=None, description="None keeps terraform's default (true)")
    lock_timeout: str | None = Field(default=None, alias="lock-timeout")


class CommenterSettings(BaseSettings):
    """Settings for one pipeline run."""

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(default=DEFAULT_BASE_URL, description="GitHub API URL, change for GitHub Enterprise")
    token: SecretStr | None = Field(default=None, description="API token")
    username: str | None = Field(default=None, description="Basic auth username")
    password: SecretStr | None = Field(default=None, description="Basic auth password")

    repo_owner: str = Field(..., min_length=1, description="Repository owner")
    repo_name: str = Field(..., min_length=1, description="Repository name")
    commit_sha: str = Field(default="", description="Commit used to find the pull request")
    issue_number: int | None = Field(default=None, ge=1, description="Issue or pull request number")

    title: str = Field(default=DEFAULT_TITLE, description="Comment title")
    mode: str = Field(default="full", description="Comment mode: summary, simple or full")
    recreate: bool = Field(default=False, description="Post a new comment on every run")

    tf_root_dir: str | None = Field(default=None, description="Directory with the terraform files")
    tf_data_dir: str = Field(default=".terraform", description="Value for TF_DATA_DIR")
    init_options: InitOptions = Field(default_factory=InitOptions)
    debug: bool = Field(default=False, description="Echo terraform commands")

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, value: str) -> str:
        """Always end the API URL with a slash."""
        if not value.endswith("/"):
            return f"{value}/"
        return value

    @field_validator("issue_number", mode="before")
    @classmethod
    def empty_issue_number(cls, value: Any) -> Any:
        """Treat 0 and empty strings (unset CI variables) as no issue number."""
        if value in (None, "", 0, "0"):
            return None
        return value

    @field_validator("init_options", mode="before")
    @classmethod
    def parse_init_options(cls, value: Any) -> Any:
        """Accept init options as a JSON string."""
        if isinstance(value, str):
            if not value.strip():
                return {}
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"init_options is not valid JSON: {e.msg}") from e
        return value

    @model_validator(mode="after")
    def require_credentials(self) -> CommenterSettings:
        """Require a token or a complete username/password pair."""
        has_token = self.token is not None and self.token.get_secret_value().strip() != ""
        has_basic = bool(self.username) and self.password is not None and self.password.get_secret_value() != ""
        if not has_token and not has_basic:
            raise ValueError("You must provide an API key (token) or a username and password")
        return self

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> CommenterSettings:
        """Build settings from an optional YAML file plus explicit overrides.

        Overrides that are None are ignored so that they fall back to the
        file, the environment or the defaults.

        Raises:
            ConfigurationError: If the file is unusable or validation fails
        """
        values: dict[str, Any] = cls._read_yaml(config_path) if config_path else {}
        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {describe_errors(e)}") from e
        except SettingsError as e:
            raise ConfigurationError(f"Invalid configuration in environment: {e}") from e

    @classmethod
    def _read_yaml(cls, config_path: str) -> dict[str, Any]:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            return {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")
        return config_dict


def describe_errors(error: ValidationError) -> str:
    """Summarize validation errors by setting name, without input values."""
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "settings"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


ENV_PLACEHOLDER = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def interpolate_env_vars(content: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` with environment values.

    YAML comment lines are left untouched.

    Raises:
        ValueError: If a variable without default is not set
    """

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2)
        value = os.getenv(var_name)

        if value is not None:
            return value
        if default_value is not None:
            return default_value
        raise ValueError(f"Environment variable {var_name} is not set")

    def process_line(line: str) -> str:
        if line.lstrip().startswith("#"):
            return line
        return ENV_PLACEHOLDER.sub(replace_var, line)

    return "\n".join(process_line(line) for line in content.split("\n"))
