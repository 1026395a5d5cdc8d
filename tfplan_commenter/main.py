"""CLI entry point for tfplan-commenter."""

import asyncio
import sys
from pathlib import Path
from typing import IO

import click
import structlog

from tfplan_commenter import __version__
from tfplan_commenter.config.settings import DEFAULT_BASE_URL, DEFAULT_TITLE, CommenterSettings
from tfplan_commenter.engine.reconciler import CommentReconciler
from tfplan_commenter.enums import Mode
from tfplan_commenter.exceptions import ConfigurationError, TfPlanCommenterError
from tfplan_commenter.models.domain import Action, CreateComment, EditComment
from tfplan_commenter.plan.runner import TerraformRunner
from tfplan_commenter.plan.summarizer import PlanSummarizer
from tfplan_commenter.providers.github_rest import GitHubCommentStore, open_session
from tfplan_commenter.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option("--log-level", default="INFO", envvar="PLUGIN_LOG_LEVEL", help="Logging level")
@click.version_option(__version__, prog_name="tfplan-commenter")
def cli(log_level: str) -> None:
    """tfplan-commenter: terraform plan output as a pull request comment."""
    configure_logging(log_level)


@cli.command()
@click.option("--config", "config_path", envvar="PLUGIN_CONFIG", help="Optional YAML settings file")
@click.option(
    "--api-key",
    envvar=["PLUGIN_API_KEY", "GITHUB_RELEASE_API_KEY", "GITHUB_TOKEN"],
    help="API key to access the GitHub API",
)
@click.option(
    "--username",
    envvar=["PLUGIN_USERNAME", "GITHUB_USERNAME", "DRONE_NETRC_USERNAME"],
    help="Basic auth username",
)
@click.option(
    "--password",
    envvar=["PLUGIN_PASSWORD", "GITHUB_PASSWORD", "DRONE_NETRC_PASSWORD"],
    help="Basic auth password",
)
@click.option(
    "--base-url",
    envvar=["PLUGIN_BASE_URL", "GITHUB_BASE_URL"],
    help=f"API URL, change for GitHub Enterprise (default: {DEFAULT_BASE_URL})",
)
@click.option("--title", envvar="PLUGIN_TITLE", help=f"Comment title (default: {DEFAULT_TITLE})")
@click.option("--mode", envvar="PLUGIN_MODE", help="Comment mode [summary, simple, full] (default: full)")
@click.option("--issue-num", envvar=["PLUGIN_ISSUE_NUM", "DRONE_PULL_REQUEST"], help="Issue or pull request number")
@click.option("--recreate", is_flag=True, envvar="PLUGIN_RECREATE", help="Post a new comment on every run")
@click.option("--repo-owner", envvar="DRONE_REPO_OWNER", help="Repository owner")
@click.option("--repo-name", envvar="DRONE_REPO_NAME", help="Repository name")
@click.option("--commit-sha", envvar="DRONE_COMMIT_SHA", help="Commit SHA used to find the pull request")
@click.option("--tf-root-dir", envvar="PLUGIN_ROOT_DIR", help="Directory with the terraform files")
@click.option("--tf-data-dir", envvar="PLUGIN_TF_DATA_DIR", help="TF_DATA_DIR for terraform (default: .terraform)")
@click.option("--init-options", envvar="PLUGIN_INIT_OPTIONS", help="JSON options for terraform init")
@click.option("--debug", is_flag=True, envvar="PLUGIN_DEBUG", help="Echo terraform commands")
@click.option(
    "--plan-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read plan text from this file instead of running terraform",
)
def run(
    config_path: str | None,
    api_key: str | None,
    username: str | None,
    password: str | None,
    base_url: str | None,
    title: str | None,
    mode: str | None,
    issue_num: str | None,
    recreate: bool,
    repo_owner: str | None,
    repo_name: str | None,
    commit_sha: str | None,
    tf_root_dir: str | None,
    tf_data_dir: str | None,
    init_options: str | None,
    debug: bool,
    plan_file: Path | None,
) -> None:
    """Render the terraform plan and publish it as a pull request comment."""
    try:
        settings = CommenterSettings.load(
            config_path,
            base_url=base_url,
            token=api_key,
            username=username,
            password=password,
            title=title,
            mode=mode,
            issue_number=issue_num,
            recreate=recreate or None,
            repo_owner=repo_owner,
            repo_name=repo_name,
            commit_sha=commit_sha,
            tf_root_dir=tf_root_dir,
            tf_data_dir=tf_data_dir,
            init_options=init_options,
            debug=debug or None,
        )
        action = asyncio.run(_run(settings, plan_file))
    except TfPlanCommenterError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("run_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error("run_unexpected", exc_info=True)
        sys.exit(1)

    click.echo(_describe_action(action))


@cli.command()
@click.argument("plan", type=click.File("r"), default="-")
@click.option("--mode", default=Mode.FULL.value, envvar="PLUGIN_MODE", help="Comment mode [summary, simple, full]")
@click.option("--title", default=DEFAULT_TITLE, envvar="PLUGIN_TITLE", help="Comment title")
def render(plan: IO[str], mode: str, title: str) -> None:
    """Print the comment body for a saved ``terraform show -no-color`` output."""
    try:
        message = PlanSummarizer(title).summarize(plan.read(), mode)
    except TfPlanCommenterError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    click.echo(message.text, nl=False)


async def _run(settings: CommenterSettings, plan_file: Path | None) -> Action:
    """Produce the plan text, render it and reconcile the comment."""
    # Reject bad input before terraform runs
    mode = Mode.parse(settings.mode)
    if settings.issue_number is None and not settings.commit_sha:
        raise ConfigurationError("Either an issue number or a commit SHA is required")

    if plan_file is not None:
        raw_text = plan_file.read_text(encoding="utf-8")
    else:
        runner = TerraformRunner(
            root_dir=settings.tf_root_dir,
            data_dir=settings.tf_data_dir,
            init_options=settings.init_options,
            debug=settings.debug,
        )
        await runner.prepare()
        raw_text = await runner.show_plan()

    message = PlanSummarizer(settings.title).summarize(raw_text, mode)

    async with open_session(
        owner=settings.repo_owner,
        repo=settings.repo_name,
        base_url=settings.base_url,
        token=settings.token.get_secret_value() if settings.token else None,
        username=settings.username,
        password=settings.password.get_secret_value() if settings.password else None,
    ) as session:
        reconciler = CommentReconciler(
            GitHubCommentStore(session),
            owner=settings.repo_owner,
            repo=settings.repo_name,
            title=settings.title,
        )
        return await reconciler.publish(
            message,
            issue_number=settings.issue_number,
            commit_sha=settings.commit_sha,
            recreate=settings.recreate,
        )


def _describe_action(action: Action) -> str:
    if isinstance(action, CreateComment):
        return "Created comment in PR"
    if isinstance(action, EditComment):
        return f"Updated comment {action.comment_id} in PR"
    return "Pull request number not found, nothing to comment on"


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
