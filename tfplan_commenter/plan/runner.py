"""Produce raw plan text by driving the terraform CLI.

The pipeline runs ``terraform plan -out=...`` in an earlier step; this runner
re-initializes the working directory and captures
``terraform show -no-color`` of the saved plan file.
"""

import os
import shutil
from collections.abc import Sequence
from pathlib import Path

import click
import structlog

from tfplan_commenter.config.settings import InitOptions
from tfplan_commenter.exceptions import PlanCommandError
from tfplan_commenter.utils.async_subprocess import run_command

log = structlog.get_logger(__name__)

DEFAULT_DATA_DIR = ".terraform"
PLAN_FILE = "plan.tfout"


def plan_file_path(data_dir: str | None) -> str:
    """Name of the saved plan for a terraform data directory.

    The default data directory keeps the plain ``plan.tfout``; any other
    directory prefixes it, e.g. ``.terraform-prod.plan.tfout``.
    """
    if not data_dir or data_dir == DEFAULT_DATA_DIR:
        return PLAN_FILE
    return f"{data_dir}.{PLAN_FILE}"


def init_arguments(options: InitOptions) -> list[str]:
    """Build the argument list for ``terraform init``."""
    args = ["init"]
    args.extend(f"-backend-config={value}" for value in options.backend_config)

    # terraform defaults: lock=true, lock-timeout=0s
    if options.lock is not None:
        args.append(f"-lock={str(options.lock).lower()}")
    if options.lock_timeout:
        args.append(f"-lock-timeout={options.lock_timeout}")

    args.append("-input=false")
    return args


class TerraformRunner:
    """Run terraform commands inside the configured root directory."""

    def __init__(
        self,
        root_dir: str | None = None,
        data_dir: str = DEFAULT_DATA_DIR,
        init_options: InitOptions | None = None,
        debug: bool = False,
        binary: str = "terraform",
    ):
        """Initialize runner.

        Args:
            root_dir: Directory holding the terraform files, relative to the
                current directory. None means the current directory.
            data_dir: Value exported as TF_DATA_DIR
            init_options: Extra flags for ``terraform init``
            debug: Echo each command before running it
            binary: terraform executable
        """
        self.root_dir = root_dir
        self.data_dir = data_dir or DEFAULT_DATA_DIR
        self.init_options = init_options or InitOptions()
        self.debug = debug
        self.binary = binary

    @property
    def working_dir(self) -> Path:
        """Directory every command runs in."""
        cwd = Path.cwd()
        if self.root_dir:
            return cwd / self.root_dir
        return cwd

    @property
    def plan_file(self) -> str:
        return plan_file_path(self.data_dir)

    def environment(self) -> dict[str, str]:
        """Parent environment with TF_DATA_DIR pointed at the data directory."""
        return {**os.environ, "TF_DATA_DIR": self.data_dir}

    async def prepare(self) -> None:
        """Print the version, reset the data directory, init and fetch modules."""
        await self._run(["version"])

        data_path = self.working_dir / self.data_dir
        log.debug("terraform_data_dir_cleared", path=str(data_path))
        shutil.rmtree(data_path, ignore_errors=True)

        await self._run(init_arguments(self.init_options))
        await self._run(["get"])

    async def show_plan(self) -> str:
        """Return ``terraform show -no-color`` of the saved plan."""
        return await self._run(["show", "-no-color", self.plan_file], capture=True)

    async def _run(self, args: Sequence[str], capture: bool = False) -> str:
        command = [self.binary, *args]
        if self.debug:
            click.echo(f"$ {' '.join(command)}", err=True)
        log.info("terraform_command_started", command=command, cwd=str(self.working_dir))

        try:
            stdout, stderr, code = await run_command(
                *command,
                cwd=self.working_dir,
                env=self.environment(),
                capture_output=capture,
            )
        except FileNotFoundError as e:
            raise PlanCommandError(command, 127, str(e)) from e

        if code != 0:
            log.error("terraform_command_failed", command=command, returncode=code)
            raise PlanCommandError(command, code, stderr or None)

        log.debug("terraform_command_completed", command=command)
        return stdout
