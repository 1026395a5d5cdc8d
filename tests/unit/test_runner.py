"""Tests for tfplan_commenter/plan/runner.py."""

from unittest.mock import AsyncMock, patch

import pytest

from tfplan_commenter.config.settings import InitOptions
from tfplan_commenter.exceptions import PlanCommandError
from tfplan_commenter.plan.runner import TerraformRunner, init_arguments, plan_file_path


@pytest.fixture
def mock_run_command():
    with patch("tfplan_commenter.plan.runner.run_command", new_callable=AsyncMock) as mock:
        mock.return_value = ("", "", 0)
        yield mock


def commands(mock) -> list[list[str]]:
    return [list(call.args) for call in mock.await_args_list]


class TestPlanFilePath:
    @pytest.mark.parametrize("data_dir", ["", None, ".terraform"])
    def test_default_data_dir(self, data_dir):
        assert plan_file_path(data_dir) == "plan.tfout"

    def test_custom_data_dir(self):
        assert plan_file_path(".terraform-prod") == ".terraform-prod.plan.tfout"


class TestInitArguments:
    def test_defaults(self):
        assert init_arguments(InitOptions()) == ["init", "-input=false"]

    def test_all_options(self):
        options = InitOptions(backend_config=["bucket=state", "key=prod"], lock=False, lock_timeout="30s")

        assert init_arguments(options) == [
            "init",
            "-backend-config=bucket=state",
            "-backend-config=key=prod",
            "-lock=false",
            "-lock-timeout=30s",
            "-input=false",
        ]

    def test_lock_true(self):
        assert "-lock=true" in init_arguments(InitOptions(lock=True))


class TestTerraformRunner:
    """Tests for TerraformRunner."""

    @pytest.mark.asyncio
    async def test_prepare_runs_version_init_get(self, mock_run_command, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = TerraformRunner(init_options=InitOptions(lock=False))

        await runner.prepare()

        assert commands(mock_run_command) == [
            ["terraform", "version"],
            ["terraform", "init", "-lock=false", "-input=false"],
            ["terraform", "get"],
        ]

    @pytest.mark.asyncio
    async def test_prepare_clears_data_dir(self, mock_run_command, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        data_dir = tmp_path / "infra" / ".terraform"
        (data_dir / "modules").mkdir(parents=True)
        (data_dir / "modules" / "modules.json").write_text("{}")

        await TerraformRunner(root_dir="infra").prepare()

        assert not data_dir.exists()

    @pytest.mark.asyncio
    async def test_commands_run_in_root_dir_with_data_dir(self, mock_run_command, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = TerraformRunner(root_dir="infra", data_dir=".terraform-prod")

        await runner.show_plan()

        kwargs = mock_run_command.await_args.kwargs
        assert kwargs["cwd"] == tmp_path / "infra"
        assert kwargs["env"]["TF_DATA_DIR"] == ".terraform-prod"

    @pytest.mark.asyncio
    async def test_show_plan_captures_output(self, mock_run_command):
        mock_run_command.return_value = ("Plan: 1 to add, 0 to change, 0 to destroy.\n", "", 0)

        text = await TerraformRunner().show_plan()

        assert text == "Plan: 1 to add, 0 to change, 0 to destroy.\n"
        assert commands(mock_run_command) == [["terraform", "show", "-no-color", "plan.tfout"]]
        assert mock_run_command.await_args.kwargs["capture_output"] is True

    @pytest.mark.asyncio
    async def test_show_plan_uses_data_dir_plan_file(self, mock_run_command):
        await TerraformRunner(data_dir=".terraform-prod").show_plan()

        assert commands(mock_run_command)[0][-1] == ".terraform-prod.plan.tfout"

    @pytest.mark.asyncio
    async def test_failure_raises_plan_command_error(self, mock_run_command):
        mock_run_command.return_value = ("", "Error: No such file\n", 1)

        with pytest.raises(PlanCommandError) as exc_info:
            await TerraformRunner().show_plan()

        assert exc_info.value.returncode == 1
        assert exc_info.value.command == ("terraform", "show", "-no-color", "plan.tfout")
        assert "Error: No such file" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_failure_stops_prepare(self, mock_run_command, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        mock_run_command.side_effect = [("", "", 0), ("", "", 1)]

        with pytest.raises(PlanCommandError):
            await TerraformRunner().prepare()

        assert mock_run_command.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_binary(self, mock_run_command):
        mock_run_command.side_effect = FileNotFoundError("terraform")

        with pytest.raises(PlanCommandError) as exc_info:
            await TerraformRunner().show_plan()

        assert exc_info.value.returncode == 127

    @pytest.mark.asyncio
    async def test_debug_echoes_commands(self, mock_run_command, capsys):
        await TerraformRunner(debug=True).show_plan()

        assert "$ terraform show -no-color plan.tfout" in capsys.readouterr().err
