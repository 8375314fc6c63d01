"""Tests for the init command."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from nativeboot.bootstrap.paths import NativebootPaths
from nativeboot.cli.commands import InitCommand
from nativeboot.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from nativeboot.config.loader import ConfigError, load_config
from nativeboot.config.models import NativeBootConfig


def _args(**kwargs) -> Namespace:
    defaults = {"force": False, "non_interactive": True, "subdir": None, "overwrite": None}
    defaults.update(kwargs)
    return Namespace(**defaults)


@pytest.fixture
def paths(tmp_path: Path) -> NativebootPaths:
    return NativebootPaths(tmp_path / ".nativeboot")


class TestInitCommandNonInteractive:
    """Tests for InitCommand with --non-interactive."""

    def test_name(self) -> None:
        assert InitCommand().name == "init"

    def test_writes_defaults(self, paths: NativebootPaths, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = InitCommand(paths).execute(_args())

        assert exit_code == EXIT_SUCCESS
        assert paths.config_file.exists()
        assert f"Created {paths.config_file}" in capsys.readouterr().out
        config = load_config(paths=paths)
        assert config.subdir == ""
        assert config.overwrite == "auto"

    def test_writes_given_options(self, paths: NativebootPaths) -> None:
        InitCommand(paths).execute(_args(subdir=".myapp", overwrite="never"))

        config = load_config(paths=paths)
        assert config.subdir == ".myapp"
        assert config.overwrite == "never"

    def test_keeps_other_global_settings(self, paths: NativebootPaths) -> None:
        paths.ensure_directories()
        paths.config_file.write_text("subdir: .old\nexclude:\n- '*.pdb'\npreload:\n- core\n")

        InitCommand(paths).execute(_args(force=True, overwrite="always"))

        config = load_config(paths=paths)
        assert config.subdir == ".old"
        assert config.overwrite == "always"
        assert config.exclude == ["*.pdb"]
        assert config.preload == ["core"]

    def test_keeps_env_placeholders(self, paths: NativebootPaths, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_HOME", "/opt/apphome")
        paths.ensure_directories()
        paths.config_file.write_text("home: ${APP_HOME}\nsubdir: .myapp\n")

        InitCommand(paths).execute(_args(force=True, overwrite="never"))

        written = yaml.safe_load(paths.config_file.read_text())
        assert written == {"home": "${APP_HOME}", "subdir": ".myapp", "overwrite": "never"}
        assert load_config(paths=paths).home == "/opt/apphome"

    def test_merged_config_is_not_written(self, paths: NativebootPaths) -> None:
        merged = NativeBootConfig(subdir=".custom", exclude=["*.pdb"], home="/from/custom")

        InitCommand(paths).execute(_args(), merged)

        written = yaml.safe_load(paths.config_file.read_text())
        assert written == {"subdir": "", "overwrite": "auto"}

    def test_unwritable_home(self, paths: NativebootPaths) -> None:
        with patch(
            "nativeboot.cli.commands.init.write_raw_config",
            side_effect=PermissionError("read-only file system"),
        ):
            with pytest.raises(ConfigError, match="Failed to write config file"):
                InitCommand(paths).execute(_args())

    def test_refuses_to_overwrite(self, paths: NativebootPaths, capsys: pytest.CaptureFixture[str]) -> None:
        paths.ensure_directories()
        paths.config_file.write_text("subdir: .keep\n")

        exit_code = InitCommand(paths).execute(_args())

        assert exit_code == EXIT_INVALID_USAGE
        assert "Use --force to overwrite." in capsys.readouterr().out
        assert paths.config_file.read_text() == "subdir: .keep\n"

    def test_force_overwrites(self, paths: NativebootPaths) -> None:
        paths.ensure_directories()
        paths.config_file.write_text("subdir: .keep\n")

        exit_code = InitCommand(paths).execute(_args(force=True, subdir=".new"))

        assert exit_code == EXIT_SUCCESS
        assert load_config(paths=paths).subdir == ".new"


class TestInitCommandInteractive:
    """Tests for InitCommand prompting through questionary."""

    @patch("nativeboot.cli.commands.init.questionary")
    def test_uses_answers(self, mock_questionary, paths: NativebootPaths) -> None:
        mock_questionary.text.return_value.ask.return_value = " .asked "
        mock_questionary.select.return_value.ask.return_value = "always"

        exit_code = InitCommand(paths).execute(_args(non_interactive=False))

        assert exit_code == EXIT_SUCCESS
        config = load_config(paths=paths)
        assert config.subdir == ".asked"
        assert config.overwrite == "always"
        assert mock_questionary.select.call_args.kwargs["default"] == "auto"

    @patch("nativeboot.cli.commands.init.questionary")
    def test_aborted_prompt(
        self, mock_questionary, paths: NativebootPaths, capsys: pytest.CaptureFixture[str]
    ) -> None:
        mock_questionary.text.return_value.ask.return_value = None

        exit_code = InitCommand(paths).execute(_args(non_interactive=False))

        assert exit_code == EXIT_SUCCESS
        assert "Aborted." in capsys.readouterr().out
        assert not paths.config_file.exists()

    @patch("nativeboot.cli.commands.init.questionary")
    def test_declined_overwrite(
        self, mock_questionary, paths: NativebootPaths, capsys: pytest.CaptureFixture[str]
    ) -> None:
        paths.ensure_directories()
        paths.config_file.write_text("subdir: .keep\n")
        mock_questionary.confirm.return_value.ask.return_value = False

        exit_code = InitCommand(paths).execute(_args(non_interactive=False))

        assert exit_code == EXIT_SUCCESS
        assert "Aborted." in capsys.readouterr().out
        assert paths.config_file.read_text() == "subdir: .keep\n"
        mock_questionary.text.assert_not_called()

    @patch("nativeboot.cli.commands.init.questionary")
    def test_confirmed_overwrite(self, mock_questionary, paths: NativebootPaths) -> None:
        paths.ensure_directories()
        paths.config_file.write_text("subdir: .keep\n")
        mock_questionary.confirm.return_value.ask.return_value = True
        mock_questionary.text.return_value.ask.return_value = ".replaced"
        mock_questionary.select.return_value.ask.return_value = "never"

        InitCommand(paths).execute(_args(non_interactive=False))

        assert load_config(paths=paths).subdir == ".replaced"
