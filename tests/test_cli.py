"""Tests for the pipesync command line front end."""

import json
from unittest.mock import patch

import pytest

from pipesync.cli import main as cli
from pipesync.exceptions import ConfigurationError, RemoteError


class TestConvert:
    """Tests for the offline convert command."""

    def test_yaml_to_json(self, tmp_path, capsys):
        config = tmp_path / "pipeline.yml"
        config.write_text("jobs: []\n", encoding="utf-8")

        cli.main(["convert", str(config), "--to", "json"])

        assert capsys.readouterr().out.strip() == '{"jobs":[]}'

    def test_json_to_yaml(self, tmp_path, capsys):
        config = tmp_path / "pipeline.json"
        config.write_text(json.dumps({"jobs": [{"name": "unit"}]}), encoding="utf-8")

        cli.main(["convert", str(config), "--to", "yaml"])

        assert capsys.readouterr().out == "jobs:\n- name: unit\n\n"

    def test_malformed_config_exits(self, tmp_path):
        config = tmp_path / "pipeline.yml"
        config.write_text("jobs: [\n", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["convert", str(config), "--to", "json"])

        assert exc_info.value.code == 1

    def test_missing_file_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["convert", str(tmp_path / "absent.yml"), "--to", "json"])

        assert exc_info.value.code == 1


class TestMain:
    """Tests for argument handling and error reporting."""

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])

        assert exc_info.value.code == 1
        assert "usage: pipesync" in capsys.readouterr().out

    def test_team_defaults_from_settings(self):
        args = cli.build_parser().parse_args(["delete", "ci"])

        assert cli._team(args) == cli.settings.default_team

    def test_apply_flags_default_to_false(self):
        args = cli.build_parser().parse_args(["apply", "ci", "pipeline.yml"])

        assert args.is_exposed is False
        assert args.is_paused is False

    def test_domain_error_exits_nonzero(self):
        with patch.object(cli, "delete_pipeline", side_effect=RemoteError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                cli.main(["delete", "ci"])

        assert exc_info.value.code == 1

    def test_missing_url_is_configuration_error(self):
        args = cli.build_parser().parse_args(["delete", "ci"])

        with patch.object(cli.settings, "concourse_url", ""):
            with pytest.raises(ConfigurationError):
                cli._build_client(args)
