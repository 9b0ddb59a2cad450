"""Tests for the license-plist CLI — pipeline mocked, no network."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from licenseplist import __version__
from licenseplist.cli import main
from licenseplist.options import resolve_github_token
from licenseplist.pipeline import RunOutcome


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def mock_pipeline():
    with patch("licenseplist.cli.setup_logging"), patch(
        "licenseplist.cli.LicensePlistPipeline"
    ) as pipeline_cls:
        pipeline_cls.return_value.run = AsyncMock(return_value=RunOutcome(exit_code=0))
        yield pipeline_cls


class TestMain:
    def test_defaults(self, runner, mock_pipeline, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, [])
        assert result.exit_code == 0, result.output
        options, rules = mock_pipeline.call_args[0]
        assert options.prefix == "com.mono0926.LicensePlist"
        assert options.output_path == Path("com.mono0926.LicensePlist.Output")
        assert options.concurrency == 10
        assert rules.force is False

    def test_flags_reach_rules_and_options(self, runner, mock_pipeline, tmp_path):
        args = [
            "--output-path", str(tmp_path / "out"),
            "--prefix", "com.example",
            "--markdown-path", str(tmp_path / "a.md"),
            "--force",
            "--add-version-numbers",
            "--single-page",
            "--fail-if-missing-license",
            "--concurrency", "4",
            "--github-token", "tok",
        ]
        result = runner.invoke(main, args)
        assert result.exit_code == 0, result.output
        options, rules = mock_pipeline.call_args[0]
        assert options.output_path == tmp_path / "out"
        assert options.prefix == "com.example"
        assert options.markdown_path == tmp_path / "a.md"
        assert options.concurrency == 4
        assert options.github_token == "tok"
        assert rules.force and rules.add_version_numbers
        assert rules.single_page and rules.fail_if_missing_license

    def test_config_options_merged_with_flags(self, runner, mock_pipeline, tmp_path):
        config = tmp_path / "license_plist.yml"
        config.write_text("options:\n  singlePage: true\nexclude:\n  - Hero\n")
        result = runner.invoke(main, ["--config-path", str(config), "--force"])
        assert result.exit_code == 0, result.output
        _, rules = mock_pipeline.call_args[0]
        assert rules.single_page is True
        assert rules.force is True
        assert rules.excludes[0].name == "Hero"

    def test_exit_code_from_outcome(self, runner, mock_pipeline):
        mock_pipeline.return_value.run = AsyncMock(return_value=RunOutcome(exit_code=1))
        result = runner.invoke(main, [])
        assert result.exit_code == 1

    def test_explicit_missing_config_is_fatal(self, runner, mock_pipeline, tmp_path):
        result = runner.invoke(main, ["--config-path", str(tmp_path / "missing.yml")])
        assert result.exit_code == 1
        mock_pipeline.assert_not_called()

    def test_invalid_config_is_fatal(self, runner, mock_pipeline, tmp_path):
        config = tmp_path / "license_plist.yml"
        config.write_text("github: [unclosed\n")
        result = runner.invoke(main, ["--config-path", str(config)])
        assert result.exit_code == 1
        mock_pipeline.assert_not_called()

    def test_invalid_concurrency(self, runner, mock_pipeline):
        result = runner.invoke(main, ["--concurrency", "0"])
        assert result.exit_code == 2

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestResolveGithubToken:
    def test_explicit_wins(self):
        with patch.dict(os.environ, {"GITHUB_TOKEN": "env"}):
            assert resolve_github_token("cli") == "cli"

    def test_licenseplist_env_first(self):
        env = {"LICENSE_PLIST_GITHUB_TOKEN": "specific", "GITHUB_TOKEN": "generic"}
        with patch.dict(os.environ, env):
            assert resolve_github_token() == "specific"

    def test_generic_env(self):
        with patch.dict(os.environ, {"GITHUB_TOKEN": "generic"}):
            os.environ.pop("LICENSE_PLIST_GITHUB_TOKEN", None)
            assert resolve_github_token() == "generic"

    def test_absent_is_not_an_error(self):
        with patch.dict(os.environ, {}):
            os.environ.pop("LICENSE_PLIST_GITHUB_TOKEN", None)
            os.environ.pop("GITHUB_TOKEN", None)
            assert resolve_github_token() is None
