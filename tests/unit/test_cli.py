"""Tests for CLI commands."""

import math
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sandcalc.cli import PROMPT, app, format_result
from sandcalc.core.manifest import SANDCALC_CONFIG_VAR


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every command from an empty directory with no config in the environment."""
    monkeypatch.delenv(SANDCALC_CONFIG_VAR, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """Create a sandcalc.toml with one extra constant."""
    path = tmp_path / "sandcalc.toml"
    path.write_text(
        """
[constants]
tau = 6.283185307179586

[display]
precision = 2
"""
    )
    return path


def test_eval_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "2 + 3 * 4"])
    assert result.exit_code == 0
    assert "Answer: 14" in result.stdout


def test_eval_left_associative_exponent(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "2 ^ 3 ^ 2"])
    assert result.exit_code == 0
    assert "Answer: 64" in result.stdout


def test_eval_reads_stdin_when_no_argument(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval"], input="  (2 + 3) * 4  \n")
    assert result.exit_code == 0
    assert PROMPT in result.stdout
    assert "Answer: 20" in result.stdout


def test_eval_syntax_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "2 $ 3"])
    assert result.exit_code == 1
    assert "Error: Unrecognised character '$'" in result.stdout
    assert "2 $ 3\n  ^" in result.stdout


def test_eval_unary_minus_rejected(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--", "-5"])
    assert result.exit_code == 1
    assert "Expected number or opening bracket, got '-'" in result.stdout


def test_eval_empty_input(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval"], input="\n")
    assert result.exit_code == 1
    assert "Error: Empty expression" in result.stdout


def test_eval_division_by_zero(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "1 / 0"])
    assert result.exit_code == 0
    assert "Answer: inf" in result.stdout


def test_eval_precision_option(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "pi", "--precision", "3"])
    assert result.exit_code == 0
    assert "Answer: 3.142" in result.stdout


def test_eval_with_config(cli_runner: CliRunner, manifest_file: Path):
    result = cli_runner.invoke(app, ["eval", "tau / 2", "--config", str(manifest_file)])
    assert result.exit_code == 0
    assert "Answer: 3.14" in result.stdout


def test_eval_precision_option_overrides_config(cli_runner: CliRunner, manifest_file: Path):
    result = cli_runner.invoke(
        app, ["eval", "tau", "--config", str(manifest_file), "--precision", "0"]
    )
    assert result.exit_code == 0
    assert "Answer: 6" in result.stdout


def test_eval_config_from_environment(
    cli_runner: CliRunner, manifest_file: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setenv(SANDCALC_CONFIG_VAR, str(manifest_file))
    result = cli_runner.invoke(app, ["eval", "tau"])
    assert result.exit_code == 0
    assert "Answer: 6.28" in result.stdout


def test_eval_bad_config(cli_runner: CliRunner, tmp_path: Path):
    bad = tmp_path / "bad.toml"
    bad.write_text('[constants]\nk = "x"\n')
    result = cli_runner.invoke(app, ["eval", "1", "--config", str(bad)])
    assert result.exit_code == 2
    assert "Config error" in result.stdout


def test_tokens_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["tokens", "1 + pi"])
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert len(lines) == 4
    assert "NUMBER" in lines[0] and "1.0" in lines[0]
    assert "PLUS" in lines[1]
    assert "IDENT" in lines[2] and "'pi'" in lines[2]
    assert "EOF" in lines[3]


def test_tokens_command_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["tokens", "1 ."])
    assert result.exit_code == 1
    assert "Invalid number '.'" in result.stdout


def test_tree_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["tree", "(1 + 2) * 3"])
    assert result.exit_code == 0
    assert "*" in result.stdout
    assert "+" in result.stdout


def test_tree_command_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["tree", "(1 + 2"])
    assert result.exit_code == 1
    assert "Expected closing bracket" in result.stdout


def test_tree_command_deep_nesting(cli_runner: CliRunner):
    source = "(" * 3000 + "1" + ")" * 3000
    result = cli_runner.invoke(app, ["tree", source])
    assert result.exit_code == 1
    assert not isinstance(result.exception, RecursionError)
    assert "Error: Expression nested too deeply" in result.stdout


def test_eval_long_chain(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", " + ".join(["1"] * 5000)])
    assert result.exit_code == 0
    assert "Answer: 5000" in result.stdout


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "sandcalc version" in result.stdout


class TestFormatResult:
    def test_integral_value(self) -> None:
        assert format_result(14.0) == "14"

    def test_fractional_value(self) -> None:
        assert format_result(0.75) == "0.75"

    def test_large_value_keeps_float_form(self) -> None:
        assert format_result(1e20) == "1e+20"

    def test_precision(self) -> None:
        assert format_result(math.pi, 4) == "3.1416"

    def test_special_values(self) -> None:
        assert format_result(math.nan) == "NaN"
        assert format_result(math.inf) == "inf"
        assert format_result(-math.inf, 3) == "-inf"
