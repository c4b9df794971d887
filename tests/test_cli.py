import logging
from unittest import mock

import pytest

from cygpkg import cli
from cygpkg.errors import UsageError
from cygpkg.operations import Invocation


def error_messages(caplog):
    return " ".join(r.getMessage() for r in caplog.records if r.levelno == logging.ERROR)


def test_no_arguments_prints_usage(capsys):
    assert cli.main([]) == 0
    assert "usage: cygpkg" in capsys.readouterr().out


@pytest.mark.parametrize("token", ["-h", "--help", "help", "usage"])
@mock.patch("cygpkg.runner.run")
def test_help_short_circuits(mock_run, token, capsys):
    assert cli.main(["install", "bash", token]) == 0
    assert "commands:" in capsys.readouterr().out
    mock_run.assert_not_called()


@mock.patch("cygpkg.runner.run")
def test_install_without_packages_fails(mock_run, caplog):
    assert cli.main(["install"]) != 0
    assert "install" in error_messages(caplog)
    mock_run.assert_not_called()


@pytest.mark.parametrize("command", ["find", "query"])
@mock.patch("cygpkg.runner.run")
def test_find_and_query_require_argument(mock_run, command, caplog):
    assert cli.main([command]) != 0
    assert command in error_messages(caplog)
    mock_run.assert_not_called()


def test_missing_command_fails(caplog):
    assert cli.main(["-v", "bash"]) == 1
    assert "no command given" in error_messages(caplog)


def test_later_command_wins():
    inv = cli.parse_tokens(["install", "remove", "pkg"])
    assert inv.command == "remove"
    assert inv.args == ("pkg",)


def test_unknown_flags_become_arguments():
    inv = cli.parse_tokens(["-x", "list", "--whatever", "bash"])
    assert inv.command == "list"
    assert inv.args == ("-x", "--whatever", "bash")


def test_flags_anywhere_and_combined():
    inv = cli.parse_tokens(["install", "-dv", "bash", "--interactive"])
    assert inv == Invocation(command="install", args=("bash",), debug=True, verbose=True, interactive=True)


def test_dispatch_rejects_unknown_command():
    with pytest.raises(UsageError):
        cli.dispatch(Invocation(command="frobnicate"))


@mock.patch("cygpkg.runner.run", return_value=3)
def test_main_passes_tool_exit_status(mock_run):
    assert cli.main(["remove", "vim"]) == 3
    argv = mock_run.call_args[0][0]
    assert argv[0] == "setup-x86_64.exe"
    assert argv[-2:] == ["--remove-packages", "vim"]


@mock.patch("cygpkg.runner.run", return_value=0)
def test_verbose_shows_status_lines(mock_run, caplog):
    caplog.set_level(logging.DEBUG, logger="cygpkg")
    cli.main(["check"])
    assert "Checking installed packages" not in caplog.text

    caplog.clear()
    cli.main(["-v", "check"])
    assert "Checking installed packages" in caplog.text


@pytest.mark.parametrize("token", ["-dx", "-vz", "--debug=1", "--", "-"])
def test_flag_lookalikes_become_arguments(token):
    inv = cli.parse_tokens(["list", token, "bash"])
    assert inv.command == "list"
    assert inv.args == (token, "bash")
    assert not inv.debug and not inv.verbose


@mock.patch("cygpkg.runner.run", return_value=0)
def test_main_keeps_unknown_short_flag_bundle(mock_run):
    assert cli.main(["list", "-vz", "bash"]) == 0
    assert mock_run.call_args[0][0] == ["cygcheck", "--list-package", "-vz", "bash"]
