from __future__ import annotations

import importlib
import subprocess

from click.testing import CliRunner

from plugin_serve_cli.cli import cli
from plugin_serve_cli.exceptions import MissingToolError

serve_module = importlib.import_module("plugin_serve_cli.commands.serve")
tasks_module = importlib.import_module("plugin_serve_cli.commands.tasks")

runner = CliRunner()


def _all_tools_present(monkeypatch) -> None:
    monkeypatch.setattr(serve_module, "check_requirements", lambda: None)


def test_no_command_lists_tasks() -> None:
    result = runner.invoke(cli, [])

    assert result.exit_code == 0
    for name in ("list", "choose", "edit", "serve"):
        assert name in result.output
    assert "check" not in result.output


def test_list_command() -> None:
    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 0
    assert "Serve the plugin." in result.output


def test_check_reports_missing_tool(monkeypatch) -> None:
    def missing():
        raise MissingToolError("bore", "https://github.com/ekzhang/bore")

    monkeypatch.setattr(serve_module, "check_requirements", missing)

    result = runner.invoke(cli, ["check"])

    assert result.exit_code == 1
    assert "ERROR:" in result.output
    assert "bore missing" in result.output


def test_check_silent_when_tools_present(monkeypatch) -> None:
    _all_tools_present(monkeypatch)

    result = runner.invoke(cli, ["check"])

    assert result.exit_code == 0
    assert result.output == ""


def test_serve_stops_on_missing_tool(monkeypatch) -> None:
    def missing():
        raise MissingToolError("python3")

    monkeypatch.setattr(serve_module, "check_requirements", missing)

    def unexpected(*args, **kwargs):
        raise AssertionError("orchestrator should not run")

    monkeypatch.setattr(serve_module, "ServeOrchestrator", unexpected)

    result = runner.invoke(cli, ["serve"])

    assert result.exit_code == 1
    assert "python3 missing" in result.output


def test_serve_prints_public_url(monkeypatch, build_dir, fake_server, fake_tunnel) -> None:
    _all_tools_present(monkeypatch)
    fake_tunnel.output = ["INFO bore_cli::client: listening at bore.pub:4242"]
    real = serve_module.ServeOrchestrator
    captured: dict = {}

    def orchestrator(**kwargs):
        captured.update(kwargs)
        return real(server_factory=fake_server, tunnel_factory=fake_tunnel, **kwargs)

    monkeypatch.setattr(serve_module, "ServeOrchestrator", orchestrator)

    result = runner.invoke(cli, ["serve", "7000", "--root", str(build_dir)])

    assert result.exit_code == 0, result.output
    assert captured["port"] == 7000
    assert "serving plugin @ http://bore.pub:4242/plugin.wasm" in result.output
    assert fake_server.instances[0].terminated


def test_serve_quiet_when_tunnel_closes_without_port(monkeypatch, build_dir, fake_server, fake_tunnel) -> None:
    _all_tools_present(monkeypatch)
    fake_tunnel.output = ["error: server responded with an error"]
    real = serve_module.ServeOrchestrator

    monkeypatch.setattr(
        serve_module, "ServeOrchestrator",
        lambda **kwargs: real(server_factory=fake_server, tunnel_factory=fake_tunnel, **kwargs),
    )

    result = runner.invoke(cli, ["serve", "--root", str(build_dir)])

    assert result.exit_code == 0, result.output
    assert "serving plugin" not in result.output
    assert "Tunnel closed" not in result.output


def test_serve_without_artifact_fails(monkeypatch, tmp_path) -> None:
    _all_tools_present(monkeypatch)

    result = runner.invoke(cli, ["serve", "--root", str(tmp_path / "target")])

    assert result.exit_code == 1
    assert "no *.wasm found" in result.output


def test_serve_rejects_invalid_port() -> None:
    result = runner.invoke(cli, ["serve", "70000"])

    assert result.exit_code == 2


def test_choose_runs_selected_command(monkeypatch) -> None:
    seen: dict = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["input"] = kwargs["input"]
        return subprocess.CompletedProcess(cmd, 0, stdout="list\n")

    monkeypatch.setattr(tasks_module, "DEFAULT_CHOOSER", "fzf --tmux")
    monkeypatch.setattr(tasks_module.subprocess, "run", fake_run)

    result = runner.invoke(cli, ["c"])

    assert result.exit_code == 0
    assert seen["cmd"] == ["fzf", "--tmux"]
    assert "serve" in seen["input"].split()
    assert "choose" not in seen["input"].split()
    assert "Available commands" in result.output


def test_choose_cancelled_exits_quietly(monkeypatch) -> None:
    monkeypatch.setattr(
        tasks_module.subprocess, "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 130, stdout=""),
    )

    result = runner.invoke(cli, ["choose"])

    assert result.exit_code == 130
    assert result.output == ""


def test_edit_opens_command_registry(monkeypatch) -> None:
    opened: list[str] = []
    monkeypatch.setattr(tasks_module.click, "edit", lambda filename: opened.append(filename))

    result = runner.invoke(cli, ["e"])

    assert result.exit_code == 0
    assert opened and opened[0].endswith("cli.py")
    assert "Edit the command registry" in runner.invoke(cli, ["edit", "--help"]).output
