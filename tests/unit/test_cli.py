from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from aurwatch.cli.main import cli
from aurwatch.config import get_settings
from aurwatch.updater.orchestrator import UpdateOutcome
from aurwatch.updater.runner import CycleReport


def test_vercmp_prints_ordering() -> None:
    runner = CliRunner()
    assert runner.invoke(cli, ["vercmp", "1.0-1", "1.1-1"]).output == "-1\n"
    assert runner.invoke(cli, ["vercmp", "1:1.0", "2.0"]).output == "1\n"
    assert runner.invoke(cli, ["vercmp", "2.0", "2.0"]).output == "0\n"


def test_check_accepts_version_bump(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\npkgrel=1\n"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\npkgrel=1\n"})
    result = CliRunner().invoke(cli, ["check", str(local), str(remote), "--show-diff"])
    assert result.exit_code == 0
    assert "--- PKGBUILD (text/plain)" in result.output
    assert "+pkgver=1.1" in result.output
    assert "accepted: validated (1 added lines)" in result.output


def test_check_rejects_new_command(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\nmake install\n"})
    result = CliRunner().invoke(cli, ["check", str(local), str(remote)])
    assert result.exit_code == 1
    assert "rejected: non-assignment change" in result.output


def test_check_rejects_divergent_trees(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n", "foo.install": ""})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\n"})
    result = CliRunner().invoke(cli, ["check", str(local), str(remote)])
    assert result.exit_code == 1
    assert "divergence: left" in result.output


def test_run_with_missing_config_exits_2() -> None:
    result = CliRunner().invoke(cli, ["run", "--once"])
    assert result.exit_code == 2
    assert "invalid configuration" in result.output


def test_run_once_prints_outcomes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "repo").mkdir()
    env = {
        "REPO_DIR": str(tmp_path / "repo"),
        "TMP_DIR": str(tmp_path / "scratch"),
        "GIT_URL": "https://git.example.com",
        "GIT_USER": "packager",
        "RBUILD_URL": "https://rbuild.example.com",
        "RBUILD_USER": "builder",
        "RBUILD_TOKEN": "rb-token",
        "DMANAGER_URL": "https://dmanager.example.com",
        "DMANAGER_USER": "uploader",
        "DMANAGER_TOKEN": "dm-token",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()

    class _Runner:
        async def run_cycle(self) -> CycleReport:
            return CycleReport(
                outcomes={"foo": UpdateOutcome.UPDATED, "bar": UpdateOutcome.UP_TO_DATE}
            )

    monkeypatch.setattr("aurwatch.providers.factory.build_runner", lambda settings: _Runner())
    monkeypatch.setattr("aurwatch.cli.main.configure_logging", lambda *args, **kwargs: None)
    result = CliRunner().invoke(cli, ["run", "--once"])
    assert result.exit_code == 0
    assert result.output == "bar: up_to_date\nfoo: updated\n"
    assert (tmp_path / "scratch").is_dir()
