"""Shared test fixtures."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from git_repos import Repos, run_git


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's configuration."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    gitconfig = tmp_path / "gitconfig"
    gitconfig.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    for role in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{role}_NAME", "Release Bot")
        monkeypatch.setenv(f"GIT_{role}_EMAIL", "release@example.com")


@pytest.fixture
def widget_repo(
    tmp_path: Path, git_env: None, monkeypatch: pytest.MonkeyPatch
) -> Repos:
    """Working copy "widget" on branch feature-x, cloned from a bare remote.

    The remote's default branch is main; feature-x has one commit on top.
    """
    remote = tmp_path / "remote.git"
    run_git(tmp_path, "init", "--bare", "-q", str(remote))
    run_git(remote, "symbolic-ref", "HEAD", "refs/heads/main")

    seed = tmp_path / "seed"
    run_git(tmp_path, "init", "-q", str(seed))
    run_git(seed, "symbolic-ref", "HEAD", "refs/heads/main")
    (seed / "README").write_text("widget\n")
    run_git(seed, "add", "README")
    run_git(seed, "commit", "-q", "-m", "Initial commit")
    run_git(seed, "push", "-q", str(remote), "main")

    work = tmp_path / "widget"
    run_git(tmp_path, "clone", "-q", str(remote), str(work))
    repos = Repos(work=work, remote=remote)
    repos.git("checkout", "-q", "-b", "feature-x")
    repos.commit_file("feature.txt", "feature x\n")

    monkeypatch.chdir(work)
    return repos
