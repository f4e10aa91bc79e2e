"""Tests for the git remote helper."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from recipegen.git import GitRemote, RemoteRegistrationError


def test_url_reads_origin_from_local_config(tmp_path: Path) -> None:
    calls = []

    def runner(args, cwd, capture_output=False):
        calls.append((list(args), Path(cwd), capture_output))
        return (
            "core.bare=false\n"
            "remote.upstream.url=git@github.com:upstream/foo.git\n"
            "remote.origin.url=git@github.com:acme/foo.git\n"
            "remote.origin.fetch=+refs/heads/*:refs/remotes/origin/*\n"
        )

    remote = GitRemote(runner=runner)

    assert remote.url(tmp_path) == "git@github.com:acme/foo.git"
    assert remote.url(tmp_path, "upstream") == "git@github.com:upstream/foo.git"
    assert calls[0] == (["git", "config", "--local", "--list"], tmp_path, True)


def test_url_is_none_without_origin(tmp_path: Path) -> None:
    remote = GitRemote(runner=lambda args, cwd, capture_output=False: "core.bare=false\n")

    assert remote.url(tmp_path) is None


def test_url_is_none_when_git_config_fails(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):
        raise subprocess.CalledProcessError(128, list(args), stderr="fatal: not in a git directory")

    assert GitRemote(runner=runner).url(tmp_path) is None


def test_add_registers_remote(tmp_path: Path) -> None:
    calls = []

    def runner(args, cwd, capture_output=False):
        calls.append(list(args))
        return ""

    GitRemote(runner=runner).add(tmp_path, "origin", "git@github.com:acme/foo.git")

    assert calls == [["git", "remote", "add", "origin", "git@github.com:acme/foo.git"]]


def test_add_reports_non_zero_exit(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):
        raise subprocess.CalledProcessError(
            3, list(args), stderr="error: remote origin already exists.\n"
        )

    with pytest.raises(RemoteRegistrationError) as excinfo:
        GitRemote(runner=runner).add(tmp_path, "origin", "git@github.com:acme/foo.git")

    message = str(excinfo.value)
    assert "exit status 3" in message
    assert "remote origin already exists" in message


def test_add_reports_missing_git_binary(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):
        raise FileNotFoundError("git")

    with pytest.raises(RemoteRegistrationError):
        GitRemote(runner=runner).add(tmp_path, "origin", "git@github.com:acme/foo.git")
