import os
import subprocess
from unittest import mock

import pytest

from assistkit.gitclone import (
    GitCloneAction,
    GitCloneRequest,
    GitCloneTool,
    extract_repo_dir,
    is_valid_git_url,
    with_git,
)


def _completed(returncode, output=b""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=output)


def test_with_git_adds_suffix_once():
    assert with_git("host/group/repo") == "host/group/repo.git"
    assert with_git("host/group/repo.git") == "host/group/repo.git"


def test_is_valid_git_url_bare_host_gets_https():
    assert is_valid_git_url("git.example.com/group/repo") == (
        True,
        "https://git.example.com/group/repo.git",
    )


def test_is_valid_git_url_https_kept():
    url = "https://git.example.com/group/repo"
    assert is_valid_git_url(url) == (True, url + ".git")


def test_is_valid_git_url_ssh():
    url = "git@git.example.com:group/repo.git"
    assert is_valid_git_url(url) == (True, url)


def test_is_valid_git_url_rejects_single_segment():
    assert is_valid_git_url("repo") == (False, "")


def test_extract_repo_dir():
    assert extract_repo_dir("https://git.example.com/group/repo.git") == ("group", "repo")


def test_empty_base_dir_rejected():
    with pytest.raises(ValueError, match="base dir cannot be empty"):
        GitCloneTool("")


def test_info_name_and_required():
    info = GitCloneTool("repos").info()
    assert info.name == "gitclone"
    assert info.to_json_schema()["required"] == ["action", "url"]


def test_empty_url(tmp_path):
    response = GitCloneTool(tmp_path).invoke(GitCloneRequest(url=""))
    assert response.error == "URL cannot be empty"


def test_invalid_url(tmp_path):
    response = GitCloneTool(tmp_path).invoke({"url": "repo", "action": "clone"})
    assert response.error == "Invalid Git URL format: repo"


def test_clone_existing_repo(tmp_path):
    (tmp_path / "group" / "repo").mkdir(parents=True)
    response = GitCloneTool(tmp_path).invoke(
        GitCloneRequest(url="git.example.com/group/repo", action=GitCloneAction.CLONE)
    )
    assert response.error == "Repository already exists"


def test_pull_missing_repo(tmp_path):
    response = GitCloneTool(tmp_path).invoke(
        GitCloneRequest(url="git.example.com/group/repo", action=GitCloneAction.PULL)
    )
    assert response.error == f"repo does not exist: {tmp_path / 'group' / 'repo'}"


def test_clone_runs_git(tmp_path):
    with mock.patch("subprocess.run", return_value=_completed(0)) as run:
        response = GitCloneTool(tmp_path).invoke(
            {"url": "https://git.example.com/group/repo", "action": "clone"}
        )
    repo_path = tmp_path / "group" / "repo"
    assert run.call_args.args[0] == [
        "git",
        "clone",
        "https://git.example.com/group/repo.git",
        str(repo_path),
    ]
    assert response.message == f"success, repo path: {os.path.abspath(repo_path)}"
    assert response.error == ""


def test_clone_failure_reported(tmp_path):
    with mock.patch("subprocess.run", return_value=_completed(128, b"fatal: nope")):
        response = GitCloneTool(tmp_path).invoke(
            GitCloneRequest(url="git.example.com/group/repo", action=GitCloneAction.CLONE)
        )
    assert response.error.startswith("Clone failed: ")
    assert "fatal: nope" in response.error
    assert response.message == ""


def test_pull_runs_git_in_repo(tmp_path):
    repo_path = tmp_path / "group" / "repo"
    repo_path.mkdir(parents=True)
    with mock.patch("subprocess.run", return_value=_completed(0)) as run:
        response = GitCloneTool(tmp_path).invoke(
            GitCloneRequest(url="git.example.com/group/repo", action=GitCloneAction.PULL)
        )
    assert run.call_args.args[0] == ["git", "-C", str(repo_path), "pull"]
    assert response.message.startswith("success, repo path: ")


def test_missing_git_binary_reported(tmp_path):
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("git")):
        response = GitCloneTool(tmp_path).invoke(
            GitCloneRequest(url="git.example.com/group/repo", action=GitCloneAction.CLONE)
        )
    assert response.error.startswith("Clone failed: ")