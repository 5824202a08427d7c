"""Tests for utility helpers"""

import shutil
import subprocess
from datetime import datetime

import pytest

from stackctl.models.component import TrackedComponent
from stackctl.utils import (
    GitCommandError,
    GitRepository,
    extract_version,
    gather_in_threads,
    is_at_least,
    read_submodules,
    render_template,
    run_async,
)

from conftest import FixedClock


def test_render_template_prefers_environment():
    assert render_template("http://localhost:${PORT}/health", {"PORT": 3080}, {}) == \
        "http://localhost:3080/health"
    assert render_template("http://localhost:${PORT}/health", {"PORT": 3080}, {"PORT": "4000"}) == \
        "http://localhost:4000/health"
    # Empty values count as unset
    assert render_template("${PORT}", {"PORT": 3080}, {"PORT": ""}) == "3080"


def test_render_template_leaves_unknown_placeholders():
    assert render_template("${HOST}:${PORT}", {"PORT": 1}, {}) == "${HOST}:1"


@pytest.mark.parametrize("text, expected", [
    ("docker-compose version 1.29.2, build 5becea4c", "1.29.2"),
    ("Docker Compose version v2.24.6", "2.24.6"),
    ("2.20", "2.20"),
])
def test_extract_version(text, expected):
    assert str(extract_version(text)) == expected


def test_extract_version_without_number():
    assert extract_version("command not found") is None


def test_is_at_least():
    assert is_at_least(extract_version("1.25.0"), "1.25.0")
    assert not is_at_least(extract_version("1.24.1"), "1.25.0")
    assert not is_at_least(None, "1.25.0")


def test_gather_in_threads_keeps_order():
    calls = [lambda i=i: i * i for i in range(5)]
    assert run_async(gather_in_threads(calls)) == [0, 1, 4, 9, 16]


def test_gather_in_threads_with_limit():
    calls = [lambda i=i: i for i in range(4)]
    assert run_async(gather_in_threads(calls, limit=2)) == [0, 1, 2, 3]


def test_fixed_clock_timestamp():
    assert FixedClock(datetime(2024, 1, 2, 3, 4, 5)).timestamp() == "20240102-030405"


def test_component_selectors():
    component = TrackedComponent(name="LibreChat", path="apps/LibreChat")

    assert component.matches("librechat")
    assert component.matches("apps/LibreChat/")
    assert not component.matches("pkm")
    assert component.upstream_ref == "origin/main"


def test_component_slug_is_branch_safe():
    assert TrackedComponent(name="PKM Service", path="pkm").slug == "pkm-service"


def test_read_submodules(deployment_root):
    assert read_submodules(deployment_root) == [
        {"name": "LibreChat", "path": "LibreChat", "branch": "main"},
        {"name": "pkm-service", "path": "pkm-service"},
    ]


def test_read_submodules_without_file(tmp_path):
    assert read_submodules(tmp_path) == []


def test_missing_repository_does_not_exist(tmp_path):
    assert not GitRepository(tmp_path / "absent").exists()


# ============================================================================
# Real git
# ============================================================================


def _git(path, *args):
    subprocess.run(["git", "-C", str(path), *args], check=True, capture_output=True, text=True)


@pytest.fixture
def upstream_repo(tmp_path):
    """A repository with three commits"""
    repo = tmp_path / "component"
    repo.mkdir()
    _git(repo, "init", "--quiet")
    _git(repo, "config", "user.email", "ops@example.com")
    _git(repo, "config", "user.name", "Ops")
    for number in range(3):
        (repo / "file.txt").write_text(f"change {number}\n")
        _git(repo, "add", "file.txt")
        _git(repo, "commit", "--quiet", "-m", f"Change {number}")
    return repo


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_git_repository_against_real_git(upstream_repo):
    repo = GitRepository(upstream_repo)

    assert repo.exists()
    head = repo.rev_parse("HEAD")
    first = repo.rev_parse("HEAD~2")

    assert repo.describe(head).summary == "Change 2"
    assert repo.count_range(first, head) == 2
    assert [c.summary for c in repo.log_range(first, head, limit=1)] == ["Change 2"]

    repo.create_branch("backup-test", first)
    assert repo.rev_parse("backup-test") == first

    repo.checkout(first)
    assert repo.rev_parse("HEAD") == first


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_git_errors_carry_stderr(upstream_repo):
    with pytest.raises(GitCommandError) as exc_info:
        GitRepository(upstream_repo).rev_parse("no-such-branch")

    assert exc_info.value.returncode != 0
