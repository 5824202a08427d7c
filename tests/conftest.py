"""
Shared pytest fixtures for the stackctl test suite.

This module provides:
- Fake orchestrator and container runtime adapters that record calls
- An in-memory git world standing in for the component repositories
- A fixed clock and scripted confirmations
- Temporary deployment roots with compose, env template and .gitmodules
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest
import requests
from click.testing import CliRunner

from stackctl.api.exceptions import OrchestrationError
from stackctl.cli.main import Context
from stackctl.cli.utils.interactive import ScriptedConfirmation
from stackctl.core import PathResolver, ProjectManager
from stackctl.models.result import CommitInfo
from stackctl.runtime.base import ContainerRuntime, Orchestrator
from stackctl.utils.clock import Clock
from stackctl.utils.git_utils import GitCommandError


COMPOSE_YAML = """\
version: "3.8"
services:
  api:
    image: librechat/api
  mongodb:
    image: mongo
  meilisearch:
    image: getmeili/meilisearch
"""

GITMODULES = """\
[submodule "LibreChat"]
\tpath = LibreChat
\turl = https://github.com/danny-avila/LibreChat.git
\tbranch = main
[submodule "pkm-service"]
\tpath = pkm-service
\turl = https://example.com/pkm-service.git
"""


# ============================================================================
# Orchestration fakes
# ============================================================================


class FakeOrchestrator(Orchestrator):
    """Records every verb instead of running the compose CLI"""

    def __init__(self, compose_file: Path, env_file: Optional[Path] = None,
                 project_dir: Optional[Path] = None):
        super().__init__(compose_file, env_file, project_dir)
        self.command = ("docker-compose",)
        self.installed = True
        self.version_string: Optional[str] = "1.29.2"
        self.running: List[str] = []
        self.exec_results: Dict[str, bool] = {}
        self.fail_on: Dict[str, int] = {}
        self.calls: List[tuple] = []

    def _record(self, *call):
        self.calls.append(call)
        verb = call[0]
        if verb in self.fail_on:
            raise OrchestrationError(["docker-compose", verb], self.fail_on[verb], "boom")

    def is_installed(self) -> bool:
        return self.installed

    def version(self) -> Optional[str]:
        return self.version_string

    def up(self, service=None, build=False):
        self._record("up", service, build)

    def down(self):
        self._record("down")

    def stop(self, service):
        self._record("stop", service)

    def logs(self, service=None, tail=100, follow=True):
        self._record("logs", service, tail, follow)

    def ps(self) -> str:
        self._record("ps")
        return "NAME    STATE\napi     Up\n"

    def running_services(self) -> List[str]:
        return list(self.running)

    def exec(self, service, command) -> bool:
        self.calls.append(("exec", service, tuple(command)))
        return self.exec_results.get(service, True)


class FakeRuntime(ContainerRuntime):
    """Records prune and helper container calls instead of running docker"""

    def __init__(self):
        self.running = True
        self.network_names: List[str] = ["librechat_default"]
        self.disk_report = "TYPE            TOTAL     ACTIVE    SIZE\nImages          3         3         1.2GB\n"
        self.pruned: List = []
        self.ephemeral: List[tuple] = []
        self.fail_ephemeral = False

    def is_running(self) -> bool:
        return self.running

    def disk_usage(self) -> str:
        return self.disk_report

    def networks(self, name_filter: str) -> List[str]:
        return [n for n in self.network_names if name_filter in n]

    def prune(self, kind) -> str:
        self.pruned.append(kind)
        return f"Total reclaimed space: 0B ({kind.value})"

    def run_ephemeral(self, image: str, volumes: Dict[Path, str], command: Sequence[str]) -> None:
        self.ephemeral.append((image, dict(volumes), list(command)))
        if self.fail_ephemeral:
            raise OrchestrationError(["docker", "run", image], 1, "tar failed")

        # Emulate tar writing its archive through the /backup mount
        mounts = {container: host for host, container in volumes.items()}
        target = command[2]
        if target.startswith("/backup/") and "/backup" in mounts:
            (Path(mounts["/backup"]) / target[len("/backup/"):]).write_bytes(b"archive")


# ============================================================================
# Git fakes
# ============================================================================


class FakeGitRepository:
    """In-memory stand-in for GitRepository

    Component repositories use ``head``, ``refs`` and ``upstream`` (the
    commits between head and the remote tip, newest first). The
    versioning root uses ``branches``, ``index`` and ``commits``.
    """

    def __init__(self, world: 'FakeGitWorld', path: Path):
        self.world = world
        self.path = path
        self.present = False
        self.head: Optional[str] = None
        self.refs: Dict[str, str] = {}
        self.summaries: Dict[str, str] = {}
        self.upstream: List[CommitInfo] = []
        self.fetched: List[str] = []
        self.fetch_error: Optional[str] = None
        self.checkout_error: Optional[str] = None
        self.checkout_lands_on: Optional[str] = None
        self.branches: Dict[str, str] = {}
        self.index: Dict[str, Optional[str]] = {}
        self.commits: List[tuple] = []
        self.commit_error: Optional[str] = None
        self.staged_override: Optional[str] = None

    def exists(self) -> bool:
        return self.present

    def rev_parse(self, ref: str = "HEAD") -> str:
        if ref == "HEAD" and self.head is not None:
            return self.head
        if ref in self.refs:
            return self.refs[ref]
        if ref in self.summaries:
            return ref
        raise GitCommandError(["rev-parse", ref], 128, f"unknown revision {ref}")

    def describe(self, ref: str = "HEAD") -> CommitInfo:
        revision = self.rev_parse(ref)
        return CommitInfo(revision=revision, summary=self.summaries.get(revision, ""))

    def fetch(self, remote: str) -> None:
        if self.fetch_error:
            raise GitCommandError(["fetch", remote], 128, self.fetch_error)
        self.fetched.append(remote)

    def log_range(self, base: str, tip: str, limit: int) -> List[CommitInfo]:
        return self.upstream[:limit]

    def count_range(self, base: str, tip: str) -> int:
        return len(self.upstream)

    def create_branch(self, name: str, start: str = "HEAD") -> None:
        if name in self.branches:
            raise GitCommandError(["branch", name, start], 128,
                                  f"fatal: a branch named '{name}' already exists")
        self.branches[name] = self.rev_parse(start)

    def checkout(self, revision: str) -> None:
        if self.checkout_error:
            raise GitCommandError(["checkout", revision], 1, self.checkout_error)
        self.head = self.checkout_lands_on or revision

    def add(self, path: str) -> None:
        self.index[path] = self.world.repo(self.path / path).head

    def staged_revision(self, path: str) -> Optional[str]:
        if self.staged_override is not None:
            return self.staged_override
        return self.index.get(path)

    def commit(self, message: str, paths: Sequence[str]) -> str:
        if self.commit_error:
            raise GitCommandError(["commit"], 1, self.commit_error)
        self.commits.append((message, list(paths)))
        self.head = f"root{len(self.commits):035d}"
        return self.head


class FakeGitWorld:
    """Repository factory handing out one fake per path"""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.repos: Dict[Path, FakeGitRepository] = {}
        parent = self.repo(self.root)
        parent.present = True
        parent.head = "0" * 40

    def repo(self, path) -> FakeGitRepository:
        key = Path(path).resolve()
        if key not in self.repos:
            self.repos[key] = FakeGitRepository(self, key)
        return self.repos[key]

    __call__ = repo

    @property
    def parent(self) -> FakeGitRepository:
        return self.repo(self.root)

    def add_component(self, path: str, current: str, latest: Optional[str] = None,
                      commits: int = 0, remote_ref: str = "origin/main",
                      summary: str = "Add feature") -> FakeGitRepository:
        """Register a checked-out component whose upstream is ``commits`` ahead"""
        repo = self.repo(self.root / path)
        repo.present = True
        repo.head = current
        repo.summaries[current] = "Current state"
        latest = latest or current
        repo.refs[remote_ref] = latest
        repo.summaries[latest] = summary
        repo.upstream = [
            CommitInfo(revision=latest if i == 0 else f"{i:040x}", summary=f"{summary} {i}")
            for i in range(commits)
        ]
        return repo


# ============================================================================
# Clock and HTTP fakes
# ============================================================================


class FixedClock(Clock):
    """Clock frozen at one instant; sleeps are recorded, not taken"""

    def __init__(self, instant: datetime = datetime(2024, 1, 20, 10, 30, 0)):
        self.instant = instant
        self.slept: List[float] = []
        self._ticks = 0.0

    def now(self) -> datetime:
        return self.instant

    def monotonic(self) -> float:
        self._ticks += 1.0
        return self._ticks

    def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)


class FakeResponse:
    def __init__(self, status_code: int):
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeSession:
    """requests.Session stand-in keyed by URL

    Unknown URLs raise ConnectionError, like a port nobody listens on.
    """

    def __init__(self, responses: Optional[Dict[str, int]] = None):
        self.responses = dict(responses or {})
        self.requested: List[tuple] = []

    def get(self, url, timeout=None):
        self.requested.append((url, timeout))
        if url not in self.responses:
            raise requests.ConnectionError(f"Connection refused: {url}")
        return FakeResponse(self.responses[url])


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def deployment_root(tmp_path) -> Path:
    """Deployment root with compose file, env template and .gitmodules"""
    root = tmp_path / "deploy"
    root.mkdir()
    (root / "docker-compose.yml").write_text(COMPOSE_YAML)
    (root / ".env.example").write_text("PORT=3080\nMONGO_URI=mongodb://mongodb:27017/LibreChat\n")
    (root / ".gitmodules").write_text(GITMODULES)
    return root


@pytest.fixture
def project_manager(deployment_root) -> ProjectManager:
    return ProjectManager(PathResolver(deployment_root))


@pytest.fixture
def deployment(project_manager):
    return project_manager.build_deployment()


@pytest.fixture
def orchestrator(deployment_root) -> FakeOrchestrator:
    return FakeOrchestrator(
        compose_file=deployment_root / "docker-compose.yml",
        env_file=deployment_root / ".env",
        project_dir=deployment_root,
    )


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def git_world(deployment_root) -> FakeGitWorld:
    return FakeGitWorld(deployment_root)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def confirm() -> ScriptedConfirmation:
    return ScriptedConfirmation()


@pytest.fixture
def http_session() -> FakeSession:
    return FakeSession({
        "http://localhost:3080/health": 200,
        "http://localhost:3001/health": 200,
    })


@pytest.fixture
def stack_context(project_manager, orchestrator, runtime, git_world, clock, confirm, http_session):
    """Factory for CLI context objects wired to the fakes"""
    def make(**overrides) -> Context:
        params = dict(
            project_manager=project_manager,
            orchestrator=orchestrator,
            runtime=runtime,
            clock=clock,
            confirm=confirm,
            repo_factory=git_world,
            http_session=http_session,
            environ={},
        )
        params.update(overrides)
        return Context(**params)
    return make


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()
