"""Tests for snapshots and restore"""

import pytest
from rich.console import Console

from stackctl.api.exceptions import BackupError, NotImplementedError
from stackctl.cli.main import cli
from stackctl.services import BackupService


@pytest.fixture
def make_backup(deployment, project_manager, runtime, clock, git_world):
    def make():
        return BackupService(
            deployment,
            runtime,
            project_manager.tracked_components(),
            clock=clock,
            repo_factory=git_world,
            console=Console(quiet=True),
        )
    return make


def test_snapshot_layout(make_backup, deployment, deployment_root, runtime, git_world):
    deployment.env_file.write_text("PORT=3080\n")
    (deployment_root / "data-node").mkdir()
    git_world.add_component("LibreChat", current="a" * 40)
    git_world.add_component("pkm-service", current="b" * 40)

    snapshot = make_backup().create()

    assert snapshot.snapshot_id == "backup-20240120-103000"
    assert snapshot.directory == deployment_root / "backups" / "backup-20240120-103000"
    assert (snapshot.directory / "docker-compose.yml").read_text() == deployment.compose_file.read_text()
    assert (snapshot.directory / ".env").read_text() == "PORT=3080\n"
    assert (snapshot.directory / "mongodb-data.tar.gz").exists()
    assert snapshot.skipped == []

    image, volumes, command = runtime.ephemeral[0]
    assert image == "alpine"
    assert sorted(volumes.values()) == ["/backup", "/source"]
    assert command == ["tar", "czf", "/backup/mongodb-data.tar.gz", "-C", "/source", "."]

    manifest = (snapshot.directory / "submodule-info.txt").read_text().splitlines()
    assert manifest == [f"LibreChat commit: {'a' * 40}", f"pkm-service commit: {'b' * 40}"]


def test_missing_env_file_and_data_are_recorded_skips(make_backup, runtime):
    snapshot = make_backup().create()

    assert {item.name for item in snapshot.skipped} == {".env", "mongodb"}
    assert runtime.ephemeral == []


def test_component_not_checked_out_is_listed(make_backup, git_world):
    git_world.add_component("LibreChat", current="c" * 40)

    snapshot = make_backup().create()

    assert snapshot.revisions == {"LibreChat": "c" * 40, "pkm-service": None}
    assert "pkm-service commit: not checked out" in snapshot.manifest_path.read_text()


def test_snapshot_records_revision_on_components(deployment, project_manager, runtime, clock, git_world):
    git_world.add_component("LibreChat", current="d" * 40)
    components = project_manager.tracked_components()

    BackupService(deployment, runtime, components, clock=clock, repo_factory=git_world,
                  console=Console(quiet=True)).create()

    assert [(c.name, c.revision) for c in components] == [("LibreChat", "d" * 40), ("pkm-service", None)]


def test_snapshot_directory_is_created_exclusively(make_backup):
    make_backup().create()

    # Same frozen second
    with pytest.raises(BackupError):
        make_backup().create()


def test_archive_failure_is_a_backup_error(make_backup, deployment_root, runtime):
    (deployment_root / "data-node").mkdir()
    runtime.fail_ephemeral = True

    with pytest.raises(BackupError):
        make_backup().create()


def test_restore_is_not_implemented():
    with pytest.raises(NotImplementedError):
        BackupService.restore("backup-20240120-103000")


def test_backup_command(runner, stack_context, deployment_root):
    result = runner.invoke(cli, ["backup"], obj=stack_context())

    assert result.exit_code == 0, result.output
    # The env file was materialized by the precondition check, so it is copied
    snapshot = deployment_root / "backups" / "backup-20240120-103000"
    assert (snapshot / ".env").exists()
    assert (snapshot / "submodule-info.txt").exists()
