"""Tests for the precondition checks"""

import pytest

from stackctl.api.exceptions import ConfigMissingError, EnvironmentError
from stackctl.core.preflight import (
    ComposeFileCheck,
    EnvFileCheck,
    OrchestratorToolCheck,
    Preflight,
)
from stackctl.utils.file_utils import create_from_template


def test_all_checks_pass_and_env_file_is_created(deployment, orchestrator, runtime):
    passed = Preflight(deployment, orchestrator, runtime).run()

    assert [check.name for check in passed] == [
        "Compose File", "Environment File", "Container Runtime", "Compose Tool",
    ]
    assert deployment.env_file.read_text() == deployment.env_template.read_text()


def test_existing_env_file_is_left_alone(deployment, orchestrator, runtime):
    deployment.env_file.write_text("PORT=4000\n")

    Preflight(deployment, orchestrator, runtime).run()

    assert deployment.env_file.read_text() == "PORT=4000\n"


def test_missing_compose_file_fails_first(deployment, orchestrator, runtime):
    deployment.compose_file.unlink()
    runtime.running = False

    with pytest.raises(ConfigMissingError) as exc_info:
        Preflight(deployment, orchestrator, runtime).run()

    assert "docker-compose.yml" in str(exc_info.value)
    assert not deployment.env_file.exists()


def test_missing_template_fails_without_creating_env_file(deployment, orchestrator, runtime):
    deployment.env_template.unlink()

    with pytest.raises(ConfigMissingError) as exc_info:
        Preflight(deployment, orchestrator, runtime).run()

    assert not deployment.env_file.exists()
    assert "cp .env.example .env" in exc_info.value.hint


def test_docker_not_running(deployment, orchestrator, runtime):
    runtime.running = False

    with pytest.raises(EnvironmentError) as exc_info:
        Preflight(deployment, orchestrator, runtime).run()

    assert str(exc_info.value) == "Docker is not running"


def test_compose_tool_not_installed(deployment, orchestrator, runtime):
    orchestrator.installed = False

    with pytest.raises(EnvironmentError) as exc_info:
        Preflight(deployment, orchestrator, runtime).run()

    assert "not installed" in str(exc_info.value)


def test_compose_tool_too_old(orchestrator):
    orchestrator.version_string = "docker-compose version 1.21.0, build 5920eb0"

    check = OrchestratorToolCheck(orchestrator).run()

    assert not check.passed
    assert "1.21.0" in check.message


def test_compose_plugin_version_accepted(orchestrator):
    orchestrator.version_string = "v2.24.6"

    assert OrchestratorToolCheck(orchestrator).run().passed


def test_unknown_compose_version_is_tolerated(orchestrator):
    orchestrator.version_string = None

    check = OrchestratorToolCheck(orchestrator).run()

    assert check.passed
    assert "version unknown" in check.message


def test_env_check_reports_creation(deployment):
    check = EnvFileCheck(deployment).run()

    assert check.passed
    assert check.created


def test_compose_check_names_the_file(deployment):
    check = ComposeFileCheck(deployment).run()

    assert check.passed
    assert "docker-compose.yml" in check.message


def test_template_copy_never_overwrites(tmp_path):
    template = tmp_path / ".env.example"
    template.write_text("FROM=template\n")
    target = tmp_path / ".env"
    target.write_text("FROM=concurrent-writer\n")

    assert create_from_template(template, target) is False
    assert target.read_text() == "FROM=concurrent-writer\n"


def test_template_copy_without_template_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        create_from_template(tmp_path / ".env.example", tmp_path / ".env")

    assert not (tmp_path / ".env").exists()
