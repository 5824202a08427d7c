"""Tests for the health checker"""

import pytest

from stackctl.api.exceptions import UnhealthyStackError
from stackctl.cli.main import cli
from stackctl.models.config import HealthTarget, StackConfig
from stackctl.services import HealthService

from conftest import FakeSession


@pytest.fixture
def targets():
    return StackConfig().health_targets


def test_all_targets_healthy(orchestrator, targets, http_session):
    report = HealthService(orchestrator, targets, session=http_session, environ={}).check()

    assert report.all_healthy
    assert [r.name for r in report.results] == ["LibreChat API", "PKM Service", "MongoDB"]
    assert ("exec", "mongodb", ("mongosh", "--eval", "db.runCommand('ping')")) in orchestrator.calls


def test_unreachable_target_does_not_affect_the_others(orchestrator, targets):
    session = FakeSession({"http://localhost:3080/health": 200})

    report = HealthService(orchestrator, targets, session=session, environ={}).check()

    assert report.get("LibreChat API").healthy
    assert not report.get("PKM Service").healthy
    assert report.get("MongoDB").healthy
    assert [r.name for r in report.failing] == ["PKM Service"]
    # PKM is optional, so the stack still counts as healthy
    assert report.failing_required == []


def test_http_error_status_is_unhealthy(orchestrator, targets):
    session = FakeSession({"http://localhost:3080/health": 503, "http://localhost:3001/health": 200})

    report = HealthService(orchestrator, targets, session=session, environ={}).check()

    assert not report.get("LibreChat API").healthy
    assert "503" in report.get("LibreChat API").detail


def test_port_comes_from_environment(orchestrator, targets):
    session = FakeSession({"http://localhost:4000/health": 200, "http://localhost:3001/health": 200})

    report = HealthService(orchestrator, targets, session=session, environ={"PORT": "4000"}).check()

    assert report.all_healthy


def test_failed_exec_probe(orchestrator, targets, http_session):
    orchestrator.exec_results["mongodb"] = False

    report = HealthService(orchestrator, targets, session=http_session, environ={}).check()

    assert not report.get("MongoDB").healthy


def test_probe_that_raises_is_reported_not_raised(orchestrator, http_session):
    def broken(service, command):
        raise RuntimeError("container vanished")

    orchestrator.exec = broken
    target = HealthTarget(name="Broken", type="exec", service="api", command=["true"])

    report = HealthService(orchestrator, [target], session=http_session, environ={}).check()

    assert not report.get("Broken").healthy
    assert "container vanished" in report.get("Broken").detail


def test_require_healthy_raises_for_required_failures(orchestrator, targets):
    session = FakeSession({"http://localhost:3001/health": 200})
    service = HealthService(orchestrator, targets, session=session, environ={})

    with pytest.raises(UnhealthyStackError) as exc_info:
        service.require_healthy()

    assert exc_info.value.failing == ["LibreChat API"]


def test_require_healthy_ignores_optional_failures(orchestrator, targets):
    session = FakeSession({"http://localhost:3080/health": 200})
    HealthService(orchestrator, targets, session=session, environ={}).require_healthy()


def test_health_target_validation():
    with pytest.raises(ValueError):
        HealthTarget(name="No URL", type="http")
    with pytest.raises(ValueError):
        HealthTarget(name="No command", type="exec", service="api")


def test_health_command_is_advisory(runner, stack_context, http_session, orchestrator):
    http_session.responses.clear()
    orchestrator.exec_results["mongodb"] = False

    result = runner.invoke(cli, ["health"], obj=stack_context())

    assert result.exit_code == 0, result.output
    assert ("ps",) in orchestrator.calls
    assert "3 of 3 targets failing" in result.output


def test_health_command_all_healthy(runner, stack_context):
    result = runner.invoke(cli, ["health"], obj=stack_context())

    assert result.exit_code == 0, result.output
    assert "All targets healthy" in result.output
