"""Health checks for the running stack"""

import logging
import os
from typing import List, Mapping, Optional

import requests

from ..api.exceptions import UnhealthyStackError
from ..constants import TargetKind
from ..models.config import HealthTarget
from ..models.result import HealthReport, HealthResult
from ..runtime.base import Orchestrator
from ..utils.async_utils import gather_in_threads, run_async
from ..utils.template_utils import render_template

logger = logging.getLogger(__name__)


class HealthService:
    """Probes every configured target independently

    Probe failures are reported, never raised: one unreachable target must
    not keep the others from being checked. Probes are read-only and run
    concurrently; the report keeps the configured order.
    """

    def __init__(self,
                 orchestrator: Orchestrator,
                 targets: List[HealthTarget],
                 session: Optional[requests.Session] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.orchestrator = orchestrator
        self.targets = list(targets)
        self.session = session or requests.Session()
        self.environ = os.environ if environ is None else environ

    def resolve_url(self, target: HealthTarget) -> str:
        """Render ${VAR} placeholders in a target URL"""
        return render_template(target.url, target.defaults, self.environ)

    def probe(self, target: HealthTarget) -> HealthResult:
        """Run one liveness probe

        Returns:
            HealthResult (never raises for target failures)
        """
        if target.kind == TargetKind.HTTP:
            return self._probe_http(target)
        return self._probe_exec(target)

    def _probe_http(self, target: HealthTarget) -> HealthResult:
        url = self.resolve_url(target)
        try:
            response = self.session.get(url, timeout=target.timeout)
        except requests.RequestException as e:
            logger.debug("Probe %s failed: %s", url, e)
            return HealthResult(target.name, False, target.required, f"{url}: {type(e).__name__}")

        if response.ok:
            return HealthResult(target.name, True, target.required, f"{url}: HTTP {response.status_code}")
        return HealthResult(target.name, False, target.required, f"{url}: HTTP {response.status_code}")

    def _probe_exec(self, target: HealthTarget) -> HealthResult:
        command = " ".join(target.command)
        if self.orchestrator.exec(target.service, target.command):
            return HealthResult(target.name, True, target.required, f"{target.service}: {command}")
        return HealthResult(target.name, False, target.required, f"{target.service}: {command} failed")

    def check(self, targets: Optional[List[HealthTarget]] = None) -> HealthReport:
        """Probe targets concurrently

        Args:
            targets: Subset of targets (defaults to all configured)

        Returns:
            HealthReport in target order
        """
        targets = self.targets if targets is None else targets
        calls = [lambda t=t: self._safe_probe(t) for t in targets]
        results = run_async(gather_in_threads(calls))
        return HealthReport(results=results)

    def _safe_probe(self, target: HealthTarget) -> HealthResult:
        try:
            return self.probe(target)
        except Exception as e:
            # A broken probe is a failed probe, the other targets still run
            logger.warning("Health probe for %s raised: %s", target.name, e)
            return HealthResult(target.name, False, target.required, str(e))

    def check_target(self, target: HealthTarget) -> bool:
        """Probe a single target and return whether it is healthy"""
        return self._safe_probe(target).healthy

    def require_healthy(self) -> HealthReport:
        """Use the health check as a precondition

        Raises:
            UnhealthyStackError: If any required target is failing
        """
        report = self.check()
        failing = report.failing_required
        if failing:
            raise UnhealthyStackError([r.name for r in failing])
        return report
