"""
Prometheus metrics for PodAuthz decisions.

Each collector owns its registry so that several engines (or tests) can run
side by side without clashing on metric names.
"""

from dataclasses import dataclass
from typing import Dict
import logging

from prometheus_client import (
    CollectorRegistry, Counter, Histogram, generate_latest
)


logger = logging.getLogger(__name__)


@dataclass
class MetricConfig:
    """Configuration for metrics collection."""

    enabled: bool = True
    namespace: str = "podauthz"


class MetricsCollector:
    """Collects authorization decision metrics."""

    def __init__(self, config: MetricConfig = None):
        self.config = config or MetricConfig()
        self.registry = CollectorRegistry()
        self._counts: Dict[str, int] = {}

        namespace = self.config.namespace

        self.decisions = Counter(
            f'{namespace}_authorization_decisions_total',
            'Total number of authorization decisions',
            ['outcome'],
            registry=self.registry
        )

        self.decision_latency = Histogram(
            f'{namespace}_authorization_duration_seconds',
            'Authorization decision duration in seconds',
            ['outcome'],
            buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=self.registry
        )

        self.grant_resolutions = Counter(
            f'{namespace}_grant_resolutions_total',
            'Total number of data grant resolutions',
            ['strategy', 'result'],
            registry=self.registry
        )

        if self.config.enabled:
            logger.info("Metrics collector initialized")
        else:
            logger.info("Metrics collection disabled")

    def record_decision(self, outcome: str, duration: float) -> None:
        """Record the outcome and duration of one authorization decision."""
        if not self.config.enabled:
            return

        self.decisions.labels(outcome=outcome).inc()
        self.decision_latency.labels(outcome=outcome).observe(duration)
        self._bump(f"decisions_{outcome}")
        logger.debug(f"Recorded authorization decision: {outcome} in {duration:.4f}s")

    def record_grant_resolution(self, strategy: str, result: str) -> None:
        """Record a grant resolution by a strategy (granted, empty or error)."""
        if not self.config.enabled:
            return

        self.grant_resolutions.labels(strategy=strategy, result=result).inc()
        self._bump(f"grants_{strategy}_{result}")

    def get_count(self, key: str) -> int:
        """Get a locally cached count, e.g. ``decisions_allowed``."""
        return self._counts.get(key, 0)

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)

    def _bump(self, key: str) -> None:
        self._counts[key] = self._counts.get(key, 0) + 1
