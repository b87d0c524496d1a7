"""Synthetic API health metrics for the monitoring dashboard.

The generator is independent from the request flow. It produces a new
sample on every tick of a periodic task that runs until the owning view
stops it.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .config import StudioSettings

POSSIBLE_ERROR_MESSAGES = (
    "Authentication failed (401)",
    "Resource not found (404)",
    "Internal server error (500)",
    "Gateway timeout (504)",
    "Rate limit exceeded (429)",
    "Bad request (400)",
    "Database connection lost",
)


@dataclass
class TrafficMetrics:
    total_requests: int = 0
    success_rate: float = 100.0
    error_rate: float = 0.0


@dataclass
class MonitoringSnapshot:
    connection_status: str = "Online"
    error_logs: List[str] = field(default_factory=list)
    traffic: TrafficMetrics = field(default_factory=TrafficMetrics)
    latency_ms: int = 0
    maintenance_mode: bool = False


class MonitoringSimulator:
    """Periodic generator of connection, traffic, latency and error samples

    Args:
        settings: Interval, chances and thresholds; defaults to StudioSettings()
        rng: Random source, injectable for deterministic output
    """

    def __init__(self, settings: Optional[StudioSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or StudioSettings()
        self.rng = rng or random.Random()
        self.state = MonitoringSnapshot()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> MonitoringSnapshot:
        """Generate one sample and return the updated state"""
        s = self.settings
        state = self.state
        rng = self.rng

        state.connection_status = "Online" if rng.random() * 100 < s.online_chance_percent else "Offline"

        if rng.random() * 100 < s.error_chance_percent:
            message = rng.choice(POSSIBLE_ERROR_MESSAGES)
            line = f"[{datetime.now().strftime('%H:%M:%S')}] ERROR: {message}"
            state.error_logs = [line, *state.error_logs][:s.max_error_log_entries]

        total = state.traffic.total_requests + rng.randint(1, 10)
        success = int(total * (0.90 + rng.random() * 0.1))
        state.traffic = TrafficMetrics(
            total_requests=total,
            success_rate=round(success / total * 100, 2),
            error_rate=round((total - success) / total * 100, 2),
        )

        state.latency_ms = rng.randint(50, 549)
        state.maintenance_mode = rng.random() * 100 < s.maintenance_chance_percent
        return state

    async def _run(self) -> None:
        interval = self.settings.monitoring_interval_ms / 1000
        while True:
            self.tick()
            await asyncio.sleep(interval)

    def start(self) -> asyncio.Task:
        """Start ticking on the running event loop; the first tick is immediate"""
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run())
        logging.info(f"[Monitoring] Started with {self.settings.monitoring_interval_ms}ms interval")
        return self._task

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logging.info("[Monitoring] Stopped")

    def clear_error_logs(self) -> None:
        self.state.error_logs = []

    def set_maintenance_mode(self, enabled: bool) -> None:
        self.state.maintenance_mode = bool(enabled)
        logging.info(f"[Monitoring] Maintenance mode {'on' if enabled else 'off'}")

    def snapshot(self) -> dict:
        state = self.state
        return {
            "connectionStatus": state.connection_status,
            "errorLogs": list(state.error_logs),
            "trafficMetrics": {
                "totalRequests": state.traffic.total_requests,
                "successRate": state.traffic.success_rate,
                "errorRate": state.traffic.error_rate,
            },
            "latency": state.latency_ms,
            "maintenanceMode": state.maintenance_mode,
            "successHealthy": state.traffic.success_rate >= self.settings.success_rate_threshold,
            "latencyHealthy": state.latency_ms <= self.settings.latency_threshold_ms,
            "running": self.running,
        }


__all__ = [
    "POSSIBLE_ERROR_MESSAGES",
    "MonitoringSimulator",
    "MonitoringSnapshot",
    "TrafficMetrics",
]
