"""Runtime settings for the studio.

Every tunable has a default matching the interactive application. The server
entrypoint reads overrides from the environment; library code receives a
``StudioSettings`` instance by injection.
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional


ENV_PREFIX = "STUDIO_"


@dataclass
class StudioSettings:
    """Tunables for the studio session, simulators and server

    Args:
        max_history_items: Number of completed requests kept in history
        max_schema_depth: Nesting depth after which schema inference truncates
        response_delay_ms: Fixed latency of the simulated request
        monitoring_interval_ms: Period of the monitoring simulator
        max_error_log_entries: Error log lines kept by the monitoring simulator
        error_chance_percent: Chance of a simulated error per monitoring tick
        maintenance_chance_percent: Chance of maintenance mode per monitoring tick
        online_chance_percent: Chance of reporting Online per monitoring tick
        success_rate_threshold: Success rate (percent) considered healthy
        latency_threshold_ms: Latency considered healthy
        host: Interface the HTTP server binds to
        port: Port the HTTP server listens on
    """
    max_history_items: int = 10
    max_schema_depth: int = 5
    response_delay_ms: int = 1000
    monitoring_interval_ms: int = 5000
    max_error_log_entries: int = 10
    error_chance_percent: float = 10
    maintenance_chance_percent: float = 5
    online_chance_percent: float = 95
    success_rate_threshold: float = 95
    latency_threshold_ms: int = 200
    host: str = "0.0.0.0"
    port: int = 8080

    def __post_init__(self) -> None:
        if self.max_history_items < 0:
            raise ValueError("max_history_items must not be negative")
        if self.max_schema_depth < 0:
            raise ValueError("max_schema_depth must not be negative")
        if self.response_delay_ms < 0:
            raise ValueError("response_delay_ms must not be negative")
        if self.monitoring_interval_ms <= 0:
            raise ValueError("monitoring_interval_ms must be positive")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "StudioSettings":
        """Build settings from ``HOST``, ``PORT`` and ``STUDIO_<FIELD>`` variables

        Raises:
            ValueError: If a variable cannot be converted to the field's type
        """
        env = os.environ if env is None else env
        values = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None and f.name in ("host", "port"):
                raw = env.get(f.name.upper())
            if raw is None or raw == "":
                continue
            caster = f.type if f.type in (int, float) else str
            try:
                values[f.name] = caster(raw)
            except ValueError:
                raise ValueError(f"Invalid value for {f.name}: {raw!r}")
        return cls(**values)


__all__ = [
    "StudioSettings",
]
