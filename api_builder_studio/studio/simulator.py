"""Simulated request execution.

There is no transport: a send waits a fixed delay on the event loop and then
returns the mock value as a 200 response. Nothing can fail, time out or be
retried.
"""

import asyncio
import logging
import time
from typing import Any

from .endpoint_store import build_full_url
from .models import EndpointConfig, ResponseRecord

DEFAULT_RESPONSE_DELAY_MS = 1000


class RequestSimulator:
    """Produces ResponseRecords after a fixed latency

    Args:
        delay_ms: Simulated latency in milliseconds
    """

    def __init__(self, delay_ms: int = DEFAULT_RESPONSE_DELAY_MS):
        self.delay_ms = delay_ms

    async def send(self, config: EndpointConfig, mock_response: Any) -> ResponseRecord:
        start = time.monotonic()
        logging.info(f"[Simulator] Sending {config.method.value} {build_full_url(config)}")
        await asyncio.sleep(self.delay_ms / 1000)
        elapsed = int((time.monotonic() - start) * 1000)
        record = ResponseRecord(status=200, status_text="OK", data=mock_response, response_time=elapsed)
        logging.info(f"[Simulator] {config.method.value} {config.path} returned {record.status} in {elapsed}ms")
        return record


__all__ = [
    "DEFAULT_RESPONSE_DELAY_MS",
    "RequestSimulator",
]
