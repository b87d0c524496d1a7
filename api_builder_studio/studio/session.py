"""Application state for one studio session.

StudioSession ties the stores and the simulator together and implements the
user-level operations: sending, loading history, picking presets and
producing the views of the current response.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from .config import StudioSettings
from .endpoint_store import EndpointStore
from .export import ExportDocument, export_config
from .history import HistoryStore
from .mock_store import MockResponseStore, dump_json
from .models import EndpointConfig, HistoryEntry, ResponseRecord
from .presets import PRESET_CATALOG, find_preset
from .schema import SchemaInferencer
from .simulator import RequestSimulator

VIEW_TABS = ("raw", "tree", "schema", "mock", "history", "monitoring")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_tree(value: Any, key: Any = "root") -> Dict[str, Any]:
    """Project a JSON value into expandable tree nodes

    Arrays are labelled ``Array(n)``, objects ``Object`` and leaves carry
    their JSON text.
    """
    if isinstance(value, (list, tuple)):
        children: List[Dict[str, Any]] = [build_tree(item, index) for index, item in enumerate(value)]
        return {"key": key, "label": f"Array({len(value)})", "expandable": True, "children": children}
    if isinstance(value, dict):
        children = [build_tree(item, name) for name, item in value.items()]
        return {"key": key, "label": "Object", "expandable": True, "children": children}
    return {"key": key, "label": json.dumps(value, ensure_ascii=False), "expandable": False}


class StudioSession:
    """Explicit, injectable state of the studio

    Sends are fire-and-forget tasks that are never cancelled. When sends
    overlap, each one writes its own history entry and the last one to
    complete becomes the current response.

    Args:
        settings: Tunables; defaults to StudioSettings()
        endpoint_store: Editor state; created from defaults when omitted
        mock_store: Mock response state; created from defaults when omitted
        history: Request history; sized from settings when omitted
        simulator: Request simulator; delay taken from settings when omitted
        catalog: Preset catalog to select from
    """

    def __init__(
        self,
        settings: Optional[StudioSettings] = None,
        endpoint_store: Optional[EndpointStore] = None,
        mock_store: Optional[MockResponseStore] = None,
        history: Optional[HistoryStore] = None,
        simulator: Optional[RequestSimulator] = None,
        catalog: Optional[dict] = None,
    ):
        # stores define __len__, so an empty injected store is falsy
        self.settings = settings if settings is not None else StudioSettings()
        self.endpoint = endpoint_store if endpoint_store is not None else EndpointStore()
        self.mock = mock_store if mock_store is not None else MockResponseStore()
        self.history = history if history is not None else HistoryStore(self.settings.max_history_items)
        self.simulator = simulator if simulator is not None else RequestSimulator(self.settings.response_delay_ms)
        self.schema_inferencer = SchemaInferencer(self.settings.max_schema_depth)
        self.catalog = PRESET_CATALOG if catalog is None else catalog
        self.response: Optional[ResponseRecord] = None
        self.is_loading = False
        self.active_tab = "raw"
        self.selected_preset: Optional[str] = None
        self._pending: Set[asyncio.Task] = set()

    def set_active_tab(self, tab: str) -> None:
        if tab not in VIEW_TABS:
            raise ValueError(f"Unknown view '{tab}'")
        self.active_tab = tab

    def select_preset(self, name: str) -> bool:
        """Replace the editor config with a copy of the named preset

        Returns:
            True if the preset exists, False otherwise (state unchanged)
        """
        preset = find_preset(name, self.catalog)
        if preset is None:
            logging.warning(f"[StudioSession] Preset '{name}' not found")
            return False
        self.endpoint.replace(preset.endpoint_config)
        self.selected_preset = name
        logging.info(f"[StudioSession] Selected preset '{name}' from '{preset.category}'")
        return True

    def send_request(self) -> "asyncio.Task[ResponseRecord]":
        """Schedule a simulated send on the running loop and return its task

        The config and mock value are captured now; edits made while the
        request is pending do not affect it. Callers that await the task
        should wrap it in asyncio.shield so their own cancellation does not
        abort the send.
        """
        config = self.endpoint.snapshot()
        mock_value = self.mock.value
        self.is_loading = True
        task = asyncio.get_running_loop().create_task(self._complete_send(config, mock_value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _complete_send(self, config: EndpointConfig, mock_value: Any) -> ResponseRecord:
        try:
            record = await self.simulator.send(config, mock_value)
        finally:
            self.is_loading = False
        self.response = record
        self.history.prepend(HistoryEntry(
            endpoint_config=config,
            response=record,
            timestamp=datetime.now().strftime(TIMESTAMP_FORMAT),
        ))
        return record

    def load_from_history(self, index: int) -> bool:
        """Restore the config and response of history entry ``index``

        Returns:
            False (and no change) if the index is out of range
        """
        loaded = self.history.load_at(index)
        if loaded is None:
            return False
        config, record = loaded
        self.endpoint.replace(config)
        self.response = record
        self.active_tab = "raw"
        logging.info(f"[StudioSession] Loaded history entry {index}")
        return True

    def clear_history(self) -> None:
        self.history.clear()

    def commit_mock(self, text: str) -> dict:
        return self.mock.commit(text)

    def export(self, fmt: str) -> Optional[ExportDocument]:
        return export_config(self.endpoint.config, fmt)

    def displayed_data(self) -> Any:
        """Data shown in the response views: the last response, else the mock"""
        return self.response.data if self.response is not None else self.mock.value

    def infer_response_schema(self) -> Dict[str, Any]:
        return self.schema_inferencer.infer(self.displayed_data())

    def tree_view(self) -> Dict[str, Any]:
        return build_tree(self.displayed_data())

    def raw_view(self) -> str:
        return dump_json(self.displayed_data())

    def full_url(self) -> str:
        return self.endpoint.full_url()

    def state(self) -> Dict[str, Any]:
        return {
            "endpoint": self.endpoint.config.to_dict(),
            "fullUrl": self.full_url(),
            "response": self.response.to_dict() if self.response is not None else None,
            "isLoading": self.is_loading,
            "activeTab": self.active_tab,
            "selectedPreset": self.selected_preset,
            "historyCount": len(self.history),
        }


__all__ = [
    "StudioSession",
    "build_tree",
    "TIMESTAMP_FORMAT",
    "VIEW_TABS",
]
