"""API Builder Studio package.

This package models an interactive API request builder: endpoint
configuration, simulated request execution with bounded history, an
editable mock response, schema inference over responses, preset endpoints,
exports and a synthetic monitoring dashboard.
"""

from .config import StudioSettings
from .endpoint_store import EndpointStore, build_full_url
from .export import ExportDocument, export_config
from .history import HistoryStore
from .mock_store import MockResponseStore
from .models import (
    BodyType,
    EndpointConfig,
    HistoryEntry,
    HTTPMethod,
    KeyValueEntry,
    OutputFormat,
    Preset,
    ResponseRecord,
)
from .monitoring import MonitoringSimulator
from .presets import PRESET_CATALOG, find_preset, list_categories
from .schema import SchemaInferencer, infer_schema
from .session import StudioSession
from .simulator import RequestSimulator

__all__ = [
    "StudioSettings",
    "EndpointStore",
    "build_full_url",
    "ExportDocument",
    "export_config",
    "HistoryStore",
    "MockResponseStore",
    "BodyType",
    "EndpointConfig",
    "HistoryEntry",
    "HTTPMethod",
    "KeyValueEntry",
    "OutputFormat",
    "Preset",
    "ResponseRecord",
    "MonitoringSimulator",
    "PRESET_CATALOG",
    "find_preset",
    "list_categories",
    "SchemaInferencer",
    "infer_schema",
    "StudioSession",
    "RequestSimulator",
]
