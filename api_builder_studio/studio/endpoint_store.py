"""Endpoint configuration store.

This module provides the EndpointStore class which holds the request being
composed, applies field-level edits to it and renders its full URL.
"""

import logging
from typing import Any, List, Optional

from .models import (
    BodyType,
    EndpointConfig,
    HTTPMethod,
    KeyValueEntry,
    OutputFormat,
    parse_bool,
    parse_cache_ttl,
    parse_text,
)


class EndpointStore:
    """Holds the live EndpointConfig of the editor

    The store owns its config exclusively: ``replace`` copies the incoming
    object and ``snapshot`` hands out copies, so presets and history entries
    never alias the live editor state.

    Args:
        config: Initial configuration (copied); defaults to EndpointConfig()
    """

    def __init__(self, config: Optional[EndpointConfig] = None):
        self._config = config.clone() if config is not None else EndpointConfig()
        logging.info(f"[EndpointStore] Initialized with {self._config.method.value} {self.full_url()}")

    @property
    def config(self) -> EndpointConfig:
        """The live config; callers must not keep references to it across edits"""
        return self._config

    def snapshot(self) -> EndpointConfig:
        return self._config.clone()

    def replace(self, config: EndpointConfig) -> None:
        """Replace the whole configuration with a deep copy of ``config``"""
        self._config = config.clone()
        logging.info(f"[EndpointStore] Replaced config with {self._config.method.value} {self.full_url()}")

    def set_method(self, method: Any) -> None:
        if not isinstance(method, HTTPMethod):
            method = HTTPMethod(str(method).upper())
        self._config.method = method

    def set_base_url(self, base_url: str) -> None:
        self._config.base_url = parse_text(base_url, "baseUrl")

    def set_path(self, path: str) -> None:
        self._config.path = parse_text(path, "path")

    def set_body(self, body: str) -> None:
        self._config.body = parse_text(body, "body")

    def set_body_type(self, body_type: Any) -> None:
        if not isinstance(body_type, BodyType):
            body_type = BodyType(body_type)
        self._config.body_type = body_type

    def set_output_format(self, output_format: Any) -> None:
        if not isinstance(output_format, OutputFormat):
            output_format = OutputFormat(output_format)
        self._config.output_format = output_format

    def set_cors_enabled(self, enabled: bool) -> None:
        self._config.cors_enabled = parse_bool(enabled, "corsEnabled")

    def set_cache_enabled(self, enabled: bool) -> None:
        self._config.cache_enabled = parse_bool(enabled, "cacheEnabled")

    def set_auth_required(self, required: bool) -> None:
        self._config.auth_required = parse_bool(required, "authRequired")

    def set_cache_ttl(self, seconds: int) -> None:
        """Set the cache lifetime

        Raises:
            ValueError: If seconds is not a positive integer
        """
        self._config.cache_ttl = parse_cache_ttl(seconds)

    # Query parameters and headers share the same row semantics.

    def add_query_param(self, key: str = "", value: str = "", required: bool = False) -> int:
        return self._add_entry(self._config.query_params, "query param", key, value, required)

    def update_query_param(self, index: int, field: str, value: Any) -> bool:
        return self._update_entry(self._config.query_params, "query param", index, field, value)

    def remove_query_param(self, index: int) -> bool:
        return self._remove_entry(self._config.query_params, "query param", index)

    def add_header(self, key: str = "", value: str = "", required: bool = False) -> int:
        return self._add_entry(self._config.headers, "header", key, value, required)

    def update_header(self, index: int, field: str, value: Any) -> bool:
        return self._update_entry(self._config.headers, "header", index, field, value)

    def remove_header(self, index: int) -> bool:
        return self._remove_entry(self._config.headers, "header", index)

    def _add_entry(self, entries: List[KeyValueEntry], kind: str, key: str, value: str, required: bool) -> int:
        entries.append(KeyValueEntry(parse_text(key, "key"), parse_text(value, "value"), parse_bool(required, "required")))
        logging.info(f"[EndpointStore] Added {kind} #{len(entries) - 1}")
        return len(entries) - 1

    def _update_entry(self, entries: List[KeyValueEntry], kind: str, index: int, field: str, value: Any) -> bool:
        """Set one field of an entry

        Returns:
            True if the entry was updated, False if the index is out of range

        Raises:
            ValueError: If field is not one of key, value, required, or the
                value has the wrong type
        """
        if field not in KeyValueEntry.FIELDS:
            raise ValueError(f"Unknown {kind} field '{field}'")
        if not 0 <= index < len(entries):
            logging.warning(f"[EndpointStore] No {kind} at index {index}")
            return False
        setattr(entries[index], field, parse_bool(value, field) if field == "required" else parse_text(value, field))
        return True

    def _remove_entry(self, entries: List[KeyValueEntry], kind: str, index: int) -> bool:
        if not 0 <= index < len(entries):
            logging.warning(f"[EndpointStore] No {kind} at index {index} to remove")
            return False
        del entries[index]
        logging.info(f"[EndpointStore] Removed {kind} #{index}")
        return True

    def full_url(self) -> str:
        return build_full_url(self._config)


def build_full_url(config: EndpointConfig) -> str:
    """Render ``base_url + path`` plus the query string

    Only rows with both a key and a value appear in the query string; values
    are not percent-encoded so the preview shows exactly what was typed.
    """
    params = "&".join(
        f"{p.key}={p.value}" for p in config.query_params if p.key and p.value
    )
    url = f"{config.base_url}{config.path}"
    return f"{url}?{params}" if params else url


__all__ = [
    "EndpointStore",
    "build_full_url",
]
