"""Data models for endpoint configurations, responses and history entries.

This module contains the core data structures used to describe the request a
user is composing and the simulated responses produced for it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class HTTPMethod(Enum):
    """Supported HTTP methods for endpoint configurations"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class BodyType(Enum):
    """Encoding of the request body"""
    JSON = "json"
    FORM_DATA = "form-data"
    URLENCODED = "x-www-form-urlencoded"


class OutputFormat(Enum):
    """Response format the endpoint is expected to produce"""
    JSON = "json"
    XML = "xml"
    CSV = "csv"


def parse_bool(value: Any, name: str = "value") -> bool:
    """Accept a real boolean or the strings "true"/"false"

    Raises:
        ValueError: For anything else, so "false" can never become True
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def parse_cache_ttl(value: Any) -> int:
    """Validate a cache lifetime in seconds

    Raises:
        ValueError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"cache TTL must be a positive integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer() or value < 1:
        raise ValueError(f"cache TTL must be a positive integer, got {value!r}")
    return int(value)


def parse_text(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


@dataclass
class KeyValueEntry:
    """A query parameter or header row

    Empty keys and values are allowed; they are kept in state and skipped
    when the request URL is rendered.

    Args:
        key: Parameter or header name
        value: Parameter or header value
        required: Whether the entry is marked as required
    """
    key: str = ""
    value: str = ""
    required: bool = False

    FIELDS = ("key", "value", "required")

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "value": self.value, "required": self.required}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeyValueEntry":
        return cls(
            key=parse_text(data.get("key", ""), "key"),
            value=parse_text(data.get("value", ""), "value"),
            required=parse_bool(data.get("required", False), "required"),
        )


def _default_headers() -> List[KeyValueEntry]:
    return [KeyValueEntry("Content-Type", "application/json", True)]


@dataclass
class EndpointConfig:
    """Full description of one HTTP request being composed

    Args:
        method: HTTP method to use
        base_url: Scheme and host part of the URL (e.g. https://api.example.com)
        path: Path appended to base_url
        query_params: Ordered query parameter rows
        headers: Ordered header rows
        body: Raw request body text
        body_type: Encoding of the body
        cors_enabled: Whether CORS is enabled for the endpoint
        cache_enabled: Whether response caching is enabled
        cache_ttl: Cache lifetime in seconds, meaningful only when caching is on
        auth_required: Whether the endpoint requires authentication
        output_format: Expected response format
    """
    method: HTTPMethod = HTTPMethod.GET
    base_url: str = "https://api.example.com"
    path: str = "/users"
    query_params: List[KeyValueEntry] = field(default_factory=list)
    headers: List[KeyValueEntry] = field(default_factory=_default_headers)
    body: str = ""
    body_type: BodyType = BodyType.JSON
    cors_enabled: bool = True
    cache_enabled: bool = False
    cache_ttl: int = 300
    auth_required: bool = False
    output_format: OutputFormat = OutputFormat.JSON

    def clone(self) -> "EndpointConfig":
        """Return a structural deep copy that shares no mutable state with self"""
        return EndpointConfig(
            method=self.method,
            base_url=self.base_url,
            path=self.path,
            query_params=[KeyValueEntry(p.key, p.value, p.required) for p in self.query_params],
            headers=[KeyValueEntry(h.key, h.value, h.required) for h in self.headers],
            body=self.body,
            body_type=self.body_type,
            cors_enabled=self.cors_enabled,
            cache_enabled=self.cache_enabled,
            cache_ttl=self.cache_ttl,
            auth_required=self.auth_required,
            output_format=self.output_format,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase document form used by exports and the HTTP API"""
        return {
            "method": self.method.value,
            "baseUrl": self.base_url,
            "path": self.path,
            "queryParams": [p.to_dict() for p in self.query_params],
            "headers": [h.to_dict() for h in self.headers],
            "body": self.body,
            "bodyType": self.body_type.value,
            "corsEnabled": self.cors_enabled,
            "cacheEnabled": self.cache_enabled,
            "cacheTtl": self.cache_ttl,
            "authRequired": self.auth_required,
            "outputFormat": self.output_format.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EndpointConfig":
        """Build a config from its document form; missing keys take defaults

        Raises:
            ValueError: If a field holds a value of the wrong type, an
                unsupported enum value or a non-positive cache TTL
        """
        defaults = cls()
        headers = data.get("headers")
        return cls(
            method=HTTPMethod(data.get("method", defaults.method.value)),
            base_url=parse_text(data.get("baseUrl", defaults.base_url), "baseUrl"),
            path=parse_text(data.get("path", defaults.path), "path"),
            query_params=[KeyValueEntry.from_dict(p) for p in data.get("queryParams", [])],
            headers=defaults.headers if headers is None else [KeyValueEntry.from_dict(h) for h in headers],
            body=parse_text(data.get("body", defaults.body), "body"),
            body_type=BodyType(data.get("bodyType", defaults.body_type.value)),
            cors_enabled=parse_bool(data.get("corsEnabled", defaults.cors_enabled), "corsEnabled"),
            cache_enabled=parse_bool(data.get("cacheEnabled", defaults.cache_enabled), "cacheEnabled"),
            cache_ttl=parse_cache_ttl(data.get("cacheTtl", defaults.cache_ttl)),
            auth_required=parse_bool(data.get("authRequired", defaults.auth_required), "authRequired"),
            output_format=OutputFormat(data.get("outputFormat", defaults.output_format.value)),
        )


@dataclass(frozen=True)
class ResponseRecord:
    """A simulated response

    Args:
        status: HTTP status code
        status_text: HTTP reason phrase
        data: JSON payload of the response
        response_time: Elapsed time in milliseconds
    """
    status: int
    status_text: str
    data: Any
    response_time: int

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "statusText": self.status_text,
            "data": self.data,
            "responseTime": self.response_time,
        }


@dataclass
class HistoryEntry:
    """Snapshot of a completed request

    Args:
        endpoint_config: Deep copy of the configuration at send time
        response: The response produced for it
        timestamp: Local completion time, formatted for display
    """
    endpoint_config: EndpointConfig
    response: ResponseRecord
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "endpointConfig": self.endpoint_config.to_dict(),
            "response": self.response.to_dict(),
            "timestamp": self.timestamp,
        }


@dataclass
class Preset:
    """A named, ready-made endpoint configuration from the preset catalog"""
    name: str
    category: str
    endpoint_config: EndpointConfig
    description: Optional[str] = None


__all__ = [
    "HTTPMethod",
    "BodyType",
    "parse_bool",
    "parse_cache_ttl",
    "parse_text",
    "OutputFormat",
    "KeyValueEntry",
    "EndpointConfig",
    "ResponseRecord",
    "HistoryEntry",
    "Preset",
]
