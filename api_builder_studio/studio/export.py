"""Export of endpoint configurations as JSON, Postman or OpenAPI documents."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .models import EndpointConfig, HTTPMethod

COLLECTION_NAME = "API Builder Studio Collection"
API_TITLE = "API Builder Studio"
EXPORT_FORMATS = ("json", "postman", "openapi")


@dataclass
class ExportDocument:
    """A serialized document ready to be downloaded"""
    filename: str
    content: str
    media_type: str = "application/json"


def _strip_scheme(url: str) -> str:
    return url.replace("https://", "").replace("http://", "")


def to_postman(config: EndpointConfig) -> Dict[str, Any]:
    request = {
        "method": config.method.value,
        "header": [{"key": h.key, "value": h.value} for h in config.headers],
        "url": {
            "raw": f"{config.base_url}{config.path}",
            "host": [_strip_scheme(config.base_url)],
            "path": [segment for segment in config.path.split("/") if segment],
        },
    }
    if config.method != HTTPMethod.GET:
        request["body"] = {"mode": "raw", "raw": config.body}
    return {
        "info": {"name": COLLECTION_NAME},
        "item": [{"name": f"{config.method.value} {config.path}", "request": request}],
    }


def to_openapi(config: EndpointConfig) -> Dict[str, Any]:
    operation = {
        "summary": f"{config.method.value} {config.path}",
        "parameters": [
            {"name": p.key, "in": "query", "required": p.required, "schema": {"type": "string"}}
            for p in config.query_params
        ],
        "responses": {
            "200": {
                "description": "Success",
                "content": {"application/json": {"schema": {"type": "object"}}},
            }
        },
    }
    return {
        "openapi": "3.0.0",
        "info": {"title": API_TITLE, "version": "1.0.0"},
        "paths": {config.path: {config.method.value.lower(): operation}},
    }


def export_config(config: EndpointConfig, fmt: str) -> Optional[ExportDocument]:
    """Serialize ``config`` in the requested format

    Args:
        config: Configuration to export
        fmt: One of "json", "postman", "openapi"

    Returns:
        ExportDocument, or None when the format is not supported
    """
    if fmt == "json":
        document, filename = config.to_dict(), "api-config.json"
    elif fmt == "postman":
        document, filename = to_postman(config), "postman-collection.json"
    elif fmt == "openapi":
        document, filename = to_openapi(config), "openapi-spec.json"
    else:
        logging.warning(f"[Export] Unsupported export format '{fmt}'")
        return None

    logging.info(f"[Export] Exported {config.method.value} {config.path} as {fmt}")
    return ExportDocument(filename=filename, content=json.dumps(document, indent=2))


__all__ = [
    "EXPORT_FORMATS",
    "ExportDocument",
    "export_config",
    "to_openapi",
    "to_postman",
]
