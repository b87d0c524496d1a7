"""Catalog of ready-made endpoint configurations.

Presets are kept as documents and materialized into fresh EndpointConfig
objects on every lookup, so selecting a preset can never alias the catalog.
"""

import json
from typing import Dict, List, Optional

from .models import EndpointConfig, Preset

_BEARER = {"key": "Authorization", "value": "Bearer YOUR_ACCESS_TOKEN", "required": True}
_JSON_CONTENT = {"key": "Content-Type", "value": "application/json", "required": True}


def _preset(name: str, method: str, base_url: str, path: str = "", query_params=(), headers=(),
            body=None, cache_ttl: int = 300, cache_enabled: bool = False) -> dict:
    return {
        "name": name,
        "endpointConfig": {
            "method": method,
            "baseUrl": base_url,
            "path": path,
            "queryParams": [dict(p) for p in query_params],
            "headers": [dict(h) for h in headers],
            "body": json.dumps(body, indent=2) if body is not None else "",
            "bodyType": "json",
            "corsEnabled": True,
            "cacheEnabled": cache_enabled,
            "cacheTtl": cache_ttl,
            "authRequired": True,
            "outputFormat": "json",
        },
    }


def _query(key: str, value: str) -> dict:
    return {"key": key, "value": value, "required": True}


PRESET_CATALOG: Dict[str, List[dict]] = {
    "Google APIs": [
        _preset("Google Search Console", "GET", "https://www.googleapis.com/webmasters/v3", "/sites",
                headers=[_BEARER], cache_enabled=True, cache_ttl=600),
        _preset("Google Analytics", "POST", "https://analyticsdata.googleapis.com/v1beta",
                "/properties/GA_PROPERTY_ID:runReport", headers=[_JSON_CONTENT, _BEARER],
                body={
                    "dateRanges": [{"startDate": "7daysAgo", "endDate": "today"}],
                    "dimensions": [{"name": "city"}],
                    "metrics": [{"name": "activeUsers"}],
                }),
        _preset("Google Docs API", "GET", "https://docs.googleapis.com/v1", "/documents/DOCUMENT_ID",
                headers=[_BEARER], cache_enabled=True, cache_ttl=3600),
        _preset("Google Sheets API", "GET", "https://sheets.googleapis.com/v4",
                "/spreadsheets/SPREADSHEET_ID/values/Sheet1!A1:C10", headers=[_BEARER], cache_enabled=True),
        _preset("Appscript API", "POST", "https://script.googleapis.com/v1", "/scripts/SCRIPT_ID:run",
                headers=[_JSON_CONTENT, _BEARER],
                body={"function": "myFunctionName", "parameters": ["param1", "param2"]}),
        _preset("Google Maps Geocoding API", "GET", "https://maps.googleapis.com/maps/api/geocode/json",
                query_params=[_query("address", "1600 Amphitheatre Parkway, Mountain View, CA"),
                              _query("key", "YOUR_API_KEY")],
                cache_enabled=True, cache_ttl=86400),
        _preset("Google Cloud Vision API", "POST", "https://vision.googleapis.com/v1/images:annotate",
                query_params=[_query("key", "YOUR_API_KEY")], headers=[_JSON_CONTENT],
                body={
                    "requests": [{
                        "image": {"source": {"imageUri": "gs://cloud-samples-data/vision/label/wakeupcat.jpg"}},
                        "features": [{"type": "LABEL_DETECTION", "maxResults": 1}],
                    }]
                }),
        _preset("Google Translate API", "POST", "https://translation.googleapis.com/language/translate/v2",
                query_params=[_query("key", "YOUR_API_KEY")], headers=[_JSON_CONTENT],
                body={"q": "Hello, world!", "target": "es"}),
    ],
    "SEO Tools": [
        _preset("Ahrefs API - Site Explorer", "GET", "https://api.ahrefs.com/v3/site-explorer", "/overview",
                query_params=[_query("target", "example.com"), _query("output", "json"),
                              _query("token", "YOUR_AHREFS_API_TOKEN")],
                cache_enabled=True, cache_ttl=3600),
        _preset("Semrush API - Domain Overview", "GET", "https://api.semrush.com",
                query_params=[_query("type", "domain_rank"), _query("key", "YOUR_SEMRUSH_API_KEY"),
                              _query("domain", "example.com"), _query("database", "us"),
                              _query("export_columns", "rank,organic_keywords,organic_traffic")],
                cache_enabled=True, cache_ttl=3600),
        _preset("Sitechecker.pro API - Site Audit", "GET", "https://api.sitechecker.pro/v1", "/site-audit",
                query_params=[_query("domain", "example.com"), _query("api_key", "YOUR_SITECHECKER_API_KEY")]),
    ],
}


def find_preset(name: str, catalog: Optional[Dict[str, List[dict]]] = None) -> Optional[Preset]:
    """Look up a preset by name across all categories

    Returns:
        A Preset with a freshly built EndpointConfig, or None if not found
    """
    catalog = PRESET_CATALOG if catalog is None else catalog
    for category, presets in catalog.items():
        for preset in presets:
            if preset["name"] == name:
                return Preset(
                    name=name,
                    category=category,
                    endpoint_config=EndpointConfig.from_dict(preset["endpointConfig"]),
                )
    return None


def list_categories(catalog: Optional[Dict[str, List[dict]]] = None) -> Dict[str, List[str]]:
    catalog = PRESET_CATALOG if catalog is None else catalog
    return {category: [p["name"] for p in presets] for category, presets in catalog.items()}


__all__ = [
    "PRESET_CATALOG",
    "find_preset",
    "list_categories",
]
