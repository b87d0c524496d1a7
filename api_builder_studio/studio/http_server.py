"""Starlette application exposing a studio session over HTTP.

The JSON routes are the rendering surface of the studio: they read the
endpoint configuration, response, schema, mock, history and monitoring
state, and accept the edit operations. The MCP protocol is mounted at ``/``.
"""

import asyncio
import contextlib
import logging
import sys
from collections.abc import AsyncIterator
from typing import Optional

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route
from starlette.types import Receive, Scope, Send

from .config import StudioSettings
from .core import StudioMCPServer
from .models import EndpointConfig
from .monitoring import MonitoringSimulator
from .presets import list_categories
from .session import StudioSession

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')

# document key -> EndpointStore setter
SCALAR_SETTERS = {
    "method": "set_method",
    "baseUrl": "set_base_url",
    "path": "set_path",
    "body": "set_body",
    "bodyType": "set_body_type",
    "outputFormat": "set_output_format",
    "corsEnabled": "set_cors_enabled",
    "cacheEnabled": "set_cache_enabled",
    "cacheTtl": "set_cache_ttl",
    "authRequired": "set_auth_required",
}

ENTRY_COLLECTIONS = {
    "query-params": ("add_query_param", "update_query_param", "remove_query_param"),
    "headers": ("add_header", "update_header", "remove_header"),
}


def _session(request: Request) -> StudioSession:
    return request.app.state.session


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=status_code)


def _collection_ops(request: Request):
    return ENTRY_COLLECTIONS.get(request.path_params["collection"])


def _unknown_collection(request: Request) -> JSONResponse:
    return _error(f"Unknown collection '{request.path_params['collection']}'", status_code=404)


def _endpoint_payload(session: StudioSession) -> dict:
    return {
        "success": True,
        "endpoint": session.endpoint.config.to_dict(),
        "fullUrl": session.full_url(),
    }


async def health_handler(request: Request) -> JSONResponse:
    session = _session(request)
    return JSONResponse({
        "status": "healthy",
        "server": "api-builder-studio",
        "history_count": len(session.history),
        "is_loading": session.is_loading,
    })


async def get_state_handler(request: Request) -> JSONResponse:
    return JSONResponse({"success": True, "state": _session(request).state()})


async def get_endpoint_handler(request: Request) -> JSONResponse:
    return JSONResponse(_endpoint_payload(_session(request)))


async def update_endpoint_handler(request: Request) -> JSONResponse:
    """Apply scalar field updates, e.g. ``{"method": "POST", "cacheTtl": 60}``"""
    session = _session(request)
    try:
        body = await request.json()
        unknown = [key for key in body if key not in SCALAR_SETTERS]
        if unknown:
            return _error(f"Unknown endpoint fields: {unknown}")
        for key, value in body.items():
            getattr(session.endpoint, SCALAR_SETTERS[key])(value)
    except (ValueError, TypeError, AttributeError) as e:
        logging.error(f"[StudioHTTP] Error updating endpoint: {e}")
        return _error(f"Error updating endpoint: {str(e)}")
    return JSONResponse(_endpoint_payload(session))


async def replace_endpoint_handler(request: Request) -> JSONResponse:
    session = _session(request)
    try:
        config = EndpointConfig.from_dict(await request.json())
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logging.error(f"[StudioHTTP] Error replacing endpoint: {e}")
        return _error(f"Error replacing endpoint: {str(e)}")
    session.endpoint.replace(config)
    return JSONResponse(_endpoint_payload(session))


async def full_url_handler(request: Request) -> JSONResponse:
    return JSONResponse({"success": True, "fullUrl": _session(request).full_url()})


async def add_entry_handler(request: Request) -> JSONResponse:
    session = _session(request)
    ops = _collection_ops(request)
    if ops is None:
        return _unknown_collection(request)
    add, _, _ = ops
    try:
        raw = await request.body()
        body = await request.json() if raw else {}
        index = getattr(session.endpoint, add)(
            body.get("key", ""), body.get("value", ""), body.get("required", False)
        )
    except (ValueError, AttributeError) as e:
        return _error(f"Error adding entry: {str(e)}")
    return JSONResponse({**_endpoint_payload(session), "index": index})


async def update_entry_handler(request: Request) -> JSONResponse:
    """Update one field of an entry: ``{"field": "key", "value": "id"}``"""
    session = _session(request)
    ops = _collection_ops(request)
    if ops is None:
        return _unknown_collection(request)
    _, update, _ = ops
    index = request.path_params["index"]
    try:
        body = await request.json()
        updated = getattr(session.endpoint, update)(index, body["field"], body.get("value", ""))
    except (ValueError, KeyError, TypeError) as e:
        return _error(f"Error updating entry: {str(e)}")
    if not updated:
        return _error(f"No entry at index {index}", status_code=404)
    return JSONResponse(_endpoint_payload(session))


async def remove_entry_handler(request: Request) -> JSONResponse:
    session = _session(request)
    ops = _collection_ops(request)
    if ops is None:
        return _unknown_collection(request)
    _, _, remove = ops
    index = request.path_params["index"]
    if not getattr(session.endpoint, remove)(index):
        return _error(f"No entry at index {index}", status_code=404)
    return JSONResponse(_endpoint_payload(session))


async def send_handler(request: Request) -> JSONResponse:
    session = _session(request)
    # a dropped client must not cancel the send itself
    record = await asyncio.shield(session.send_request())
    return JSONResponse({"success": True, "response": record.to_dict()})


async def get_response_handler(request: Request) -> JSONResponse:
    session = _session(request)
    response = session.response.to_dict() if session.response is not None else None
    return JSONResponse({"success": True, "response": response, "raw": session.raw_view()})


async def get_tree_handler(request: Request) -> JSONResponse:
    return JSONResponse({"success": True, "tree": _session(request).tree_view()})


async def get_schema_handler(request: Request) -> JSONResponse:
    return JSONResponse({"success": True, "schema": _session(request).infer_response_schema()})


async def get_mock_handler(request: Request) -> JSONResponse:
    session = _session(request)
    return JSONResponse({"success": True, "mock": session.mock.value, "text": session.mock.text})


async def commit_mock_handler(request: Request) -> JSONResponse:
    """Commit the request body text as the new mock response"""
    session = _session(request)
    text = (await request.body()).decode("utf-8", errors="replace")
    result = session.commit_mock(text)
    status_code = 200 if result["success"] else 400
    return JSONResponse({**result, "mock": session.mock.value}, status_code=status_code)


async def get_history_handler(request: Request) -> JSONResponse:
    session = _session(request)
    return JSONResponse({
        "success": True,
        "history": session.history.to_list(),
        "count": len(session.history),
        "maxItems": session.history.max_items,
    })


async def clear_history_handler(request: Request) -> JSONResponse:
    _session(request).clear_history()
    return JSONResponse({"success": True, "message": "History cleared"})


async def load_history_handler(request: Request) -> JSONResponse:
    session = _session(request)
    index = request.path_params["index"]
    if not session.load_from_history(index):
        return _error(f"No history entry at index {index}", status_code=404)
    return JSONResponse({"success": True, "state": session.state()})


async def list_presets_handler(request: Request) -> JSONResponse:
    session = _session(request)
    return JSONResponse({
        "success": True,
        "presets": list_categories(session.catalog),
        "selected": session.selected_preset,
    })


async def select_preset_handler(request: Request) -> JSONResponse:
    session = _session(request)
    try:
        name = (await request.json())["name"]
    except (ValueError, KeyError, TypeError) as e:
        return _error(f"Preset name is required: {str(e)}")
    if not session.select_preset(name):
        return _error(f"Preset '{name}' not found", status_code=404)
    return JSONResponse(_endpoint_payload(session))


async def export_handler(request: Request) -> Response:
    fmt = request.path_params["format"]
    document = _session(request).export(fmt)
    if document is None:
        return _error(f"Unsupported export format '{fmt}'")
    return Response(
        document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


async def monitoring_handler(request: Request) -> JSONResponse:
    """Return the monitoring snapshot; ``?refresh=1`` generates a new sample first"""
    monitoring: MonitoringSimulator = request.app.state.monitoring
    if request.query_params.get("refresh") in ("1", "true"):
        monitoring.tick()
    return JSONResponse({"success": True, "monitoring": monitoring.snapshot()})


async def monitoring_maintenance_handler(request: Request) -> JSONResponse:
    monitoring: MonitoringSimulator = request.app.state.monitoring
    try:
        enabled = (await request.json())["enabled"]
    except (ValueError, KeyError, TypeError) as e:
        return _error(f"'enabled' is required: {str(e)}")
    monitoring.set_maintenance_mode(enabled)
    return JSONResponse({"success": True, "monitoring": monitoring.snapshot()})


async def monitoring_clear_logs_handler(request: Request) -> JSONResponse:
    monitoring: MonitoringSimulator = request.app.state.monitoring
    monitoring.clear_error_logs()
    return JSONResponse({"success": True, "monitoring": monitoring.snapshot()})


async def monitoring_start_handler(request: Request) -> JSONResponse:
    monitoring: MonitoringSimulator = request.app.state.monitoring
    monitoring.start()
    return JSONResponse({"success": True, "monitoring": monitoring.snapshot()})


async def monitoring_stop_handler(request: Request) -> JSONResponse:
    monitoring: MonitoringSimulator = request.app.state.monitoring
    monitoring.stop()
    return JSONResponse({"success": True, "monitoring": monitoring.snapshot()})


def api_routes() -> list:
    collection = "{collection:str}"
    return [
        Route("/health", health_handler, methods=["GET"]),
        Route("/api/state", get_state_handler, methods=["GET"]),
        Route("/api/endpoint", get_endpoint_handler, methods=["GET"]),
        Route("/api/endpoint", update_endpoint_handler, methods=["PATCH"]),
        Route("/api/endpoint", replace_endpoint_handler, methods=["PUT"]),
        Route("/api/endpoint/url", full_url_handler, methods=["GET"]),
        Route(f"/api/endpoint/{collection}", add_entry_handler, methods=["POST"]),
        Route(f"/api/endpoint/{collection}/{{index:int}}", update_entry_handler, methods=["PATCH"]),
        Route(f"/api/endpoint/{collection}/{{index:int}}", remove_entry_handler, methods=["DELETE"]),
        Route("/api/send", send_handler, methods=["POST"]),
        Route("/api/response", get_response_handler, methods=["GET"]),
        Route("/api/schema", get_schema_handler, methods=["GET"]),
        Route("/api/tree", get_tree_handler, methods=["GET"]),
        Route("/api/mock", get_mock_handler, methods=["GET"]),
        Route("/api/mock", commit_mock_handler, methods=["PUT"]),
        Route("/api/history", get_history_handler, methods=["GET"]),
        Route("/api/history", clear_history_handler, methods=["DELETE"]),
        Route("/api/history/{index:int}/load", load_history_handler, methods=["POST"]),
        Route("/api/presets", list_presets_handler, methods=["GET"]),
        Route("/api/presets/select", select_preset_handler, methods=["POST"]),
        Route("/api/export/{format:str}", export_handler, methods=["GET"]),
        Route("/api/monitoring", monitoring_handler, methods=["GET"]),
        Route("/api/monitoring/maintenance", monitoring_maintenance_handler, methods=["POST"]),
        Route("/api/monitoring/logs", monitoring_clear_logs_handler, methods=["DELETE"]),
        Route("/api/monitoring/start", monitoring_start_handler, methods=["POST"]),
        Route("/api/monitoring/stop", monitoring_stop_handler, methods=["POST"]),
    ]


def create_app(
    session: Optional[StudioSession] = None,
    settings: Optional[StudioSettings] = None,
    monitoring: Optional[MonitoringSimulator] = None,
    mount_mcp: bool = True,
) -> Starlette:
    """Build the Starlette application for a studio session

    Args:
        session: Session to serve; created from settings when omitted
        settings: Tunables; defaults to StudioSettings()
        monitoring: Monitoring simulator; created from settings when omitted
        mount_mcp: Whether to mount the MCP protocol endpoint at ``/``

    Returns:
        Starlette application with ``state.session`` and ``state.monitoring`` set
    """
    if settings is None:
        settings = session.settings if session is not None else StudioSettings()
    if session is None:
        session = StudioSession(settings)
    if monitoring is None:
        monitoring = MonitoringSimulator(settings)
    routes = api_routes()
    session_manager = None

    if mount_mcp:
        mcp_server = StudioMCPServer("api-builder-studio", session)
        session_manager = StreamableHTTPSessionManager(
            app=mcp_server.get_server(),
            event_store=None,
            json_response=True,
            stateless=True,
        )

        async def handle_streamable_http(scope: Scope, receive: Receive, send: Send) -> None:
            """Handle MCP protocol requests via streamable HTTP"""
            await session_manager.handle_request(scope, receive, send)

        routes.append(Mount("/", app=handle_streamable_http))

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with contextlib.AsyncExitStack() as stack:
            if session_manager is not None:
                await stack.enter_async_context(session_manager.run())
            logging.info(f"[StudioHTTP] API Builder Studio started on {settings.host}:{settings.port}")
            try:
                yield
            finally:
                monitoring.stop()
                logging.info("[StudioHTTP] API Builder Studio shutting down...")

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.session = session
    app.state.monitoring = monitoring
    return app


__all__ = [
    "api_routes",
    "create_app",
]
