"""MCP server exposing a studio session as tools.

This module provides the StudioMCPServer class which wraps the operations of
a StudioSession as FunctionTools and serves them over the MCP protocol.
"""

import asyncio
import json
import logging
import sys
from typing import Dict

from google.adk.tools.function_tool import FunctionTool
from google.adk.tools.mcp_tool.conversion_utils import adk_to_mcp_tool_type
from mcp import types as mcp_types
from mcp.server.lowlevel import Server

from .export import EXPORT_FORMATS
from .presets import list_categories
from .session import StudioSession

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')


def build_studio_tools(session: StudioSession) -> Dict[str, FunctionTool]:
    """Create one FunctionTool per studio operation bound to ``session``

    Every tool returns a dict with a ``success`` flag and a ``message``;
    payloads go under ``data``.
    """

    async def get_endpoint() -> dict:
        """Return the endpoint configuration being edited and its full URL."""
        return {
            "success": True,
            "message": f"{session.endpoint.config.method.value} {session.full_url()}",
            "data": session.endpoint.config.to_dict(),
        }

    async def list_presets() -> dict:
        """List the preset endpoint configurations grouped by category."""
        return {"success": True, "message": "Available presets", "data": list_categories(session.catalog)}

    async def select_preset(name: str) -> dict:
        """Load a preset endpoint configuration into the editor by name."""
        if not session.select_preset(name):
            return {"success": False, "message": f"Preset '{name}' not found"}
        return {"success": True, "message": f"Selected preset '{name}'", "data": session.endpoint.config.to_dict()}

    async def send_request() -> dict:
        """Send the current endpoint configuration and return the simulated response."""
        record = await asyncio.shield(session.send_request())
        return {
            "success": True,
            "status_code": record.status,
            "data": record.to_dict(),
            "message": f"Received {record.status} {record.status_text} in {record.response_time}ms",
        }

    async def get_response() -> dict:
        """Return the response currently displayed."""
        if session.response is None:
            return {"success": False, "message": "No request has been sent yet"}
        return {"success": True, "message": "Current response", "data": session.response.to_dict()}

    async def infer_schema() -> dict:
        """Infer a JSON schema from the displayed response data."""
        return {"success": True, "message": "Inferred schema", "data": session.infer_response_schema()}

    async def update_mock(json_text: str) -> dict:
        """Replace the mock response with the given JSON text."""
        return session.commit_mock(json_text)

    async def get_history() -> dict:
        """List past requests, most recent first."""
        return {"success": True, "message": f"{len(session.history)} entries", "data": session.history.to_list()}

    async def load_history(index: int) -> dict:
        """Restore the request at the given history index into the editor."""
        if not session.load_from_history(int(index)):
            return {"success": False, "message": f"No history entry at index {index}"}
        return {"success": True, "message": f"Loaded history entry {index}", "data": session.state()}

    async def clear_history() -> dict:
        """Remove every entry from the request history."""
        session.clear_history()
        return {"success": True, "message": "History cleared"}

    async def export_config(export_format: str) -> dict:
        """Export the endpoint configuration as json, postman or openapi."""
        document = session.export(export_format)
        if document is None:
            return {"success": False, "message": f"Unsupported format '{export_format}', expected one of {list(EXPORT_FORMATS)}"}
        return {"success": True, "message": document.filename, "data": json.loads(document.content)}

    functions = [
        get_endpoint, list_presets, select_preset, send_request, get_response,
        infer_schema, update_mock, get_history, load_history, clear_history, export_config,
    ]
    return {f.__name__: FunctionTool(f) for f in functions}


class StudioMCPServer:
    """MCP Server that serves the tools of a StudioSession

    Args:
        server_name: Name for the MCP server instance
        session: StudioSession the tools operate on
    """

    def __init__(self, server_name: str = "api-builder-studio", session: StudioSession = None):
        self.server_name = server_name
        self.server = Server(server_name)
        self.session = session if session is not None else StudioSession()
        self.tools = build_studio_tools(self.session)
        self._setup_server()
        logging.info(f"[StudioMCP] Initialized MCP server '{server_name}' with {len(self.tools)} tools")

    def _setup_server(self) -> None:
        """Setup the MCP server with list_tools and call_tool handlers"""

        @self.server.list_tools()
        async def list_tools():
            tool_list = []
            for tool in self.tools.values():
                try:
                    tool_list.append(adk_to_mcp_tool_type(tool))
                except Exception as e:
                    logging.error(f"[StudioMCP] Error converting tool {tool.name} to MCP type: {e}")
            return tool_list

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict):
            logging.info(f"[StudioMCP] Tool call: {name} with args: {json.dumps(arguments)}")
            if name not in self.tools:
                logging.warning(f"[StudioMCP] Tool '{name}' not found")
                return [mcp_types.TextContent(type="text", text=f"Tool '{name}' not found")]
            try:
                result = await self.tools[name].run_async(args=arguments or {}, tool_context=None)
            except Exception as e:
                logging.exception(f"[StudioMCP] Error executing tool '{name}': {e}")
                return [mcp_types.TextContent(type="text", text=f"Error executing tool: {str(e)}")]
            return [mcp_types.TextContent(type="text", text=format_tool_result(result))]

    def get_server(self) -> Server:
        return self.server


def format_tool_result(result) -> str:
    """Render a tool result dict as the text returned to the MCP client"""
    if not isinstance(result, dict):
        return str(result)
    if not result.get("success"):
        return result.get("message", "Unknown error occurred")
    data = result.get("data")
    if data is None:
        return result.get("message", "Success - no data returned")
    return f"{result.get('message', 'Success')}\n\nResponse Data:\n{json.dumps(data, indent=2)}"


__all__ = [
    "StudioMCPServer",
    "build_studio_tools",
    "format_tool_result",
]
