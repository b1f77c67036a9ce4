"""MCP Server initialization and tool registration."""

from __future__ import annotations

import json
from typing import Any

from dotenv import load_dotenv
from loguru import logger
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from dbwatcher_diagrams.config import get_settings
from dbwatcher_diagrams.core import BUILTIN_STRATEGIES
from dbwatcher_diagrams.tools import clear_diagram_cache, generate_diagram, list_diagram_types, render_dataset
from dbwatcher_diagrams.utils import configure_logging

# Load environment variables
load_dotenv()

DIAGRAM_TYPES = [strategy.name for strategy in BUILTIN_STRATEGIES if strategy.enabled]

# Tool definitions with JSON schemas
TOOLS: dict[str, dict[str, Any]] = {
    "generate_diagram": {
        "description": "Generate a Mermaid diagram (ERD, class diagram or flowchart) of the tables and models touched by a recorded database session. Results are cached per session and diagram type.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "session_id": {
                    "type": "string",
                    "description": "Identifier of the recorded session",
                },
                "diagram_type": {
                    "type": "string",
                    "enum": DIAGRAM_TYPES,
                    "description": "Diagram type (default: database_tables)",
                    "default": "database_tables",
                },
                "refresh": {
                    "type": "boolean",
                    "description": "Regenerate instead of serving a cached diagram (default: false)",
                    "default": False,
                },
            },
            "required": ["session_id"],
        },
        "handler": generate_diagram,
    },
    "list_diagram_types": {
        "description": "List the available diagram types with display names, Mermaid dialect and options.",
        "inputSchema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
        "handler": list_diagram_types,
    },
    "render_dataset": {
        "description": "Render a pre-built entity/relationship dataset (JSON) as Mermaid using the builder of a diagram type.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "dataset_json": {
                    "type": "string",
                    "description": "Dataset JSON with entities, relationships and metadata",
                },
                "diagram_type": {
                    "type": "string",
                    "enum": DIAGRAM_TYPES,
                    "description": "Diagram type whose builder to use (default: database_tables)",
                },
                "direction": {
                    "type": "string",
                    "enum": ["LR", "TD", "RL", "BT"],
                    "description": "Layout direction for class diagrams and flowcharts",
                },
            },
            "required": ["dataset_json"],
        },
        "handler": render_dataset,
    },
    "clear_diagram_cache": {
        "description": "Drop all cached diagrams of a recorded session so the next request regenerates them.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "session_id": {
                    "type": "string",
                    "description": "Identifier of the recorded session",
                },
            },
            "required": ["session_id"],
        },
        "handler": clear_diagram_cache,
    },
}


def create_server() -> Server:
    """Create and configure the MCP server."""
    server = Server("dbwatcher-diagrams")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available tools."""
        return [
            Tool(
                name=name,
                description=config["description"],
                inputSchema=config["inputSchema"],
            )
            for name, config in TOOLS.items()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Handle tool invocations."""
        return [TextContent(type="text", text=await dispatch_tool(name, arguments))]

    return server


async def dispatch_tool(name: str, arguments: dict | None) -> str:
    """Run a tool handler and serialize its result to text."""
    if name not in TOOLS:
        return f"Unknown tool: {name}"

    handler = TOOLS[name]["handler"]

    try:
        logger.info(f"Executing tool: {name}")
        result = await handler(**(arguments or {}))

        # Serialize result to JSON
        if isinstance(result, dict):
            return json.dumps(result, indent=2, default=str)
        return str(result)

    except Exception as e:
        logger.error(f"Tool execution failed: {e}")
        return json.dumps({
            "error": True,
            "message": str(e),
            "tool": name,
        })


async def run_server() -> None:
    """Run the MCP server via stdio."""
    server = create_server()

    logger.info("Starting dbwatcher diagram server...")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """CLI entry point."""
    import asyncio

    configure_logging(get_settings().log_level)
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
