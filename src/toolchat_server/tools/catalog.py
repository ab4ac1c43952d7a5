"""Tool catalog in the JSON-RPC tools/list and tools/call shape.

This is the only place where tool schemas and results are shaped for an
external dispatch surface.
"""

from typing import Any, Mapping

from toolchat_server.tools.registry import ToolRegistry


class ToolCatalog:
    """Exposes a ToolRegistry to generic JSON-RPC style callers."""

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    def list_tools(self) -> list[dict[str, Any]]:
        """List every tool as {name, description, inputSchema}."""
        return [
            {
                "name": definition.name,
                "description": definition.description,
                "inputSchema": definition.to_json_schema(),
            }
            for definition in self.registry.definitions()
        ]

    async def call_tool(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Execute a tool and wrap its result as text content.

        Returns:
            {"content": [{"type": "text", "text": <json>}], "isError": bool}
        """
        result = await self.registry.execute(name, arguments or {})
        return {
            "content": [{"type": "text", "text": result.content}],
            "isError": result.is_error,
        }
