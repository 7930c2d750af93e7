"""Entry point: python -m openapi2mcp

Reads an OpenAPI document and generates a TypeScript MCP server.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
