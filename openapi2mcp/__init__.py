"""Generate MCP servers from OpenAPI specifications."""

from .codegen import GeneratedFile, generate_files
from .config import ConverterOptions, OAuth2Info
from .converter import convert_document, operation_to_tool
from .errors import Openapi2McpError

__version__ = "0.1.0"
__all__ = [
    "ConverterOptions",
    "GeneratedFile",
    "OAuth2Info",
    "Openapi2McpError",
    "convert_document",
    "generate_files",
    "operation_to_tool",
]
