"""Render the Server IR into TypeScript sources.

Each tool becomes one module exporting ``setupTool(server)``: a zod schema
built from the tool's properties and an async handler that performs the
HTTP call. An index module registers every tool and a constants module
exposes the base URL and OAuth2 endpoints.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jinja2

from .models import (
    ArrayType,
    BooleanType,
    DefaultValue,
    Fixed,
    FromProperty,
    NumberType,
    ObjectType,
    Property,
    PropertyType,
    Server,
    StringType,
    Tool,
    ValueSource,
)

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

TOOLS_DIR = "src/routes/v1/mcp/tools"
INDEX_PATH = f"{TOOLS_DIR}/index.ts"
CONSTANTS_PATH = "src/constants.ts"

_INDENT = "  "


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered file, relative to the project root."""

    path: str
    content: str


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

def js_string(value: str) -> str:
    """Quote text as a JS string literal; quotes, backslashes and newlines are escaped."""
    return json.dumps(value, ensure_ascii=False)


def js_literal(value: Any) -> str:
    """Render a str / number / bool / JSON value as a JS literal."""
    return json.dumps(value, ensure_ascii=False)


def _string_literal(value: Any) -> str:
    """A literal that is a JS string, for query and header slots."""
    if isinstance(value, str):
        return js_string(value)
    return js_string(json.dumps(value))


def _template_text(text: str) -> str:
    """Escape raw text for use inside a JS template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


# ---------------------------------------------------------------------------
# zod schema
# ---------------------------------------------------------------------------

def zod_type(prop_type: PropertyType, indent: int = 0) -> str:
    """The zod constructor for a property type, without modifiers."""
    if isinstance(prop_type, StringType):
        return "z.string()"
    if isinstance(prop_type, NumberType):
        return "z.number()"
    if isinstance(prop_type, BooleanType):
        return "z.boolean()"
    if isinstance(prop_type, ArrayType):
        item = prop_type.item
        expr = zod_type(item.type, indent)
        if item.description:
            expr += f".describe({js_string(item.description)})"
        return f"z.array({expr})"
    if isinstance(prop_type, ObjectType):
        if not prop_type.properties:
            return "z.object({}).passthrough()"
        pad = _INDENT * (indent + 1)
        fields = "".join(
            f"{pad}{js_string(p.name)}: {zod_expression(p, indent + 1)},\n"
            for p in prop_type.properties
        )
        return "z.object({\n" + fields + _INDENT * indent + "})"
    raise TypeError(f"Unknown property type {prop_type!r}")


def zod_expression(prop: Property, indent: int = 0) -> str:
    """zod schema of a property including description and optionality."""
    expr = zod_type(prop.type, indent)
    if prop.description:
        expr += f".describe({js_string(prop.description)})"
    if not prop.required.is_required:
        expr += ".optional()"
    if isinstance(prop.required, DefaultValue) and prop.required.value is not None:
        expr += f".default({js_literal(prop.required.value)})"
    return expr


# ---------------------------------------------------------------------------
# Call
# ---------------------------------------------------------------------------

def value_expression(source: ValueSource) -> str:
    if isinstance(source, Fixed):
        return js_literal(source.value)
    if isinstance(source, FromProperty):
        return f"args[{js_string(source.property_id.name)}]"
    raise TypeError(f"Unknown value source {source!r}")


def _string_entries(tool: Tool, slot: dict[str, ValueSource]) -> list[str]:
    """Entries of a query or headers object; optional inputs are left out when unset."""
    entries = []
    for wire_name, source in slot.items():
        key = js_string(wire_name)
        if isinstance(source, Fixed):
            entries.append(f"{key}: {_string_literal(source.value)}")
            continue
        expr = value_expression(source)
        prop = tool.property(source.property_id)
        if prop is not None and prop.required.is_required:
            entries.append(f"{key}: String({expr})")
        else:
            entries.append(f"...({expr} !== undefined ? {{ {key}: String({expr}) }} : {{}})")
    return entries


def path_expression(tool: Tool) -> str:
    """Path template with path parameters substituted, as template-literal text."""
    path = _template_text(tool.call.path)
    for wire_name, source in tool.call.path_params.items():
        placeholder = "{" + _template_text(wire_name) + "}"
        path = path.replace(placeholder, "${encodeURIComponent(String(%s))}" % value_expression(source))
    return path


def body_expression(tool: Tool, indent: int = 5) -> str | None:
    body = tool.call.body
    if body is None:
        return None
    if body.whole is not None:
        return f"JSON.stringify({value_expression(body.whole)})"
    pad = _INDENT * (indent + 1)
    fields = "".join(
        f"{pad}{js_string(key)}: {value_expression(source)},\n"
        for key, source in body.fields.items()
    )
    return "JSON.stringify({\n" + fields + _INDENT * indent + "})"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["js_string"] = js_string
    env.filters["zod"] = zod_expression
    return env


def render_tool(tool: Tool) -> str:
    """Render one tool module."""
    template = _environment().get_template("tool.ts.j2")
    return template.render(
        tool=tool,
        path=path_expression(tool),
        query=_string_entries(tool, tool.call.query),
        headers=_string_entries(tool, tool.call.headers),
        body=body_expression(tool),
    )


def render_index(server: Server) -> str:
    """Render the registry module that sets up every tool."""
    return _environment().get_template("index.ts.j2").render(tools=server.tools)


def render_constants(server: Server) -> str:
    """Render the module exporting BASE_URL and the OAuth2 endpoints."""
    return _environment().get_template("constants.ts.j2").render(server=server)


def tool_path(tool: Tool) -> str:
    return f"{TOOLS_DIR}/{tool.name}.ts"


def generate_files(server: Server) -> list[GeneratedFile]:
    """Render every file for the server; nothing is written."""
    files = [GeneratedFile(tool_path(tool), render_tool(tool)) for tool in server.tools]
    files.append(GeneratedFile(INDEX_PATH, render_index(server)))
    files.append(GeneratedFile(CONSTANTS_PATH, render_constants(server)))
    logger.info("Rendered %d tool modules", server.tool_count)
    return files
