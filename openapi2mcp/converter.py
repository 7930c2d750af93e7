"""Convert an OpenAPI document into the Server IR.

operation_to_tool() turns one (method, path) operation into a Tool;
convert_document() drives it over every operation, applies the path and
method filters and assembles the Server.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Any

from .config import SUPPORTED_METHODS, ConverterOptions, OAuth2Info
from .errors import (
    ConversionError,
    ResolutionError,
    SpecValidationError,
    UnsupportedConstructError,
)
from .loader import get_components, get_paths, get_servers, validate_spec
from .models import (
    OPTIONAL,
    REQUIRED,
    STRING,
    Body,
    Call,
    Fixed,
    FromProperty,
    ObjectType,
    Property,
    PropertyId,
    Server,
    Tool,
    ValueSource,
)
from .naming import (
    build_tool_name,
    check_tool_name_length,
    sanitize_identifier,
    unique_name,
)
from .resolver import (
    PARAMETERS,
    PATH_ITEMS,
    REQUEST_BODIES,
    SCHEMAS,
    SECURITY_SCHEMES,
    resolve,
    resolve_node,
)
from .schema_parser import map_schema, map_type, select_schema

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
CONTENT_TYPE = "Content-Type"
BODY_PROPERTY = "body"

_SLOTS = {"path": "path_params", "query": "query", "header": "headers"}


def _describe(method: str, path: str, operation: dict[str, Any]) -> str:
    """Tool description: operation description, then summary, then 'METHOD path'."""
    description = (operation.get("description") or "").strip()
    if description:
        return description
    summary = (operation.get("summary") or "").strip()
    if summary:
        return summary
    return f"{method.upper()} {path}"


def _collect_parameters(
    spec: dict[str, Any],
    operation: dict[str, Any],
    path_parameters: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Operation-level parameters first, then path-level ones not overridden."""
    params = [resolve_node(spec, p, PARAMETERS) for p in operation.get("parameters") or []]
    overridden = {(p.get("name"), p.get("in")) for p in params}
    for param in path_parameters or []:
        resolved = resolve_node(spec, param, PARAMETERS)
        if (resolved.get("name"), resolved.get("in")) in overridden:
            continue
        params.append(resolved)
    return params


def _parameter_property(
    spec: dict[str, Any],
    param: dict[str, Any],
    prop_name: str,
    options: ConverterOptions,
) -> Property:
    schema = param.get("schema")
    if schema is None:
        prop = Property(name=prop_name, type=STRING)
    else:
        prop = map_schema(spec, schema, prop_name, by_title=options.required_by_title)

    # The parameter's own required flag is authoritative; a schema default
    # only applies to parameters that are not required.
    required = REQUIRED if param.get("required") else prop.required
    description = param.get("description") or prop.description
    return dataclasses.replace(prop, required=required, description=description)


def _json_media(content: dict[str, Any]) -> dict[str, Any] | None:
    for media_type, media in content.items():
        if media_type.split(";")[0].strip().lower() == JSON_MEDIA_TYPE:
            return media or {}
    return None


def _request_body(
    spec: dict[str, Any],
    operation: dict[str, Any],
    used_names: list[str],
    where: str,
    options: ConverterOptions,
) -> tuple[list[Property], Body | None]:
    """Build the body properties and the Call body for an operation.

    Object bodies are flattened into top-level properties; anything else is
    passed through as one opaque ``body`` property.
    """
    body_ref = operation.get("requestBody")
    if not body_ref:
        return [], None

    request_body = resolve_node(spec, body_ref, REQUEST_BODIES)
    content = request_body.get("content") or {}
    media = _json_media(content)
    if media is None:
        if content:
            kinds = ", ".join(content)
            raise UnsupportedConstructError(f"request body media type {kinds}", where)
        return [], None

    node, seen = resolve(spec, media.get("schema") or {}, SCHEMAS)
    selected, seen = select_schema(spec, node, seen)
    body_type = map_type(spec, selected, by_title=options.required_by_title, seen=seen)

    if isinstance(body_type, ObjectType) and body_type.properties:
        properties = []
        fields: dict[str, ValueSource] = {}
        for prop in body_type.properties:
            name = unique_name(sanitize_identifier(prop.name), used_names)
            used_names.append(name)
            properties.append(dataclasses.replace(prop, name=name))
            fields[prop.name] = FromProperty(PropertyId(name))
        return properties, Body(fields=fields)

    name = unique_name(BODY_PROPERTY, used_names)
    used_names.append(name)
    prop = Property(
        name=name,
        type=body_type,
        required=REQUIRED if request_body.get("required") else OPTIONAL,
        description=request_body.get("description") or node.get("description"),
    )
    return [prop], Body(whole=FromProperty(PropertyId(name)))


def operation_to_tool(
    method: str,
    path: str,
    operation: dict[str, Any],
    path_parameters: list[dict[str, Any]],
    spec: dict[str, Any],
    options: ConverterOptions,
) -> Tool | None:
    """Convert one operation into a Tool.

    Returns None when the derived name is too long and the options say to
    skip such tools.
    """
    name = build_tool_name(method, path)
    if not check_tool_name_length(name, options.max_tool_name_length, options.skip_long_tool_names):
        logger.warning(
            "Skipping %s %s: tool name %r exceeds %d characters",
            method.upper(), path, name, options.max_tool_name_length,
        )
        return None

    where = f"{method.upper()} {path}"
    properties: list[Property] = []
    used_names: list[str] = []
    slots: dict[str, dict[str, ValueSource]] = {slot: {} for slot in _SLOTS.values()}

    for param in _collect_parameters(spec, operation, path_parameters):
        location = param.get("in")
        wire_name = param.get("name")
        if location == "cookie":
            raise UnsupportedConstructError("cookie parameter", f"{where}, {wire_name!r}")
        if location not in _SLOTS:
            raise UnsupportedConstructError(f"parameter location {location!r}", where)
        if not wire_name:
            raise UnsupportedConstructError("parameter without a name", where)

        prop_name = unique_name(sanitize_identifier(wire_name), used_names)
        used_names.append(prop_name)
        properties.append(_parameter_property(spec, param, prop_name, options))
        slots[_SLOTS[location]][wire_name] = FromProperty(PropertyId(prop_name))

    body_properties, body = _request_body(spec, operation, used_names, where, options)
    properties.extend(body_properties)
    if body is not None:
        # Content-Type is fixed by the JSON body
        if any(h.lower() == CONTENT_TYPE.lower() for h in slots["headers"]):
            raise UnsupportedConstructError("Content-Type header parameter", where)
        slots["headers"][CONTENT_TYPE] = Fixed(JSON_MEDIA_TYPE)

    call = Call(
        method=method.upper(),
        path=path,
        path_params=slots["path_params"],
        query=slots["query"],
        headers=slots["headers"],
        body=body,
    )
    return Tool(
        name=name,
        description=_describe(method, path, operation),
        properties=tuple(properties),
        call=call,
    )


def find_oauth2_flow(spec: dict[str, Any]) -> OAuth2Info | None:
    """First OAuth2 security scheme with an authorization-code flow, if any."""
    schemes = get_components(spec).get("securitySchemes") or {}
    for scheme_name, scheme_ref in schemes.items():
        scheme = resolve_node(spec, scheme_ref, SECURITY_SCHEMES)
        if scheme.get("type") != "oauth2":
            continue
        flow = (scheme.get("flows") or {}).get("authorizationCode")
        if not flow:
            continue
        if not flow.get("authorizationUrl") or not flow.get("tokenUrl"):
            raise SpecValidationError(
                f"OAuth2 scheme {scheme_name!r} lacks authorizationUrl or tokenUrl"
            )
        return OAuth2Info(
            authorization_url=flow["authorizationUrl"],
            token_url=flow["tokenUrl"],
            refresh_url=flow.get("refreshUrl"),
        )
    return None


def _compile_path_filter(pattern: str | None) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConversionError(f"Invalid path filter {pattern!r}: {e}") from e


def convert_document(
    spec: dict[str, Any],
    options: ConverterOptions | None = None,
) -> Server:
    """Build the Server IR for a whole document."""
    options = options or ConverterOptions()
    validate_spec(spec)

    path_filter = _compile_path_filter(options.path_filter)
    tools: list[Tool] = []
    names: list[str] = []

    for path, path_item_ref in get_paths(spec).items():
        if path_filter is not None and not path_filter.search(path):
            logger.debug("Path %s does not match the path filter", path)
            continue
        try:
            path_item = resolve_node(spec, path_item_ref, PATH_ITEMS)
        except ResolutionError as e:
            raise SpecValidationError(f"Unresolved path item {path!r}: {e}") from e
        if not isinstance(path_item, dict):
            raise SpecValidationError(f"Path item {path!r} is not an object")
        path_parameters = path_item.get("parameters") or []

        for method in SUPPORTED_METHODS:
            operation = path_item.get(method)
            if operation is None or not options.allows_method(method):
                continue
            try:
                tool = operation_to_tool(method, path, operation, path_parameters, spec, options)
            except UnsupportedConstructError as e:
                if not options.skip_unsupported:
                    raise
                logger.warning("Skipping %s %s: %s", method.upper(), path, e)
                continue
            if tool is None:
                continue

            name = unique_name(tool.name, names)
            if name != tool.name:
                if not check_tool_name_length(
                    name, options.max_tool_name_length, options.skip_long_tool_names
                ):
                    logger.warning(
                        "Skipping %s %s: tool name %r exceeds %d characters",
                        method.upper(), path, name, options.max_tool_name_length,
                    )
                    continue
                logger.warning("Tool name %r already taken, using %r", tool.name, name)
                tool = dataclasses.replace(tool, name=name)
            names.append(name)
            tools.append(tool)
            logger.info("Added %s tool for path: %s", method.upper(), path)

    logger.info("Created %d MCP tools", len(tools))

    servers = get_servers(spec)
    base_url = (servers[0].get("url") or "") if servers else ""
    info = spec["info"]
    return Server(
        name=str(info["title"]),
        version=str(info.get("version") or ""),
        description=info.get("description"),
        base_url=base_url,
        oauth2=options.oauth2_info or find_oauth2_flow(spec),
        tools=tuple(tools),
    )
