"""Map OpenAPI schemas to tool properties.

Handles:
- string / number / integer / boolean primitives (integer folds into number)
- objects, recursing into declared properties in order
- arrays, recursing into ``items``
- $ref resolution, with cycle detection along the descent path
- oneOf/anyOf: only the first alternative is mapped
- allOf: properties and required lists of all parts are merged
- ``not`` and unconstrained schemas: a generic object without properties
- default values and required-list membership
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .errors import ReferenceCycleError, SchemaMappingError
from .models import (
    BOOLEAN,
    NUMBER,
    OPTIONAL,
    REQUIRED,
    STRING,
    ArrayType,
    DefaultValue,
    ObjectType,
    Property,
    PropertyType,
    Requiredness,
)
from .resolver import SCHEMAS, resolve

logger = logging.getLogger(__name__)

ITEM_NAME = "item"


def requiredness(
    schema: dict[str, Any],
    name: str,
    required_names: Sequence[str],
    by_title: bool = False,
) -> Requiredness:
    """Decide whether a schema node is required in its enclosing object.

    A declared default always wins. Otherwise the node is required if the
    enclosing object's ``required`` list names it. With ``by_title`` the
    node's own ``title`` is looked up instead of its property name, so a
    node without a title is never required.
    """
    if "default" in schema:
        return DefaultValue(schema["default"])
    key = schema.get("title") if by_title else name
    if key is not None and key in required_names:
        return REQUIRED
    return OPTIONAL


def first_alternative(alternatives: Sequence[dict[str, Any]]) -> dict[str, Any] | None:
    """oneOf/anyOf strategy: keep the first listed alternative."""
    if not alternatives:
        return None
    return alternatives[0]


def merge_all_of(
    spec: dict[str, Any],
    parts: Sequence[dict[str, Any]],
    seen: frozenset[str] = frozenset(),
) -> tuple[dict[str, Any], frozenset[str]]:
    """allOf strategy: merge all parts into one synthetic object schema.

    Later parts override properties of earlier ones; required lists are
    concatenated. The returned ``seen`` is the enclosing chain only: a
    property taken from one part may refer to another part without that
    being a cycle.
    """
    merged_props: dict[str, Any] = {}
    merged_required: list[str] = []

    for part in parts:
        resolved, _ = select_schema(spec, part, seen)
        merged_props.update(resolved.get("properties") or {})
        for req in resolved.get("required") or []:
            if req not in merged_required:
                merged_required.append(req)

    merged = {
        "type": "object",
        "properties": merged_props,
        "required": merged_required,
    }
    return merged, seen


def select_schema(
    spec: dict[str, Any],
    schema: dict[str, Any],
    seen: frozenset[str] = frozenset(),
) -> tuple[dict[str, Any], frozenset[str]]:
    """Resolve references and composition keywords down to one concrete schema."""
    schema, seen = resolve(spec, schema or {}, SCHEMAS, seen)
    while True:
        for key in ("oneOf", "anyOf"):
            if key in schema:
                alternative = first_alternative(schema[key])
                if alternative is None:
                    return {}, seen
                schema, seen = resolve(spec, alternative, SCHEMAS, seen)
                break
        else:
            if "allOf" in schema:
                return merge_all_of(spec, schema["allOf"], seen)
            return schema, seen


def _primitive_kind(schema: dict[str, Any]) -> str | None:
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 style: ["string", "null"]
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if non_null else None
    return schema_type


def map_properties(
    spec: dict[str, Any],
    schema: dict[str, Any],
    by_title: bool = False,
    seen: frozenset[str] = frozenset(),
) -> tuple[Property, ...]:
    """Map the declared properties of an object schema.

    A property whose own mapping fails is left out.
    """
    required_names = schema.get("required") or []
    props = []
    for prop_name, prop_schema in (schema.get("properties") or {}).items():
        try:
            props.append(
                map_schema(
                    spec,
                    prop_schema,
                    prop_name,
                    required_names=required_names,
                    by_title=by_title,
                    seen=seen,
                )
            )
        except (SchemaMappingError, ReferenceCycleError) as e:
            logger.debug("Omitting property %r: %s", prop_name, e)
    return tuple(props)


def map_type(
    spec: dict[str, Any],
    schema: dict[str, Any],
    by_title: bool = False,
    seen: frozenset[str] = frozenset(),
) -> PropertyType:
    """Map an already selected schema to a property type."""
    if "not" in schema:
        return ObjectType()

    kind = _primitive_kind(schema)
    if kind == "string":
        return STRING
    if kind in ("number", "integer"):
        return NUMBER
    if kind == "boolean":
        return BOOLEAN
    if kind == "array":
        items = schema.get("items")
        if items is None:
            raise SchemaMappingError("Array schema declares no items")
        return ArrayType(map_schema(spec, items, ITEM_NAME, by_title=by_title, seen=seen))
    if kind == "object" or "properties" in schema:
        return ObjectType(map_properties(spec, schema, by_title=by_title, seen=seen))
    if kind is None and "enum" in schema:
        return STRING
    return ObjectType()


def map_schema(
    spec: dict[str, Any],
    schema: dict[str, Any] | None,
    name: str,
    required_names: Sequence[str] = (),
    by_title: bool = False,
    seen: frozenset[str] = frozenset(),
) -> Property:
    """Map a schema node to a Property named ``name``.

    ``required_names`` is the ``required`` list of the enclosing object
    schema, if any.
    """
    node, seen = resolve(spec, schema or {}, SCHEMAS, seen)
    selected, seen = select_schema(spec, node, seen)

    description = (
        node.get("description")
        or selected.get("description")
        or node.get("title")
        or None
    )
    return Property(
        name=name,
        type=map_type(spec, selected, by_title=by_title, seen=seen),
        required=requiredness(node, name, required_names, by_title),
        description=description,
    )
