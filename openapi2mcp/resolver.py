"""Resolve $ref pointers against a document's component tables.

Handles local references only:
- ``#/components/<table>/<name>`` for parameters, request bodies, schemas,
  security schemes and path items
- ``#/paths/<escaped path>`` for path items

Every reference followed is recorded in a ``seen`` set which callers pass
back in when they descend into nested schemas, so a reference that leads
back to itself raises ReferenceCycleError instead of recursing forever.
"""

from __future__ import annotations

from typing import Any

from .errors import ReferenceCycleError, ReferenceNotFoundError

PARAMETERS = "parameters"
REQUEST_BODIES = "requestBodies"
SCHEMAS = "schemas"
SECURITY_SCHEMES = "securitySchemes"
PATH_ITEMS = "pathItems"

_KINDS = {PARAMETERS, REQUEST_BODIES, SCHEMAS, SECURITY_SCHEMES, PATH_ITEMS}


def _split_pointer(ref: str) -> list[str]:
    """Split a local reference into unescaped JSON pointer segments."""
    if not ref.startswith("#/"):
        raise ReferenceNotFoundError(ref, "only local references are supported")
    parts = ref[2:].split("/")
    return [p.replace("~1", "/").replace("~0", "~") for p in parts]


def _check_table(ref: str, parts: list[str], kind: str) -> None:
    """Ensure the pointer addresses the component table for ``kind``."""
    if kind == PATH_ITEMS and parts and parts[0] == "paths":
        return
    if len(parts) < 3 or parts[0] != "components" or parts[1] != kind:
        raise ReferenceNotFoundError(ref, f"expected a reference into components/{kind}")


def lookup_ref(spec: dict[str, Any], ref: str, kind: str) -> Any:
    """Return the node a single reference points at, without following it further."""
    if kind not in _KINDS:
        raise ValueError(f"Unknown component kind {kind!r}")
    parts = _split_pointer(ref)
    _check_table(ref, parts, kind)

    node: Any = spec
    for part in parts:
        if isinstance(node, dict) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            raise ReferenceNotFoundError(ref)
    if not isinstance(node, dict):
        raise ReferenceNotFoundError(ref, "target is not an object")
    return node


def resolve(
    spec: dict[str, Any],
    node: dict[str, Any],
    kind: str,
    seen: frozenset[str] = frozenset(),
) -> tuple[dict[str, Any], frozenset[str]]:
    """Follow ``node``'s reference chain.

    Returns the first non-reference node together with ``seen`` extended by
    every reference followed on the way. A node without ``$ref`` is returned
    as-is.
    """
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if ref in seen:
            raise ReferenceCycleError(ref, seen)
        seen = seen | {ref}
        node = lookup_ref(spec, ref, kind)
    return node, seen


def resolve_node(spec: dict[str, Any], node: dict[str, Any], kind: str) -> dict[str, Any]:
    """resolve() for callers that do not descend any further."""
    resolved, _ = resolve(spec, node, kind)
    return resolved
