"""Naming policies: tool names, property identifiers, collision suffixes.

Tool names are the lowercase method followed by the path, with braces
stripped and every run of non-alphanumeric characters collapsed to ``_``:

  GET    /users/{id}         -> get_users_id
  POST   /users              -> post_users
  GET    /items/{itemId}     -> get_items_itemid
  DELETE /v1/jobs/{job-id}/  -> delete_v1_jobs_job_id
"""

from __future__ import annotations

import re
from typing import Iterable

from .errors import ToolNameTooLongError


def _snake(text: str) -> str:
    """Lowercase and collapse non-alphanumeric runs to single underscores."""
    name = re.sub(r"[^a-z0-9]+", "_", text.lower())
    return name.strip("_")


def sanitize_path(path: str) -> str:
    """Turn a path template into the path part of a tool name."""
    return _snake(path.replace("{", "").replace("}", ""))


def build_tool_name(method: str, path: str) -> str:
    """Build a tool name from HTTP method and path."""
    sanitized = sanitize_path(path)
    if not sanitized:
        return method.lower()
    return f"{method.lower()}_{sanitized}"


def check_tool_name_length(name: str, max_length: int, skip: bool) -> bool:
    """Apply the length policy.

    Returns True if the name may be used, False if the tool should be
    skipped. Raises ToolNameTooLongError when skipping is not allowed.
    """
    if len(name) <= max_length:
        return True
    if skip:
        return False
    raise ToolNameTooLongError(name, max_length)


def sanitize_identifier(name: str) -> str:
    """Make a parameter name usable as a property / JS identifier.

    Case is kept (``itemId`` stays ``itemId``); anything other than letters,
    digits and ``_`` becomes ``_``.
    """
    ident = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if not ident:
        return "_"
    if ident[0].isdigit():
        ident = f"_{ident}"
    return ident


def unique_name(name: str, used: Iterable[str]) -> str:
    """Return ``name``, or ``name_N`` with the smallest unused N >= 2."""
    taken = set(used)
    if name not in taken:
        return name
    n = 2
    while f"{name}_{n}" in taken:
        n += 1
    return f"{name}_{n}"


def slugify(title: str) -> str:
    """Package-style name for a server title: ``Pet Store`` -> ``pet-store``."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-") or "mcp-server"
