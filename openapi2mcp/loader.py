"""Load and validate an OpenAPI document.

Reads JSON or YAML from disk and checks the handful of properties the
converter relies on before any conversion starts.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import SpecValidationError

logger = logging.getLogger(__name__)

SUPPORTED_MAJOR_VERSION = "3"


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load an OpenAPI document from a .json, .yaml or .yml file."""
    spec_file = Path(path)
    try:
        with open(spec_file) as f:
            if spec_file.suffix == ".json":
                spec = json.load(f)
            else:
                spec = yaml.safe_load(f)
    except OSError as e:
        raise SpecValidationError(f"Cannot read {spec_file}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecValidationError(f"Cannot parse {spec_file}: {e}") from e

    if not isinstance(spec, dict):
        raise SpecValidationError(f"{spec_file} does not contain a mapping")
    logger.info("Loaded %s", spec_file)
    return spec


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def get_components(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract the components object from the spec."""
    return spec.get("components") or {}


def get_servers(spec: dict[str, Any]) -> list[dict[str, Any]]:
    return spec.get("servers") or []


def validate_spec(spec: dict[str, Any]) -> None:
    """Reject documents the converter cannot handle.

    Raises SpecValidationError for an unsupported major version, an empty
    title, a document without paths, or more than one server entry.
    """
    version = str(spec.get("openapi", ""))
    if version.split(".")[0] != SUPPORTED_MAJOR_VERSION:
        raise SpecValidationError(
            f"Unsupported OpenAPI version {version!r}, expected 3.x"
        )

    info = spec.get("info") or {}
    if not str(info.get("title") or "").strip():
        raise SpecValidationError("info.title must not be empty")

    if not get_paths(spec):
        raise SpecValidationError("The document declares no paths")

    servers = get_servers(spec)
    if len(servers) > 1:
        raise SpecValidationError(
            f"Only one server entry is supported, found {len(servers)}"
        )
