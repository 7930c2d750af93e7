"""Shared OpenAPI documents for the converter and generator tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# One path, GET with a path parameter, POST with a flattened JSON body
# ---------------------------------------------------------------------------

ITEMS_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Items API", "version": "1.2.0", "description": "Manage items"},
    "servers": [{"url": "https://api.example.com/v1"}],
    "paths": {
        "/items/{itemId}": {
            "get": {
                "summary": "Get an item",
                "parameters": [
                    {
                        "name": "itemId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "string"},
                    },
                ],
            },
            "post": {
                "summary": "Create an item",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "required": ["name", "qty"],
                                "properties": {
                                    "name": {"type": "string"},
                                    "qty": {"type": "integer"},
                                },
                            },
                        },
                    },
                },
            },
        },
    },
}


# ---------------------------------------------------------------------------
# A richer document: components, path-level parameters, OAuth2, allOf
# ---------------------------------------------------------------------------

PETS_SPEC: dict[str, Any] = {
    "openapi": "3.1.0",
    "info": {"title": "Pet Store", "version": "2.0.0"},
    "servers": [{"url": "https://pets.example.com"}],
    "paths": {
        "/pets": {
            "get": {
                "description": "List pets.\nSupports \"status\" filtering.",
                "parameters": [
                    {"$ref": "#/components/parameters/Limit"},
                    {
                        "name": "status",
                        "in": "query",
                        "schema": {"type": "array", "items": {"type": "string"}},
                    },
                    {
                        "name": "X-Request-Id",
                        "in": "header",
                        "schema": {"type": "string"},
                    },
                ],
            },
            "post": {
                "requestBody": {"$ref": "#/components/requestBodies/NewPet"},
            },
        },
        "/pets/{petId}": {
            "parameters": [
                {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}},
            ],
            "get": {"operationId": "getPet"},
            "delete": {},
            "put": {
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Pet"},
                        },
                    },
                },
            },
        },
        "/pets/{petId}/tags": {
            "$ref": "#/components/pathItems/PetTags",
        },
    },
    "components": {
        "parameters": {
            "Limit": {
                "name": "limit",
                "in": "query",
                "description": "Maximum number of pets",
                "schema": {"type": "integer", "default": 20},
            },
        },
        "requestBodies": {
            "NewPet": {
                "required": True,
                "content": {
                    "application/json; charset=utf-8": {
                        "schema": {"$ref": "#/components/schemas/NewPet"},
                    },
                },
            },
        },
        "schemas": {
            "Tag": {
                "type": "object",
                "properties": {"label": {"type": "string"}},
            },
            "NewPet": {
                "allOf": [
                    {"$ref": "#/components/schemas/PetBase"},
                    {
                        "type": "object",
                        "required": ["kind"],
                        "properties": {
                            "kind": {"type": "string", "enum": ["cat", "dog"]},
                            "tags": {"type": "array", "items": {"$ref": "#/components/schemas/Tag"}},
                        },
                    },
                ],
            },
            "PetBase": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "description": "The pet's name"},
                    "vaccinated": {"type": "boolean", "default": False},
                },
            },
            "Pet": {
                "allOf": [
                    {"$ref": "#/components/schemas/NewPet"},
                    {"type": "object", "properties": {"id": {"type": "integer"}}},
                ],
            },
        },
        "pathItems": {
            "PetTags": {
                "parameters": [
                    {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}},
                ],
                "post": {
                    "requestBody": {
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": {"type": "string"}},
                            },
                        },
                    },
                },
            },
        },
        "securitySchemes": {
            "apiKey": {"type": "apiKey", "name": "X-Api-Key", "in": "header"},
            "petAuth": {
                "type": "oauth2",
                "flows": {
                    "authorizationCode": {
                        "authorizationUrl": "https://auth.example.com/authorize",
                        "tokenUrl": "https://auth.example.com/token",
                        "scopes": {},
                    },
                },
            },
        },
    },
}


@pytest.fixture
def items_spec() -> dict[str, Any]:
    return copy.deepcopy(ITEMS_SPEC)


@pytest.fixture
def pets_spec() -> dict[str, Any]:
    return copy.deepcopy(PETS_SPEC)


@pytest.fixture
def items_spec_file(tmp_path: Path) -> Path:
    """ITEMS_SPEC written to disk as JSON."""
    path = tmp_path / "items.json"
    path.write_text(json.dumps(ITEMS_SPEC))
    return path


def make_spec(paths: dict[str, Any], **extra: Any) -> dict[str, Any]:
    """Minimal valid document around ``paths``."""
    spec = {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": paths,
    }
    spec.update(extra)
    return spec
