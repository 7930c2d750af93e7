"""Exceptions raised while converting an OpenAPI document."""

from __future__ import annotations


class Openapi2McpError(Exception):
    """Base for all openapi2mcp errors."""
    pass


class SpecValidationError(Openapi2McpError):
    """The document cannot be converted at all (version, title, paths, servers)."""
    pass


class ResolutionError(Openapi2McpError):
    """A $ref could not be followed."""
    pass


class ReferenceNotFoundError(ResolutionError):
    """The referenced component table or entry does not exist."""

    def __init__(self, ref: str, reason: str = "not found") -> None:
        super().__init__(f"Cannot resolve reference {ref!r}: {reason}")
        self.ref = ref


class ReferenceCycleError(ResolutionError):
    """A reference chain leads back to a reference already being followed."""

    def __init__(self, ref: str, seen: frozenset[str] = frozenset()) -> None:
        chain = ", ".join(sorted(seen))
        super().__init__(f"Reference cycle detected at {ref!r} (followed: {chain})")
        self.ref = ref


class SchemaMappingError(Openapi2McpError):
    """A schema node has no property type representation."""
    pass


class ConversionError(Openapi2McpError):
    """An operation could not be turned into a tool."""
    pass


class ToolNameTooLongError(ConversionError):
    def __init__(self, name: str, max_length: int) -> None:
        super().__init__(
            f"Tool name {name!r} is {len(name)} characters long,"
            f" the maximum is {max_length}"
        )
        self.name = name
        self.max_length = max_length


class UnsupportedConstructError(ConversionError):
    """The document uses something the converter does not handle."""

    def __init__(self, kind: str, where: str = "") -> None:
        message = f"Unsupported: {kind}"
        if where:
            message += f" (in {where})"
        super().__init__(message)
        self.kind = kind
        self.where = where


class TemplateFeatureError(Openapi2McpError):
    """A template file references an unknown feature block."""
    pass
