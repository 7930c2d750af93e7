"""Intermediate representation of the MCP server built from a document.

Server -> Tool -> (Property, Call). Instances are frozen and built in a
single pass by the converter; the code generator only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from .config import OAuth2Info

Value = Union[str, int, float, bool]


# ---------------------------------------------------------------------------
# Requiredness
# ---------------------------------------------------------------------------

class Requiredness:
    """Base of REQUIRED, OPTIONAL and DefaultValue."""

    @property
    def is_required(self) -> bool:
        return isinstance(self, IsRequired)


@dataclass(frozen=True)
class IsRequired(Requiredness):
    pass


@dataclass(frozen=True)
class IsOptional(Requiredness):
    pass


@dataclass(frozen=True)
class DefaultValue(Requiredness):
    value: object


REQUIRED = IsRequired()
OPTIONAL = IsOptional()


# ---------------------------------------------------------------------------
# Property types
# ---------------------------------------------------------------------------

class PropertyType:
    """Base of the property type variants."""
    pass


@dataclass(frozen=True)
class StringType(PropertyType):
    pass


@dataclass(frozen=True)
class NumberType(PropertyType):
    pass


@dataclass(frozen=True)
class BooleanType(PropertyType):
    pass


@dataclass(frozen=True)
class ArrayType(PropertyType):
    item: Property


@dataclass(frozen=True)
class ObjectType(PropertyType):
    properties: tuple[Property, ...] = ()

    def get(self, name: str) -> Property | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


STRING = StringType()
NUMBER = NumberType()
BOOLEAN = BooleanType()


@dataclass(frozen=True)
class Property:
    """One named input field of a tool."""

    name: str
    type: PropertyType
    required: Requiredness = OPTIONAL
    description: str | None = None


# ---------------------------------------------------------------------------
# Call and value sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PropertyId:
    """Reference to a Property of the enclosing Tool, by name."""

    name: str


class ValueSource:
    pass


@dataclass(frozen=True)
class Fixed(ValueSource):
    """A literal baked into the generated code."""

    value: Value


@dataclass(frozen=True)
class FromProperty(ValueSource):
    """A value read from the tool's validated input at call time."""

    property_id: PropertyId


@dataclass(frozen=True)
class Body:
    """JSON request body.

    Either ``fields`` (a flattened object: JSON key -> source) or ``whole``
    (one source sent as the entire body) is set.
    """

    fields: dict[str, ValueSource] = field(default_factory=dict)
    whole: ValueSource | None = None

    def sources(self) -> Iterator[ValueSource]:
        yield from self.fields.values()
        if self.whole is not None:
            yield self.whole


@dataclass(frozen=True)
class Call:
    method: str
    path: str
    path_params: dict[str, ValueSource] = field(default_factory=dict)
    query: dict[str, ValueSource] = field(default_factory=dict)
    headers: dict[str, ValueSource] = field(default_factory=dict)
    body: Body | None = None

    def sources(self) -> Iterator[ValueSource]:
        """Every value source of the call, slot by slot."""
        yield from self.path_params.values()
        yield from self.query.values()
        yield from self.headers.values()
        if self.body is not None:
            yield from self.body.sources()

    def property_ids(self) -> list[PropertyId]:
        return [s.property_id for s in self.sources() if isinstance(s, FromProperty)]


# ---------------------------------------------------------------------------
# Tool and Server
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    properties: tuple[Property, ...]
    call: Call

    def property(self, property_id: PropertyId) -> Property | None:
        for prop in self.properties:
            if prop.name == property_id.name:
                return prop
        return None

    def dangling_references(self) -> list[PropertyId]:
        """PropertyIds used by the call that name no property of this tool."""
        return [pid for pid in self.call.property_ids() if self.property(pid) is None]


@dataclass(frozen=True)
class Server:
    name: str
    version: str
    base_url: str
    tools: tuple[Tool, ...] = ()
    description: str | None = None
    oauth2: OAuth2Info | None = None

    @property
    def tool_count(self) -> int:
        return len(self.tools)
