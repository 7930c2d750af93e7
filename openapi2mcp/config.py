"""Converter configuration.

Everything the converter can be told lives in ConverterOptions, which is
passed by value into every conversion step.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MAX_TOOL_NAME_LENGTH = 80

# Order matters: tools are emitted per path in this method order.
SUPPORTED_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch")


@dataclass(frozen=True)
class OAuth2Info:
    """Endpoints of an OAuth2 authorization-code flow."""

    authorization_url: str
    token_url: str
    refresh_url: str | None = None


@dataclass(frozen=True)
class ConverterOptions:
    """Options for converting a document into a Server.

    path_filter: regex searched in each path; non-matching paths are skipped.
    methods: allow-list of HTTP methods (case-insensitive); empty allows all.
    max_tool_name_length / skip_long_tool_names: name length policy.
    oauth2_info: takes precedence over a flow found in the document.
    skip_unsupported: skip operations using unsupported constructs instead
        of failing the run.
    required_by_title: link an object's ``required`` list to each property's
        own ``title`` instead of its property name. This is the legacy
        behavior; properties without a title always come out optional.
    """

    path_filter: str | None = None
    methods: tuple[str, ...] = field(default_factory=tuple)
    max_tool_name_length: int = DEFAULT_MAX_TOOL_NAME_LENGTH
    skip_long_tool_names: bool = False
    oauth2_info: OAuth2Info | None = None
    skip_unsupported: bool = False
    required_by_title: bool = False

    def allows_method(self, method: str) -> bool:
        if not self.methods:
            return True
        return method.lower() in {m.lower() for m in self.methods}
