"""Enable or strip feature blocks in template files.

Template sources mark optional code with paired comment lines::

    // START_OF Features.Auth
    // const token = await refreshToken();
    // END_OF Features.Auth

The marker lines are always removed. Lines in between are uncommented
when the feature is enabled and dropped when it is not.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import TemplateFeatureError

START_TOKEN = "// START_OF"
END_TOKEN = "// END_OF"
AUTH_FEATURE = "Features.Auth"


@dataclass(frozen=True)
class Features:
    auth: bool = False


def _feature_name(line: str, token: str) -> str:
    name = line.strip()[len(token):].strip()
    if name != AUTH_FEATURE:
        raise TemplateFeatureError(f"Unknown feature: {name!r}")
    return name


def apply_features(features: Features, text: str) -> str | None:
    """Process the feature blocks of ``text``.

    Returns None when ``text`` contains no block at all, so callers can
    leave such files untouched. Trailing newlines are preserved.
    """
    trailing_newlines = len(text) - len(text.rstrip("\n"))
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()

    in_auth_block = False
    modified = False
    output = []
    for line in lines:
        stripped = line.lstrip()
        if stripped.startswith(START_TOKEN):
            _feature_name(stripped, START_TOKEN)
            in_auth_block = True
            modified = True
        elif stripped.startswith(END_TOKEN):
            _feature_name(stripped, END_TOKEN)
            in_auth_block = False
        elif in_auth_block:
            if features.auth:
                output.append(line.replace("// ", "", 1))
        else:
            output.append(line)

    if not modified:
        return None
    result = "\n".join(output)
    if trailing_newlines:
        result = result.rstrip("\n") + "\n" * trailing_newlines
    return result
