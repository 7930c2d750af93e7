"""Write a generated MCP server project to disk.

Optionally seeds the output directory from a TypeScript template skeleton,
applies the template's feature blocks, then writes the rendered files.
Nothing here decides what the files contain.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Sequence

from .codegen import INDEX_PATH, TOOLS_DIR, GeneratedFile
from .features import Features, apply_features
from .models import Server
from .naming import slugify

logger = logging.getLogger(__name__)

# Never copied from a template skeleton
IGNORED_NAMES = (".git", "node_modules", "dist", "build")


def features_for(server: Server) -> Features:
    return Features(auth=server.oauth2 is not None)


def copy_template(template_dir: Path, output_dir: Path) -> None:
    """Copy the project skeleton into output_dir."""
    if not template_dir.is_dir():
        raise FileNotFoundError(f"Template directory not found: {template_dir}")
    shutil.copytree(
        template_dir,
        output_dir,
        ignore=shutil.ignore_patterns(*IGNORED_NAMES),
        dirs_exist_ok=True,
    )
    logger.info("Copied template from %s to %s", template_dir, output_dir)


def apply_template_features(output_dir: Path, features: Features) -> list[Path]:
    """Run the feature preprocessor over every text file; returns changed files."""
    changed = []
    for path in sorted(output_dir.rglob("*")):
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            continue
        processed = apply_features(features, text)
        if processed is not None:
            path.write_text(processed, encoding="utf-8")
            changed.append(path)
    logger.info("Applied template features to %d files", len(changed))
    return changed


def update_package_json(output_dir: Path, server: Server) -> bool:
    """Set name, version and description in package.json, if there is one."""
    package_json = output_dir / "package.json"
    if not package_json.exists():
        return False
    data = json.loads(package_json.read_text(encoding="utf-8"))
    data["name"] = slugify(server.name)
    data["version"] = server.version
    data["description"] = server.description or ""
    package_json.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    logger.info("Updated package.json with project information")
    return True


def clear_tool_modules(output_dir: Path) -> None:
    """Remove tool modules left over from the template or a previous run."""
    tools_dir = output_dir / TOOLS_DIR
    if not tools_dir.is_dir():
        return
    index = output_dir / INDEX_PATH
    for path in tools_dir.iterdir():
        if path.is_file() and path != index:
            path.unlink()


def write_files(output_dir: Path, files: Sequence[GeneratedFile]) -> list[Path]:
    written = []
    for generated in files:
        path = output_dir / generated.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generated.content, encoding="utf-8")
        written.append(path)
        logger.debug("Wrote %s", path)
    return written


def write_project(
    server: Server,
    files: Sequence[GeneratedFile],
    output_dir: Path | str,
    template_dir: Path | str | None = None,
) -> list[Path]:
    """Materialize the project: skeleton, feature blocks, then generated files."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if template_dir is not None:
        copy_template(Path(template_dir), output_dir)
        apply_template_features(output_dir, features_for(server))
        update_package_json(output_dir, server)

    clear_tool_modules(output_dir)
    written = write_files(output_dir, files)
    logger.info("Generated %s (%d tools)", output_dir, server.tool_count)
    return written
