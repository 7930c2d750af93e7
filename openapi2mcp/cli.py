"""
Command-line interface for openapi2mcp.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from .codegen import generate_files
from .config import DEFAULT_MAX_TOOL_NAME_LENGTH, ConverterOptions, OAuth2Info
from .converter import convert_document
from .errors import Openapi2McpError
from .loader import load_spec
from .project import write_project

app = typer.Typer(help="Convert OpenAPI specifications to MCP servers")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _oauth2_override(
    authorization_url: Optional[str],
    token_url: Optional[str],
    refresh_url: Optional[str],
) -> Optional[OAuth2Info]:
    """Build the OAuth2 override from the command line flags.

    Raises:
        typer.BadParameter: If only one of the two mandatory URLs is given
    """
    if authorization_url is None and token_url is None:
        if refresh_url is not None:
            raise typer.BadParameter("--oauth-refresh-url needs --oauth-authorization-url and --oauth-token-url")
        return None
    if authorization_url is None or token_url is None:
        raise typer.BadParameter("--oauth-authorization-url and --oauth-token-url must be given together")
    return OAuth2Info(authorization_url=authorization_url, token_url=token_url, refresh_url=refresh_url)


def _options(
    path_filter: Optional[str],
    methods: Optional[List[str]],
    max_tool_name_length: int,
    skip_long_tool_names: bool,
    skip_unsupported: bool,
    required_by_title: bool,
    oauth2_info: Optional[OAuth2Info],
) -> ConverterOptions:
    return ConverterOptions(
        path_filter=path_filter,
        methods=tuple(methods or ()),
        max_tool_name_length=max_tool_name_length,
        skip_long_tool_names=skip_long_tool_names,
        oauth2_info=oauth2_info,
        skip_unsupported=skip_unsupported,
        required_by_title=required_by_title,
    )


@app.command()
def generate(
    input_file: Path = typer.Argument(..., help="Path to the OpenAPI specification (JSON or YAML)"),
    output_dir: Path = typer.Option(Path("output"), "--output", "-o", help="Output directory for the generated MCP server"),
    template_dir: Optional[Path] = typer.Option(None, "--template", "-t", help="TypeScript project skeleton to copy into the output directory"),
    path_filter: Optional[str] = typer.Option(None, "--path-filter", help="Only convert paths matching this regex"),
    methods: Optional[List[str]] = typer.Option(None, "--method", "-m", help="Only convert these HTTP methods (repeatable)"),
    max_tool_name_length: int = typer.Option(DEFAULT_MAX_TOOL_NAME_LENGTH, "--max-tool-name-length", help="Longest allowed tool name"),
    skip_long_tool_names: bool = typer.Option(False, "--skip-long-tool-names", help="Skip operations whose tool name is too long instead of failing"),
    skip_unsupported: bool = typer.Option(False, "--skip-unsupported", help="Skip operations using unsupported constructs instead of failing"),
    required_by_title: bool = typer.Option(False, "--required-by-title", help="Match required lists against schema titles instead of property names"),
    oauth_authorization_url: Optional[str] = typer.Option(None, "--oauth-authorization-url", help="OAuth2 authorization URL (overrides the document)"),
    oauth_token_url: Optional[str] = typer.Option(None, "--oauth-token-url", help="OAuth2 token URL (overrides the document)"),
    oauth_refresh_url: Optional[str] = typer.Option(None, "--oauth-refresh-url", help="OAuth2 refresh URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """Generate a TypeScript MCP server from an OpenAPI specification."""
    _configure_logging(verbose)
    oauth2_info = _oauth2_override(oauth_authorization_url, oauth_token_url, oauth_refresh_url)
    options = _options(
        path_filter, methods, max_tool_name_length, skip_long_tool_names,
        skip_unsupported, required_by_title, oauth2_info,
    )

    try:
        server = convert_document(load_spec(input_file), options)
        files = generate_files(server)
        write_project(server, files, output_dir, template_dir)
    except (Openapi2McpError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Generated {output_dir} ({server.tool_count} tools)")


@app.command()
def inspect(
    input_file: Path = typer.Argument(..., help="Path to the OpenAPI specification (JSON or YAML)"),
    path_filter: Optional[str] = typer.Option(None, "--path-filter", help="Only convert paths matching this regex"),
    methods: Optional[List[str]] = typer.Option(None, "--method", "-m", help="Only convert these HTTP methods (repeatable)"),
    max_tool_name_length: int = typer.Option(DEFAULT_MAX_TOOL_NAME_LENGTH, "--max-tool-name-length", help="Longest allowed tool name"),
    skip_long_tool_names: bool = typer.Option(False, "--skip-long-tool-names", help="Skip operations whose tool name is too long instead of failing"),
    skip_unsupported: bool = typer.Option(False, "--skip-unsupported", help="Skip operations using unsupported constructs instead of failing"),
    required_by_title: bool = typer.Option(False, "--required-by-title", help="Match required lists against schema titles instead of property names"),
) -> None:
    """List the tools a specification converts to, without writing anything."""
    options = _options(
        path_filter, methods, max_tool_name_length, skip_long_tool_names,
        skip_unsupported, required_by_title, None,
    )
    try:
        server = convert_document(load_spec(input_file), options)
    except Openapi2McpError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"{server.name} {server.version} ({server.base_url or 'no base URL'})")
    for tool in server.tools:
        typer.echo(f"  {tool.name}: {tool.call.method} {tool.call.path} ({len(tool.properties)} properties)")
    typer.echo(f"{server.tool_count} tools")


def main():
    """Entry point for the CLI."""
    app()
