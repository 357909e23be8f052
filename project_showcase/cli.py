#!/usr/bin/env python3
"""CLI interface for project-showcase."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .converter import build_showcase, convert_markdown_file
from .projects import ALL_CATEGORIES, DEFAULT_NAME_FILTER


@click.command()
@click.argument(
    "markdown_file", type=click.Path(path_type=Path), required=False
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file path (default: showcase.html, or the Markdown file with an .html extension)",
)
@click.option(
    "--username",
    envvar="PROJECT_SHOWCASE_USERNAME",
    help="GitHub user whose repositories are shown (env: PROJECT_SHOWCASE_USERNAME)",
)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    help="GitHub token for private repositories or higher rate limits (env: GITHUB_TOKEN)",
)
@click.option(
    "--name-filter",
    default=DEFAULT_NAME_FILTER,
    show_default=True,
    help="Only show repositories whose name contains this text",
)
@click.option(
    "--category",
    default=ALL_CATEGORIES,
    show_default=True,
    help="Initially selected category filter",
)
@click.option(
    "--updated-since",
    type=str,
    help='Only show projects updated since this date (e.g., "2 weeks ago", "2025-08-01")',
)
@click.option(
    "--fallback",
    "fallback_path",
    type=click.Path(path_type=Path),
    help="projects.json to use when the GitHub API is unavailable",
)
@click.option(
    "--readmes/--no-readmes",
    default=True,
    help="Fetch and embed each project's rendered README (default: on)",
)
@click.option("--title", type=str, help="Page title")
@click.option(
    "--open-browser",
    is_flag=True,
    help="Open the generated HTML file in the default browser",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging and show full traceback on errors.",
)
def main(
    markdown_file: Optional[Path],
    output: Optional[Path],
    username: Optional[str],
    token: Optional[str],
    name_filter: str,
    category: str,
    updated_since: Optional[str],
    fallback_path: Optional[Path],
    readmes: bool,
    title: Optional[str],
    open_browser: bool,
    debug: bool,
) -> None:
    """Build a GitHub project showcase page, or render a Markdown file to HTML.

    MARKDOWN_FILE: Optional Markdown file to render as a standalone page. Without it, the showcase for --username is built.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        if markdown_file is not None:
            output_path = convert_markdown_file(markdown_file, output)
            click.echo(f"Successfully converted {markdown_file} to {output_path}")
        else:
            if not username:
                raise click.UsageError(
                    "Provide a MARKDOWN_FILE or --username (or set PROJECT_SHOWCASE_USERNAME)"
                )
            output_path = build_showcase(
                username,
                output,
                token=token,
                name_filter=name_filter,
                category=category,
                updated_since=updated_since,
                fallback_path=fallback_path,
                include_readmes=readmes,
                title=title,
            )
            click.echo(f"Successfully built showcase for {username} at {output_path}")

        if open_browser:
            click.launch(str(output_path))

    except click.UsageError:
        raise
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        if debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error building showcase: {e}", err=True)
        if debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
