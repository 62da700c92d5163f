"""CLI entry point for reach-analyzer."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from reach_analyzer import __version__
from reach_analyzer.config import build_config, load_config_file, merge_settings
from reach_analyzer.errors import ConfigError, ProgramLoadError
from reach_analyzer.service import analyze


@click.command()
@click.option("--repo", default=None, help="Name of the repository being analyzed.")
@click.option(
    "--sources", default=None,
    help="Comma-separated files where the entrypoints are declared.",
)
@click.option(
    "--sinks", default=None,
    help="Comma-separated files that have changes.",
)
@click.option(
    "--test/--no-test", "test", default=None,
    help="Test mode: analyze ../<repo> instead of the working directory.",
)
@click.option(
    "--root",
    type=click.Path(file_okay=False),
    default=None,
    help="Analysis root. Overrides the --test directory rule.",
)
@click.option("--module", default=None, help="Module identifier (default: <module-prefix><repo>).")
@click.option("--module-prefix", default=None, help="Prefix joined to the repo name to form the module identifier.")
@click.option(
    "--generated-marker", "generated_markers", multiple=True,
    help="Path substring marking generated code to exclude (repeatable).",
)
@click.option(
    "--closures/--no-closures", "link_closures", default=None,
    help="Link functions to their nested closures (default: on).",
)
@click.option(
    "--exact-sinks/--file-sinks", "exact_sinks", default=None,
    help="Require reaching the sink function itself, not just its file.",
)
@click.option(
    "--callgraph",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read a pre-computed JSON call graph instead of parsing Python sources.",
)
@click.option("-j", "--workers", type=click.IntRange(min=1), default=None, help="Search sources in parallel.")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with default values for these options.",
)
@click.option(
    "-f", "--format", "fmt",
    type=click.Choice(["text", "md", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "-o", "--output",
    type=click.Path(resolve_path=True),
    default=None,
    help="Output file path. Defaults to stdout.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
@click.version_option(version=__version__)
def main(
    config_path: str | None,
    fmt: str,
    output: str | None,
    verbose: bool,
    **options,
) -> None:
    """Report which entrypoints can reach functions in changed files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    try:
        file_settings = load_config_file(Path(config_path)) if config_path else {}
        config = build_config(**merge_settings(file_settings, options))
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    try:
        report = analyze(config)
    except ProgramLoadError as exc:
        raise click.ClickException(f"Error loading program: {exc}") from exc

    if fmt == "json":
        text = json.dumps(report.model_dump(), indent=2)
    elif fmt == "md":
        from reach_analyzer.render.markdown import render_markdown
        text = render_markdown(report)
    else:
        from reach_analyzer.render.text import render_text
        text = render_text(report)

    if output:
        Path(output).write_text(text)
        click.echo(f"Report written to {output}")
    else:
        click.echo(text, nl=False)


if __name__ == "__main__":
    main()
