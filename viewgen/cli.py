"""CLI entry point for viewgen.

The CLI is the human side of generation: it picks endpoints and artifact
types, asks about overwrites, and reports results. All of it is passed to
the core as already-made decisions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import click

from .codegen import generate_batch, generate_one
from .config import GeneratorConfig, find_config, load_config
from .errors import UserCancelledError, ViewgenError
from .extractor import extract, filter_endpoints, write_permissions
from .loader import load_document
from .models import EndpointDescriptor, GenerationResult, Outcome, count_outcomes


class Session:
    """State carried between CLI steps: config, document, descriptors.

    The document is loaded on first use so ``--help`` never fetches.
    """

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self._document: dict[str, Any] | None = None
        self._descriptors: list[EndpointDescriptor] | None = None

    @property
    def document(self) -> dict[str, Any]:
        if self._document is None:
            if not self.config.source:
                raise click.UsageError(
                    "No OpenAPI source: pass --source or set 'source' in viewgen.yaml"
                )
            self._document = load_document(self.config.source)
        return self._document

    @property
    def descriptors(self) -> list[EndpointDescriptor]:
        if self._descriptors is None:
            self._descriptors = extract(
                self.document,
                transform=self.config.descriptor_transform,
                permissions_path=self.config.permissions_path,
            )
        return self._descriptors

    def select(self, paths: tuple[str, ...], keyword: str | None) -> list[EndpointDescriptor]:
        """Descriptors named by path (in the order given), else by keyword."""
        candidates = filter_endpoints(self.descriptors, keyword)
        if not paths:
            return candidates
        by_path = {d.path: d for d in candidates}
        missing = [p for p in paths if p not in by_path]
        if missing:
            raise click.UsageError(f"Unknown endpoint path(s): {', '.join(missing)}")
        return [by_path[p] for p in dict.fromkeys(paths)]


def _overwrite_prompt(assume_yes: bool) -> Callable[[list[str]], bool]:
    def confirm(paths: list[str]) -> bool:
        click.echo(f"{len(paths)} file(s) already exist:")
        for path in paths:
            click.echo(f"  {path}")
        if assume_yes:
            return True
        return click.confirm("Overwrite?", default=False)
    return confirm


def _echo_result(result: GenerationResult) -> None:
    if result.outcome is Outcome.SUCCESS:
        click.secho("  ✔ ", fg="green", nl=False)
        click.echo(f"{result.artifact_type}: {result.destination_path}")
    elif result.outcome is Outcome.SKIPPED:
        click.secho("  - ", fg="yellow", nl=False)
        click.echo(f"{result.artifact_type}: {result.destination_path} (skipped)")
    else:
        click.secho("  ✖ ", fg="red", nl=False)
        click.echo(f"{result.artifact_type}: {result.destination_path}")
        click.echo(f"     error: {result.reason}")


@click.group()
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Config file (default: nearest viewgen.yaml).")
@click.option("-s", "--source", default=None, help="OpenAPI document path or URL.")
@click.option("-o", "--output-root", default=None, help="Root directory for generated files.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, source: str | None,
         output_root: str | None, verbose: bool):
    """viewgen: generate view files from an OpenAPI document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = config_path or find_config()
    try:
        config = load_config(config_path) if config_path else GeneratorConfig()
    except ViewgenError as exc:
        raise click.ClickException(str(exc)) from exc

    if source:
        config.source = source
    if output_root:
        config.output_root = output_root
    ctx.obj = Session(config)


@main.command("list")
@click.option("-k", "--keyword", default=None, help="Filter by name, path or method.")
@click.pass_obj
def list_endpoints(session: Session, keyword: str | None):
    """List documented endpoints."""
    try:
        descriptors = filter_endpoints(session.descriptors, keyword)
    except ViewgenError as exc:
        raise click.ClickException(str(exc)) from exc

    for descriptor in descriptors:
        methods = ",".join(m.upper() for m in descriptor.methods)
        click.echo(f"{descriptor.name} ({descriptor.path}) [{methods}]")
    click.echo(f"{len(descriptors)} endpoint(s)")


@main.command()
@click.argument("endpoints", nargs=-1)
@click.option("-t", "--type", "types", multiple=True, required=True,
              help="Artifact type to generate (repeatable).")
@click.option("-k", "--keyword", default=None, help="Select endpoints by keyword.")
@click.option("-p", "--path", "override_path", default=None,
              help="Destination override (single endpoint and type only).")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Overwrite existing files without asking.")
@click.pass_obj
def generate(session: Session, endpoints: tuple[str, ...], types: tuple[str, ...],
             keyword: str | None, override_path: str | None, assume_yes: bool):
    """Generate files for ENDPOINTS (OpenAPI paths) or for --keyword matches."""
    if not endpoints and not keyword:
        raise click.UsageError("Select endpoints by path or with --keyword.")

    artifact_types = list(dict.fromkeys(types))
    try:
        selected = session.select(endpoints, keyword)
    except ViewgenError as exc:
        raise click.ClickException(str(exc)) from exc
    if not selected:
        raise click.ClickException("No endpoints matched.")

    confirm = _overwrite_prompt(assume_yes)
    config = session.config

    if len(selected) == 1 and len(artifact_types) == 1:
        try:
            result = generate_one(selected[0], artifact_types[0], config,
                                  override_path=override_path, confirm_overwrite=confirm)
        except ViewgenError as exc:
            raise click.ClickException(str(exc)) from exc
        _echo_result(result)
        return

    if override_path:
        raise click.UsageError("--path only applies to a single endpoint and type.")

    click.echo(f"Generating {len(selected) * len(artifact_types)} file(s)...")
    try:
        results = generate_batch(selected, artifact_types, config, confirm_overwrite=confirm)
    except UserCancelledError as exc:
        raise click.ClickException(str(exc)) from exc

    counts = count_outcomes(results)
    click.echo(f"Done: {counts[Outcome.SUCCESS]} succeeded, {counts[Outcome.FAILED]} failed")
    for result in results:
        _echo_result(result)
    if counts[Outcome.FAILED]:
        raise click.exceptions.Exit(1)


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path),
              help="JSON file for permission identifiers.")
@click.pass_obj
def permissions(session: Session, output: Path):
    """Write one permission identifier per endpoint path."""
    try:
        document = session.document
    except ViewgenError as exc:
        raise click.ClickException(str(exc)) from exc

    if not write_permissions(document, output):
        raise click.ClickException(f"Could not write {output}")
    click.echo(f"Permission identifiers saved to {output}")
