"""Typer CLI entry point for J-Pub Variants."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from j_pub_variants.config import PublishConfig, load_declarations
from j_pub_variants.exceptions import DeclarationError, JPubError
from j_pub_variants.metadata import JsonMetadataProvider, patch_provider
from j_pub_variants.models import DeclaredDependencies
from j_pub_variants.pom import load_pom, write_pom
from j_pub_variants.publishing import Publication, PublicationPipeline, plan_publications
from j_pub_variants.visualize import build_dependency_tree

app = typer.Typer(add_completion=False, help="Publish multi-variant components with correct coordinates.")
console = Console()


def _log_level(verbose: bool) -> tuple[int, str | None]:
    """Return the log level to use and the rejected JPUB_LOG_LEVEL value, if any."""
    if verbose:
        return logging.DEBUG, None
    requested = os.getenv("JPUB_LOG_LEVEL", "WARNING").strip().upper()
    level = logging.getLevelName(requested)
    if isinstance(level, int):
        return level, None
    return logging.WARNING, requested


def _setup_logging(verbose: bool) -> None:
    level, rejected = _log_level(verbose)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    if rejected is not None:
        logging.getLogger(__name__).warning("Unknown JPUB_LOG_LEVEL '%s', using WARNING", rejected)


def _config(ctx: typer.Context) -> PublishConfig:
    path: Path | None = ctx.obj.get("config") if ctx.obj else None
    if path is None:
        return PublishConfig.from_env()
    return PublishConfig.from_file(path)


def _fail(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    return typer.Exit(code=1)


@app.callback()
def main_options(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Publishing TOML file (default: $JPUB_CONFIG or publishing.toml)."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    ctx.obj = {"config": config}
    _setup_logging(verbose)


@app.command()
def components(ctx: typer.Context) -> None:
    """List the configured components and variants."""
    try:
        config = _config(ctx)
    except JPubError as exc:
        raise _fail(exc) from None

    table = Table(title=f"Publications ({config.internal_group})")
    table.add_column("Ref", style="bold")
    table.add_column("Publication")
    table.add_column("Coordinates", no_wrap=True)

    for component in config.components.values():
        for name, publication in plan_publications(component, DeclaredDependencies(), config.variants).items():
            table.add_row(component.ref, name, publication.gav().compact())
    console.print(table)

    if config.variants:
        console.print(
            "[dim]Variants: "
            + ", ".join(f"{v.label} (-{v.artifact_suffix})" for v in config.variants)
            + "[/dim]"
        )


@app.command()
def pom(
    ctx: typer.Context,
    declarations: Annotated[Path, typer.Argument(help="TOML file with declared dependencies per component.")],
    component: Annotated[str, typer.Option("--component", help="Internal reference of the component.")],
    variant: Annotated[Optional[str], typer.Option("--variant", help="Variant label.")] = None,
    base: Annotated[
        Optional[Path],
        typer.Option("--base", help="Existing POM whose dependency section is replaced."),
    ] = None,
    out: Annotated[Optional[Path], typer.Option("--out", help="Output POM path.")] = None,
) -> None:
    """Build the POM of one publication and print its dependency tree."""
    try:
        config = _config(ctx)
        registry = config.registry()
        declared = load_declarations(declarations)
        if component not in declared:
            raise DeclarationError(f"No declarations for component '{component}' in {declarations}")

        publication = Publication(
            component=registry.resolve(component),
            declared=declared[component],
            variant=registry.variant(variant) if variant else None,
        )
        pipeline = PublicationPipeline(registry, config.project)
        root, records = pipeline.build_pom(publication, base=load_pom(base) if base else None)

        console.print(build_dependency_tree(publication.gav(), records, registry.internal_group))
        if out is not None:
            write_pom(root, out)
            console.print(f"[green]Wrote[/green] {out}")
    except JPubError as exc:
        raise _fail(exc) from None


@app.command("patch-metadata")
def patch_metadata_cmd(
    ctx: typer.Context,
    module: Annotated[Path, typer.Argument(help="Generated module metadata JSON file.")],
    variant: Annotated[str, typer.Option("--variant", help="Variant label.")],
    out: Annotated[Optional[Path], typer.Option("--out", help="Output path (default: in place).")] = None,
) -> None:
    """Rewrite project references in a module metadata file for a variant."""
    try:
        config = _config(ctx)
        registry = config.registry()
        renamed = patch_provider(JsonMetadataProvider(module, out), registry.variant(variant), registry)
        console.print(f"[green]Patched[/green] {renamed} dependency entr{'y' if renamed == 1 else 'ies'}.")
    except JPubError as exc:
        raise _fail(exc) from None


@app.command()
def publish(
    ctx: typer.Context,
    declarations: Annotated[Path, typer.Argument(help="TOML file with declared dependencies per component.")],
    out: Annotated[Path, typer.Option("--out", help="Output directory.")] = Path("build/publications"),
    metadata_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--metadata-dir",
            help="Directory with generated metadata, one '<component>/<publication>/module.json' per variant.",
        ),
    ] = None,
) -> None:
    """Write POMs (and patched module metadata) for every declared component."""
    try:
        config = _config(ctx)
        registry = config.registry()
        declared = load_declarations(declarations)
        pipeline = PublicationPipeline(registry, config.project)

        written = 0
        for ref, deps in declared.items():
            plans = plan_publications(registry.resolve(ref), deps, registry.variants)
            for publication in plans.values():
                provider = None
                if metadata_dir is not None and publication.variant is not None:
                    generated = metadata_dir / ref / publication.name / "module.json"
                    if generated.exists():
                        provider = JsonMetadataProvider(generated, out / publication.module_filename())
                pom_path = pipeline.publish(publication, out, metadata=provider)
                console.print(f"[green]Wrote[/green] {pom_path}")
                written += 1

        console.print(f"[green]Published[/green] {written} publication(s) into [bold]{out}[/bold].")
    except JPubError as exc:
        raise _fail(exc) from None


def main() -> None:
    """Console-script entry point."""
    app()
