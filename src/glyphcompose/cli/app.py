"""CLI application entry point for glyphcompose.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated, NoReturn

import typer

from glyphcompose import __version__
from glyphcompose.cli.output import (
    SYM_DOT,
    SYM_OK,
    console,
    create_progress,
    print_accept_summary,
    print_error,
    print_header,
    print_names,
    print_project_info,
    print_step,
    print_table,
)
from glyphcompose.config import (
    BBoxConfig,
    BBoxPrecision,
    GlyphComposeSettings,
    LoggingConfig,
    PlacementConfig,
)
from glyphcompose.core import (
    GlyphResolver,
    MarkPositioner,
    accept_all,
    auto_kern,
    components_for,
    expand,
    ligature_outputs,
    pair_key,
    resolve_lookup,
)
from glyphcompose.core.substitution import Slot
from glyphcompose.domain import Character, PairKey, Project
from glyphcompose.exceptions import (
    GlyphComposeError,
    ProjectLoadError,
    ProjectSaveError,
)
from glyphcompose.io import ProjectDocument, ProjectReader, ProjectWriter
from glyphcompose.utils import AcceptLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphcompose",
    help="Compose, position and kern glyphs of a font project from authored rules.",
    add_completion=False,
    no_args_is_help=True,
)

ProjectArg = Annotated[
    Path,
    typer.Argument(help="Path to the JSON project file", show_default=False),
]
OutputOpt = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Output path (default: {name}-composed.json)"),
]
DryRunOpt = Annotated[
    bool,
    typer.Option("--dry-run", help="Compute and report without writing the project"),
]
LogFileOpt = Annotated[
    Path | None,
    typer.Option("--log-file", help="Write detailed logs to file"),
]
LogLevelOpt = Annotated[
    str,
    typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
]
QuietOpt = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Minimal console output"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]glyphcompose[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Compose, position and kern glyphs of a font project from authored rules."""
    configure_logging()


def _fail(message: str, details: str | None = None) -> NoReturn:
    print_error(message, details=details)
    raise typer.Exit(code=1)


def _setup_logging(settings: GlyphComposeSettings, quiet: bool) -> None:
    """Route engine logs to the console, and to a file when one was requested."""
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )


def _load_project(project_path: Path) -> tuple[ProjectDocument, Project]:
    """Load a project, turning every failure into a CLI error exit."""
    if not project_path.exists():
        _fail(
            f"Project file not found: {project_path}",
            details=f"The file '{project_path}' does not exist or is not accessible.",
        )
    if not project_path.is_file():
        _fail(
            f"Project path is not a file: {project_path}",
            details="Please provide a path to a JSON project file.",
        )

    try:
        with ProjectReader(project_path) as reader:
            return reader.document, reader.read_project()
    except ProjectLoadError as e:
        _fail(f"Could not load project: {e.reason}")
    except GlyphComposeError as e:
        _fail(str(e))


def _save_project(
    project: Project, document: ProjectDocument, project_path: Path, output: Path | None
) -> Path:
    output_path = output or ProjectWriter.get_composed_path(project_path)
    try:
        ProjectWriter(project, output_path, document).save()
    except ProjectSaveError as e:
        _fail(f"Could not save project: {e.reason}")
    return output_path


def _require(project: Project, name: str) -> Character:
    try:
        return project.require(name)
    except GlyphComposeError as e:
        _fail(str(e))


def _format_slot(slot: Slot) -> str:
    return slot[0] if len(slot) == 1 else "[" + " ".join(slot) + "]"


def _format_slots(slots: tuple[Slot, ...]) -> str:
    return " ".join(_format_slot(slot) for slot in slots)


@app.command()
def info(project_path: ProjectArg) -> None:
    """Show project contents and resolution progress."""
    document, project = _load_project(project_path)
    resolver = GlyphResolver(project)
    characters = list(project.iter_characters())

    print_header(__version__)
    print_project_info(
        project_path=str(project_path),
        name=document.name or project_path.stem,
        characters=len(characters),
        drawn=sum(1 for _, outline in project.outlines.items() if outline.is_drawn()),
        upm=project.metrics.units_per_em,
    )

    position_chars = [c for c in characters if c.position is not None]
    kern_chars = [c for c in characters if c.kern is not None]
    rows = [
        ("Character sets", str(len(project.character_sets))),
        ("Groups", str(len(project.groups))),
        ("Lookups", str(len(project.lookups))),
        ("Positioning rules", str(len(project.positioning_rules))),
        ("Position pairs", f"{len(position_chars)} ({len(project.positioning)} accepted)"),
        ("Kern pairs", f"{len(kern_chars)} ({len(project.kerning)} accepted)"),
        ("Complete", f"{sum(1 for c in characters if resolver.is_complete(c))}"),
        ("Renderable", f"{len(resolver.renderable(characters, include_hidden=True))}"),
    ]
    console.print()
    print_table("Summary", ["Item", "Count"], rows)


@app.command(name="expand")
def expand_command(
    project_path: ProjectArg,
    tokens: Annotated[
        list[str],
        typer.Argument(help="Glyph names and @group / $set references", show_default=False),
    ],
) -> None:
    """Expand class references into concrete glyph names."""
    _document, project = _load_project(project_path)
    names = expand(tokens, project.class_table())
    console.print(f"[bold]{len(names)}[/bold] glyphs")
    if names:
        print_names(names)


@app.command()
def match(
    project_path: ProjectArg,
    base: Annotated[str, typer.Argument(help="Base glyph name", show_default=False)],
    mark: Annotated[
        str | None,
        typer.Argument(help="Mark glyph name (omit for mark-less rules)", show_default=False),
    ] = None,
    use_combining_class: Annotated[
        bool,
        typer.Option("--use-combining-class", help="Fall back to Unicode combining-class anchors"),
    ] = False,
) -> None:
    """Show the positioning rule, anchor and offset for a pair."""
    _document, project = _load_project(project_path)
    settings = GlyphComposeSettings(
        placement=PlacementConfig(use_combining_class=use_combining_class)
    )
    positioner = MarkPositioner.for_project(project, settings)

    base_char = _require(project, base)
    result = positioner.matcher.match(base, mark)
    if result is None:
        console.print(f"No positioning rule covers {base} {SYM_DOT} {mark or '(no mark)'}")
    else:
        rule = result.rule
        console.print(f"Rule #{result.index} {SYM_DOT} movement {result.movement.value}")
        console.print(
            f"  fuse {result.fuse} {SYM_DOT} gpos {rule.gpos or '-'} {SYM_DOT} gsub {rule.gsub or '-'}"
        )

    if mark is None:
        return

    mark_char = _require(project, mark)
    anchor = positioner.anchor_for(base_char, mark_char)
    if anchor is None:
        console.print("Anchor: geometric default")
    else:
        console.print(
            f"Anchor: {anchor.base_point.value} -> {anchor.mark_point.value} "
            f"({anchor.dx:g}, {anchor.dy:g})"
        )

    resolver = GlyphResolver(project, settings)
    offset = positioner.offset_for(
        base_char, mark_char, resolver.resolve(base_char), resolver.resolve(mark_char)
    )
    if offset is None:
        console.print("Default offset: unavailable (glyph not drawn)")
    else:
        console.print(f"Default offset: ({offset.x:g}, {offset.y:g})")

    key = pair_key((base, mark), project.characters_by_name())
    accepted = project.positioning.get(key) if key is not None else None
    if accepted is not None:
        console.print(f"Accepted offset: ({accepted.x:g}, {accepted.y:g})")


@app.command(name="accept-all")
def accept_all_command(
    project_path: ProjectArg,
    output: OutputOpt = None,
    precision: Annotated[
        BBoxPrecision,
        typer.Option("--precision", "-p", help="Bounding-box precision"),
    ] = BBoxPrecision.SAMPLED,
    mark_gap: Annotated[
        float,
        typer.Option("--mark-gap", help="Clearance between base top and mark", min=0.0, max=500.0),
    ] = 0.0,
    use_combining_class: Annotated[
        bool,
        typer.Option("--use-combining-class", help="Fall back to Unicode combining-class anchors"),
    ] = False,
    dry_run: DryRunOpt = False,
    log_file: LogFileOpt = None,
    log_level: LogLevelOpt = "WARNING",
    quiet: QuietOpt = False,
) -> None:
    """Accept default offsets and neutral kerning for every unresolved pair.

    Example:
        glyphcompose accept-all devanagari.json

    This will create devanagari-composed.json with every drawn position
    pair positioned and every kern pair given a value.
    """
    settings = GlyphComposeSettings(
        bbox=BBoxConfig(precision=precision),
        placement=PlacementConfig(mark_gap=mark_gap, use_combining_class=use_combining_class),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    _setup_logging(settings, quiet)

    if not quiet:
        print_header(__version__)
        print_step("Loading project")
    document, project = _load_project(project_path)

    if not quiet:
        print_step("Accepting pairs")

    accept_logger = AcceptLogger()
    if not quiet:
        with create_progress() as progress:
            task_id = progress.add_task("Accepting", total=None)

            def update_progress(completed: int, total: int) -> None:
                progress.update(task_id, completed=completed, total=total)

            result = accept_all(project, settings, update_progress, accept_logger)
    else:
        result = accept_all(project, settings, accept_logger=accept_logger)

    result.apply_to(project)

    output_path = None if dry_run else _save_project(project, document, project_path, output)
    if not quiet:
        print_accept_summary(
            output_path=str(output_path) if output_path is not None else None,
            positioned=result.positioned,
            cascaded=result.cascaded,
            fused=result.fused,
            kerned=result.kerned,
            skipped=result.skipped,
        )


def _kerning_pairs(project: Project, overwrite: bool) -> list[tuple[Character, Character]]:
    """Recommended pairs, then kern-pair characters, each pair once."""
    characters = project.characters_by_name()
    classes = project.class_table()
    names: list[tuple[str, str]] = []
    for rec in project.kerning_recommendations:
        for left in expand([rec.left], classes):
            names.extend((left, right) for right in expand([rec.right], classes))
    names.extend(c.kern for c in project.iter_characters() if c.kern is not None)

    pairs: list[tuple[Character, Character]] = []
    seen: set[PairKey] = set()
    for left, right in names:
        key = pair_key((left, right), characters)
        if key is None or key in seen or (key in project.kerning and not overwrite):
            continue
        seen.add(key)
        pairs.append((characters[left], characters[right]))
    return pairs


@app.command()
def autokern(
    project_path: ProjectArg,
    output: OutputOpt = None,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Recompute pairs that already have a value"),
    ] = False,
    dry_run: DryRunOpt = False,
    log_file: LogFileOpt = None,
    log_level: LogLevelOpt = "WARNING",
    quiet: QuietOpt = False,
) -> None:
    """Compute kerning for recommended pairs and kern-pair characters."""
    settings = GlyphComposeSettings(logging=LoggingConfig(log_file=log_file, log_level=log_level))
    _setup_logging(settings, quiet)

    if not quiet:
        print_header(__version__)
        print_step("Loading project")
    document, project = _load_project(project_path)

    pairs = _kerning_pairs(project, overwrite)
    if not pairs:
        if not quiet:
            console.print("\nNo pairs to kern. Nothing to process.")
        raise typer.Exit(code=0)

    if not quiet:
        print_step(f"Kerning {len(pairs)} pairs")

    resolver = GlyphResolver(project, settings)
    args = (pairs, resolver.resolve, project.metrics, project.kerning_recommendations, settings)
    if not quiet:
        with create_progress() as progress:
            task_id = progress.add_task("Kerning", total=len(pairs))

            def update_progress(completed: int, _total: int) -> None:
                progress.update(task_id, completed=completed)

            fragment = auto_kern(*args, progress=update_progress)
    else:
        fragment = auto_kern(*args)

    merged = project.kerning.copy()
    for key, value in fragment.items():
        merged.set(key, value)
    project.kerning = merged

    output_path = None if dry_run else _save_project(project, document, project_path, output)
    if not quiet:
        console.print(f"\n[bold green]{SYM_OK} Complete[/bold green]")
        if output_path is not None:
            console.print(f"  {output_path}")
        console.print(f"  {len(fragment)} pairs kerned {SYM_DOT} {len(pairs) - len(fragment)} skipped")


@app.command()
def lookups(
    project_path: ProjectArg,
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Only show the lookup with this name"),
    ] = None,
    glyph: Annotated[
        str | None,
        typer.Option("--glyph", "-g", help="Show the ligature components of a glyph"),
    ] = None,
) -> None:
    """Show substitution lookups with every class reference expanded."""
    _document, project = _load_project(project_path)
    classes = project.class_table()

    if glyph is not None:
        components = components_for(glyph, project.lookups, classes)
        if components is None:
            _fail(f"No ligature rule produces '{glyph}'")
        console.print(f"{glyph} = {' + '.join(components)}")
        return

    selected = [lookup for lookup in project.lookups if name is None or lookup.name == name]
    if not selected:
        _fail(f"Lookup not found: {name}" if name else "Project has no lookups")

    for lookup in selected:
        resolved = resolve_lookup(lookup, classes)
        rows = [
            (
                rule.kind.value,
                _format_slots(rule.left),
                _format_slots(rule.inputs),
                _format_slots(rule.right),
                " ".join(rule.outputs),
            )
            for rule in resolved.rules
        ]
        print_table(lookup.name, ["Kind", "Before", "Input", "After", "Output"], rows)

    if name is None:
        ligatures = ligature_outputs(project.lookups, classes)
        console.print(f"\n{len(ligatures)} ligatures")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
